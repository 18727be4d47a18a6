from typing import List

from ..engine.models import GameSnapshot

COLUMNS = 6
PROGRESS_WIDTH = 20


def render_tile(index: int, letter: str, collected: bool, wrong: bool) -> str:
    """Render one tile as a fixed-width cell: [A] plain, (A) collected, !A! wrong."""
    if wrong:
        body = f"!{letter}!"
    elif collected:
        body = f"({letter})"
    else:
        body = f"[{letter}]"
    return f"{index:>2}{body}"


def render_tiles(snapshot: GameSnapshot, columns: int = COLUMNS) -> str:
    """Render the letter grid in rows of `columns` tiles."""
    collected = {c.grid_index for c in snapshot.collected_letters}
    wrong = set(snapshot.wrong_tiles)
    cells = [
        render_tile(i, letter, i in collected, i in wrong)
        for i, letter in enumerate(snapshot.grid)
    ]

    lines: List[str] = []
    for start in range(0, len(cells), columns):
        lines.append('  '.join(cells[start:start + columns]))
    return '\n'.join(lines)


def render_progress(progress: float, width: int = PROGRESS_WIDTH) -> str:
    filled = int(round(progress * width))
    return '[' + '#' * filled + '.' * (width - filled) + ']'


def render_snapshot(snapshot: GameSnapshot) -> str:
    """Render the whole game screen as plain text."""
    word_slots = ''.join(f"[{c}]" for c in snapshot.current_word_display)
    lines = [
        f"Score: {snapshot.score}   Word {min(snapshot.current_word_index + 1, snapshot.total_words)}"
        f"/{snapshot.total_words} {render_progress(snapshot.progress)}",
        f"Word:  {word_slots}",
        f"Typed: {snapshot.tapped_letters_display}",
        "",
        render_tiles(snapshot),
    ]

    if snapshot.popup is not None:
        popup = snapshot.popup
        sign = '+' if popup.points >= 0 else ''
        lines.extend(["", f"*** {popup.message} ({sign}{popup.points}) ***"])

    return '\n'.join(lines)
