"""
Main entry point for playing Word Collector in the terminal.

Usage:
    python -m src.main
    python -m src.main config.yaml
    python -m src.main config.yaml --seed 7 --output results/run1.json --verbose
"""

import argparse
import asyncio
import json
import sys
import threading
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Optional

import yaml
from loguru import logger

from .engine import GameConfig, GameEngine, SessionResult
from .utils.grid_visualizer import render_snapshot
from .utils.logging import setup_logger


HELP = "Type a letter or tile number to tap, 'submit' (or Enter), 'new', 'reset' or 'quit'."

ReadLine = Callable[[str], Awaitable[Optional[str]]]


def load_config(config_path: str) -> GameConfig:
    """Load game configuration from a YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return GameConfig(**data)


def stdin_reader(loop: asyncio.AbstractEventLoop) -> ReadLine:
    """
    Read stdin lines on a daemon thread and hand them to the event loop.

    Returns:
        Coroutine function that prints a prompt and returns the next line,
        or None at end of input
    """
    lines: asyncio.Queue = asyncio.Queue()

    def pump() -> None:
        try:
            for line in sys.stdin:
                loop.call_soon_threadsafe(lines.put_nowait, line.rstrip("\n"))
            loop.call_soon_threadsafe(lines.put_nowait, None)
        except RuntimeError:
            # Loop closed while waiting for input
            return

    threading.Thread(target=pump, name="stdin-reader", daemon=True).start()

    async def read_line(prompt: str) -> Optional[str]:
        print(prompt, end="", flush=True)
        return await lines.get()

    return read_line


class Session:
    """
    Plays a game through line-based input and text output.

    Attributes:
        engine: The game engine being played
        taps: Number of taps the engine accepted
        correct_taps: Taps that filled a word position
        wrong_taps: Taps that were penalized
        submissions: Submission counts by outcome
        end_reason: Why the session stopped
    """

    def __init__(self, engine: GameEngine, read_line: ReadLine, write: Callable[[str], None] = print):
        self.engine = engine
        self.read_line = read_line
        self.write = write
        self.taps = 0
        self.correct_taps = 0
        self.wrong_taps = 0
        self.submissions: Counter = Counter()
        self.words_completed = 0
        self.end_reason = ""
        self.started_at = datetime.now()

    def show(self) -> None:
        self.write(render_snapshot(self.engine.snapshot()))

    async def play(self) -> None:
        """Read commands until the game is over, input ends, or the player quits."""
        self.write(HELP)
        self.show()

        try:
            while not self.engine.game_over:
                line = await self.read_line("> ")
                if line is None:
                    self.end_reason = "End of input"
                    return
                if line.strip().lower() == "quit":
                    self.end_reason = "Player quit"
                    return

                await self.handle(line.strip())
                self.show()
        except asyncio.CancelledError:
            self.end_reason = "Interrupted by user"
            raise

        self.end_reason = "All words completed"

    async def handle(self, command: str) -> None:
        """Dispatch one command to the engine."""
        lowered = command.lower()

        if lowered in ("", "submit"):
            popup = self.engine.submit_word()
            if popup is not None:
                self.submissions[popup.outcome] += 1
                if popup.is_target_word:
                    self.words_completed += 1
                self.show()
                # Let the popup timer fire before the next prompt
                await asyncio.sleep(self.engine.config.popup_seconds)
                await asyncio.sleep(0)
        elif lowered == "new":
            self.engine.request_new_word()
        elif lowered == "reset":
            self.engine.reset_game()
            self.words_completed = 0
        else:
            index = self.resolve_tile(command)
            if index is None:
                return
            correct = self.engine.tap_letter(index)
            if correct is not None:
                self.taps += 1
                if correct:
                    self.correct_taps += 1
                else:
                    self.wrong_taps += 1

    def resolve_tile(self, command: str) -> Optional[int]:
        """
        Translate a tile number or letter into a grid index.

        Returns:
            The grid index, or None (with a message written) if the input
            does not name a tile
        """
        grid = self.engine.grid

        if command.isdecimal():
            index = int(command)
            if index < len(grid):
                return index
            self.write(f"No tile {index}; tiles are numbered 0-{len(grid) - 1}")
            return None

        if len(command) == 1 and command.isalpha():
            letter = command.upper()
            if letter in grid:
                return grid.index(letter)
            self.write(f"No tile with letter '{letter}'")
            return None

        self.write(f"Unknown input '{command}'. {HELP}")
        return None

    def get_result(self) -> SessionResult:
        """
        Get the session result.

        Returns:
            SessionResult with the final state and tap/submission counts
        """
        ended_at = datetime.now()
        return SessionResult(
            config=self.engine.config,
            final_state=self.engine.snapshot(),
            taps=self.taps,
            correct_taps=self.correct_taps,
            wrong_taps=self.wrong_taps,
            submissions=dict(self.submissions),
            words_completed=self.words_completed,
            end_reason=self.end_reason,
            started_at=self.started_at.isoformat(),
            ended_at=ended_at.isoformat(),
            duration_seconds=(ended_at - self.started_at).total_seconds(),
        )

    def save_result(self, path: str | Path) -> SessionResult:
        """
        Save the session result to a JSON file.

        Args:
            path: Path to save the result file
        """
        result = self.get_result()
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w') as f:
            json.dump(result.model_dump(), f, indent=2, default=str)

        return result


def main():
    parser = argparse.ArgumentParser(
        description="Play Word Collector in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example config.yaml:
  seed: 42
  words:
    - ring
    - dream
    - boy
  extra_dictionary_words:
    - bingo
  popup_seconds: 1.5
        """
    )
    parser.add_argument(
        "config",
        nargs="?",
        help="Path to YAML configuration file (defaults are used without one)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed (overrides the config file)"
    )
    parser.add_argument(
        "--output", "-o",
        help="Path to save results JSON (default: results/session_<timestamp>.json)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log game progress to stderr"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every engine event to stderr"
    )

    args = parser.parse_args()
    setup_logger(verbose=args.verbose, debug=args.debug)

    try:
        config = load_config(args.config) if args.config else GameConfig()
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    if args.seed is not None:
        config = config.model_copy(update={"seed": args.seed})

    if args.output:
        output_path = Path(args.output)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_path = Path("results") / f"session_{timestamp}.json"

    session: Optional[Session] = None

    async def play() -> None:
        nonlocal session
        loop = asyncio.get_running_loop()
        engine = GameEngine.create(config=config, scheduler=loop)
        session = Session(engine, read_line=stdin_reader(loop))
        await session.play()

    try:
        asyncio.run(play())
    except KeyboardInterrupt:
        print("\nGame interrupted by user")
    except Exception as e:
        logger.exception("Game aborted")
        print(f"Error during game: {e}", file=sys.stderr)
        if session is not None:
            session.end_reason = f"Error: {e}"

    if session is None:
        return 1

    result = session.save_result(output_path)
    logger.info(f"Results saved to: {output_path}")

    # Print summary
    print()
    print("=== Game Summary ===")
    print(f"Final score: {result.final_state.score}")
    print(f"Words completed: {result.words_completed}/{result.final_state.total_words}")
    print(f"Taps: {result.taps} ({result.correct_taps} correct, {result.wrong_taps} wrong)")
    print(f"End reason: {result.end_reason}")
    print(f"Duration: {result.duration_seconds:.2f}s")

    return 0


if __name__ == "__main__":
    sys.exit(main())
