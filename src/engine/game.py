import functools
import itertools
import random
import threading
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Set
from loguru import logger
from pydantic import BaseModel, Field, ConfigDict

from ..words import check_word
from .grid import generate_round
from .models import CollectedLetter, GameConfig, GameSnapshot, Popup, Round
from .scheduler import Handle, ManualScheduler, Scheduler


# Scoring rules
CORRECT_TAP_POINTS = 2
WRONG_TAP_PENALTY = 5
TARGET_WORD_POINTS = 10
MEANINGFUL_WORD_POINTS = 5
WRONG_WORD_PENALTY = 2
WORD_LETTER_POINTS = 10  # Bonus per letter when a target word is completed

Listener = Callable[[GameSnapshot], None]


def _locked(method):
    """Run an engine method while holding the engine lock."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class GameEngine(BaseModel):
    """
    Manages the Word Collector game state.

    Handles word sequencing, grid generation, tap validation, submission
    scoring and the round/game lifecycle. Delayed effects (wrong-tile marks
    clearing, popups closing) go through the scheduler and carry the epoch
    they were created under; a new round bumps the epoch so stale effects
    are dropped.

    Attributes:
        config: Session configuration
        current_round: The active round, None until the game starts
        score: Current score, never negative
        current_word_index: Position in the shuffled word list
        collected_letters: Correct taps for the current round
        wrong_tiles: Grid indices currently marked as wrong taps
        tapped_letters: Every letter tapped since the last clear
        game_over: Whether every word has been completed
        popup: Outcome of the last submission while it is showing
        epoch: Generation counter, bumped on every new round
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: GameConfig = Field(default_factory=GameConfig)
    current_round: Optional[Round] = None
    score: int = 0
    current_word_index: int = 0
    collected_letters: List[CollectedLetter] = Field(default_factory=list)
    wrong_tiles: Set[int] = Field(default_factory=set)
    tapped_letters: List[str] = Field(default_factory=list)
    game_over: bool = False
    popup: Optional[Popup] = None
    epoch: int = 0

    _rng: random.Random = None
    _scheduler: Any = None
    _lock: Any = None
    _words: List[str] = None
    _extra_words: FrozenSet[str] = None
    _listeners: List[Listener] = None
    _handles: Dict[int, Handle] = None
    _handle_ids: Any = None
    _popup_timer: Optional[int] = None
    _popup_effect: Any = None

    def model_post_init(self, __context) -> None:
        """Initialize the random source, scheduler and word data after model creation."""
        self._rng = random.Random(self.config.seed)
        self._scheduler = ManualScheduler()
        self._lock = threading.RLock()
        self._words = list(self.config.words)
        self._extra_words = frozenset(self.config.extra_dictionary_words)
        self._listeners = []
        self._handles = {}
        self._handle_ids = itertools.count()

    @classmethod
    def create(
        cls,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
        **config_kwargs: Any
    ) -> "GameEngine":
        """
        Factory method to create an engine with the first round ready.

        Args:
            config: Optional GameConfig instance
            rng: Random source; defaults to one seeded from config.seed
            scheduler: Delayed-task runner, e.g. an asyncio event loop;
                defaults to a ManualScheduler
            **config_kwargs: Config parameters if config not provided

        Returns:
            A started GameEngine
        """
        if config is None:
            config = GameConfig(**config_kwargs)

        engine = cls(config=config)
        if rng is not None:
            engine._rng = rng
        if scheduler is not None:
            engine._scheduler = scheduler
        engine.start_game()
        return engine

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def total_words(self) -> int:
        """Number of words in the session."""
        return len(self._words)

    @property
    def target_word(self) -> str:
        return self.current_round.target_word if self.current_round else ""

    @property
    def grid(self) -> List[str]:
        return list(self.current_round.grid) if self.current_round else []

    @property
    def progress(self) -> float:
        """Fraction of the word list completed."""
        return self.current_word_index / len(self._words)

    @property
    def current_word_display(self) -> str:
        """The target word with collected letters filled in and spaces elsewhere."""
        filled = {c.word_index: c.letter.upper() for c in self.collected_letters}
        return "".join(filled.get(i, " ") for i in range(len(self.target_word)))

    @property
    def tapped_letters_display(self) -> str:
        return " ".join(letter.upper() for letter in self.tapped_letters)

    def is_tile_collected(self, grid_index: int) -> bool:
        """Check if a tile has filled a word position this round."""
        return any(c.grid_index == grid_index for c in self.collected_letters)

    def is_tile_wrong(self, grid_index: int) -> bool:
        """Check if a tile is currently marked as a wrong tap."""
        return grid_index in self.wrong_tiles

    # Lifecycle

    @_locked
    def start_game(self) -> Round:
        """
        Start a fresh game: reshuffle the words and play the first one.

        Returns:
            The first round
        """
        self._reshuffle_words()
        self.score = 0
        self.current_word_index = 0
        self.game_over = False
        self._begin_round()
        logger.info(f"Game started with {self.total_words} words")
        self._notify()
        return self.current_round

    def reset_game(self) -> Round:
        """Reset score and progress and start over with a new word order."""
        logger.debug("Game reset requested")
        return self.start_game()

    @_locked
    def request_new_word(self) -> Optional[Round]:
        """
        Skip to the next word, wrapping to the first after the last.

        The word list is reshuffled first. Score is kept and game_over is
        never set. Does nothing once the game is over.

        Returns:
            The new round, or None if the game is over
        """
        if self.game_over:
            return None

        self._reshuffle_words()
        self.current_word_index = (self.current_word_index + 1) % len(self._words)
        self._begin_round()
        self._notify()
        return self.current_round

    # Play

    @_locked
    def tap_letter(self, grid_index: int) -> Optional[bool]:
        """
        Tap the tile at `grid_index`.

        The tile's letter fills the first unfilled position of the target
        word holding that letter. If there is none the tap is wrong: the
        score drops and the tile is marked until the mark times out. Either
        way the letter is appended to the tapped sequence.

        Args:
            grid_index: Index of the tile in the current grid

        Returns:
            True for a correct tap, False for a wrong one, None if the tap
            was ignored (game over or a popup is showing)

        Raises:
            IndexError: If grid_index does not address a tile
        """
        if self.game_over:
            return None

        round_ = self._require_round()
        if not 0 <= grid_index < round_.size:
            raise IndexError(f"Tile index {grid_index} out of range for grid of {round_.size} tiles")

        if self.popup is not None:
            return None

        letter = round_.grid[grid_index]
        word_index = self._find_open_position(letter)
        self.tapped_letters.append(letter)

        if word_index is not None:
            self.collected_letters.append(CollectedLetter(
                letter=letter,
                grid_index=grid_index,
                word_index=word_index,
            ))
            self.score += CORRECT_TAP_POINTS
        else:
            self.score = max(0, self.score - WRONG_TAP_PENALTY)
            self.wrong_tiles.add(grid_index)
            self._schedule(self.config.wrong_mark_seconds, self._clear_wrong_mark, grid_index)

        self._notify()
        return word_index is not None

    @_locked
    def submit_word(self) -> Optional[Popup]:
        """
        Judge the tapped sequence as a word.

        The target word (case-insensitive) completes the round once the
        popup closes. A meaningful word scores and clears the tapped
        sequence. Anything else costs points and clears the tapped sequence.

        Returns:
            The popup shown, or None if the game is over or a popup is
            already showing
        """
        if self.game_over or self.popup is not None:
            return None

        target = self._require_round().target_word
        submitted = "".join(self.tapped_letters)

        if submitted.lower() == target:
            popup = Popup(outcome="target", submitted=submitted, points=TARGET_WORD_POINTS)
            self.score += TARGET_WORD_POINTS
            self._popup_effect = self._complete_word
        elif self._is_meaningful(submitted):
            popup = Popup(outcome="meaningful", submitted=submitted, points=MEANINGFUL_WORD_POINTS)
            self.score += MEANINGFUL_WORD_POINTS
            self._popup_effect = self._clear_tapped
        else:
            popup = Popup(outcome="wrong", submitted=submitted, points=-WRONG_WORD_PENALTY)
            self.score = max(0, self.score - WRONG_WORD_PENALTY)
            self._popup_effect = self._clear_tapped

        logger.debug(f"Submitted '{submitted}' for '{target}': {popup.outcome}")
        self.popup = popup
        self._popup_timer = self._schedule(self.config.popup_seconds, self._close_popup, popup)
        self._notify()
        return popup

    @_locked
    def dismiss_popup(self) -> bool:
        """
        Close the showing popup now instead of waiting for its timer.

        Returns:
            True if a popup was closed
        """
        if self.popup is None:
            return False

        self._cancel(self._popup_timer)
        self._close_popup(self.popup)
        self._notify()
        return True

    # Observation

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with a fresh snapshot after every change.

        Returns:
            A function that removes the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    @_locked
    def snapshot(self) -> GameSnapshot:
        """Get a read-only view of the current state."""
        return GameSnapshot(
            score=self.score,
            current_word_index=self.current_word_index,
            total_words=self.total_words,
            target_word=self.target_word,
            grid=self.grid,
            collected_letters=list(self.collected_letters),
            wrong_tiles=sorted(self.wrong_tiles),
            tapped_letters=list(self.tapped_letters),
            game_over=self.game_over,
            popup=self.popup,
            epoch=self.epoch,
            current_word_display=self.current_word_display,
            tapped_letters_display=self.tapped_letters_display,
            progress=self.progress,
        )

    def get_state(self) -> Dict:
        """
        Get the current game state as a dictionary.

        Useful for serialization and logging.
        """
        return self.snapshot().model_dump()

    # Internals

    def _require_round(self) -> Round:
        if self.current_round is None:
            raise ValueError("Game not started")
        return self.current_round

    def _find_open_position(self, letter: str) -> Optional[int]:
        filled = {c.word_index for c in self.collected_letters}
        for index, word_letter in enumerate(self.current_round.target_word):
            if word_letter.upper() == letter.upper() and index not in filled:
                return index
        return None

    def _is_meaningful(self, submitted: str) -> bool:
        return check_word(submitted) or submitted.lower() in self._extra_words

    def _reshuffle_words(self) -> None:
        self._rng.shuffle(self._words)
        logger.debug(f"Words reshuffled: {self._words}")

    def _begin_round(self) -> None:
        """Clear round state and generate the round for the current word."""
        self._cancel_pending()
        self.epoch += 1
        self.collected_letters = []
        self.wrong_tiles = set()
        self.tapped_letters = []
        self.popup = None
        self._popup_timer = None
        self._popup_effect = None

        word = self._words[self.current_word_index]
        self.current_round = generate_round(word, self._rng, self.epoch)
        logger.debug(f"Round {self.epoch}: '{word}' on grid {''.join(self.current_round.grid)}")

    def _complete_word(self) -> None:
        word = self.current_round.target_word
        self.score += len(word) * WORD_LETTER_POINTS
        self.current_word_index += 1
        logger.info(f"Completed '{word}' ({self.current_word_index}/{self.total_words}), score {self.score}")

        if self.current_word_index >= len(self._words):
            self.game_over = True
            logger.info(f"Game over, final score {self.score}")
        else:
            self._begin_round()

    def _clear_tapped(self) -> None:
        self.tapped_letters = []

    def _clear_wrong_mark(self, grid_index: int) -> None:
        self.wrong_tiles.discard(grid_index)

    def _close_popup(self, popup: Popup) -> None:
        if self.popup is not popup:
            return
        effect = self._popup_effect
        self.popup = None
        self._popup_timer = None
        self._popup_effect = None
        if effect is not None:
            effect()

    def _schedule(self, delay: float, effect: Callable[..., None], *args: Any) -> int:
        """Schedule an effect for the current epoch and return its timer id."""
        timer_id = next(self._handle_ids)
        self._handles[timer_id] = self._scheduler.call_later(
            delay, self._fire, timer_id, self.epoch, effect, args
        )
        return timer_id

    def _cancel(self, timer_id: Optional[int]) -> None:
        handle = self._handles.pop(timer_id, None)
        if handle is not None:
            handle.cancel()

    def _fire(self, timer_id: int, epoch: int, effect: Callable[..., None], args: tuple) -> None:
        with self._lock:
            self._handles.pop(timer_id, None)
            if epoch != self.epoch:
                logger.debug(f"Dropping stale {effect.__name__} from epoch {epoch} (now {self.epoch})")
                return
            effect(*args)
            self._notify()

    def _cancel_pending(self) -> None:
        for handle in self._handles.values():
            handle.cancel()
        self._handles = {}

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"Game state listener {listener!r} failed")
