"""
Pydantic models for the game engine.

This module contains the data models (configuration, rounds, collected letters,
popups and snapshots) used throughout the engine. The main logic lives in
GameEngine (game.py); grid generation lives in grid.py.
"""

from typing import List, Dict, Optional, Tuple, Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator

from ..words import DEFAULT_WORDS


# Type aliases
Outcome = Literal["target", "meaningful", "wrong"]

# Rule timings in seconds
WRONG_MARK_SECONDS = 1.0
POPUP_SECONDS = 1.5

POPUP_MESSAGES: Dict[str, str] = {
    "target": "You completed the word!",
    "meaningful": "You found a meaningful word!",
    "wrong": "That's not a valid word. Try again!",
}


class CollectedLetter(BaseModel):
    """A correct tap: the letter, the tile it came from and the word position it fills."""
    model_config = ConfigDict(frozen=True)

    letter: str = Field(..., min_length=1, max_length=1)
    grid_index: int = Field(..., ge=0)
    word_index: int = Field(..., ge=0)


class Round(BaseModel):
    """One target word plus its generated letter grid."""
    model_config = ConfigDict(frozen=True)

    target_word: str = Field(..., min_length=1, pattern=r'^[a-z]+$')
    grid: Tuple[str, ...]
    epoch: int = 0

    @property
    def size(self) -> int:
        """Number of tiles in the grid."""
        return len(self.grid)


class Popup(BaseModel):
    """Outcome of a submission, shown while the round is frozen."""
    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    submitted: str = ""
    points: int = 0

    @property
    def is_target_word(self) -> bool:
        return self.outcome == "target"

    @property
    def message(self) -> str:
        return POPUP_MESSAGES[self.outcome]


class GameConfig(BaseModel):
    """Configuration for a game session."""
    words: List[str] = Field(default_factory=lambda: list(DEFAULT_WORDS), min_length=1)
    extra_dictionary_words: List[str] = Field(default_factory=list)
    seed: Optional[int] = None
    wrong_mark_seconds: float = Field(default=WRONG_MARK_SECONDS, ge=0)
    popup_seconds: float = Field(default=POPUP_SECONDS, ge=0)

    @field_validator("words", "extra_dictionary_words")
    @classmethod
    def _normalize_words(cls, words: List[str]) -> List[str]:
        normalized = []
        for word in words:
            word = word.strip().lower()
            if not word or not (word.isascii() and word.isalpha()):
                raise ValueError(f"'{word}' is not a word of letters a-z")
            normalized.append(word)
        return normalized


class GameSnapshot(BaseModel):
    """Read-only view of all observable game state."""
    model_config = ConfigDict(frozen=True)

    score: int = 0
    current_word_index: int = 0
    total_words: int = 0
    target_word: str = ""
    grid: List[str] = Field(default_factory=list)
    collected_letters: List[CollectedLetter] = Field(default_factory=list)
    wrong_tiles: List[int] = Field(default_factory=list)
    tapped_letters: List[str] = Field(default_factory=list)
    game_over: bool = False
    popup: Optional[Popup] = None
    epoch: int = 0
    current_word_display: str = ""
    tapped_letters_display: str = ""
    progress: float = 0.0


class SessionResult(BaseModel):
    """Result of a complete terminal session."""
    config: GameConfig
    final_state: GameSnapshot
    taps: int = 0
    correct_taps: int = 0
    wrong_taps: int = 0
    submissions: Dict[str, int] = Field(default_factory=dict)
    words_completed: int = 0
    end_reason: str = ""
    started_at: str = ""
    ended_at: str = ""
    duration_seconds: float = 0.0
