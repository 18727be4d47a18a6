"""Game engine for Word Collector."""

from .models import (
    Outcome,
    CollectedLetter,
    Round,
    Popup,
    GameConfig,
    GameSnapshot,
    SessionResult,
    WRONG_MARK_SECONDS,
    POPUP_SECONDS,
)
from .grid import generate_grid, generate_round, target_grid_size
from .scheduler import Scheduler, ManualScheduler
from .game import GameEngine

__all__ = [
    "Outcome",
    "CollectedLetter",
    "Round",
    "Popup",
    "GameConfig",
    "GameSnapshot",
    "SessionResult",
    "WRONG_MARK_SECONDS",
    "POPUP_SECONDS",
    "generate_grid",
    "generate_round",
    "target_grid_size",
    "Scheduler",
    "ManualScheduler",
    "GameEngine",
]
