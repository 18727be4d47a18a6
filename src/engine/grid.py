"""Letter grid generation."""

import random
import string
from typing import List

from .models import Round


ALPHABET = string.ascii_uppercase

# Grid size bounds; a word with more distinct letters than MAX_GRID_SIZE
# gets a grid of exactly its distinct letters
MIN_GRID_SIZE = 8
MAX_GRID_SIZE = 10


def target_grid_size(word: str) -> int:
    """Grid size for a word before accounting for its distinct letters."""
    return min(MAX_GRID_SIZE, max(MIN_GRID_SIZE, len(word) + 2))


def generate_grid(word: str, rng: random.Random) -> List[str]:
    """
    Build a shuffled grid holding every distinct letter of `word` once.

    Filler letters are drawn without replacement from the letters the word
    does not use, until the grid reaches target_grid_size(word).

    Args:
        word: The target word
        rng: Random source for filler selection and shuffling

    Returns:
        List of uppercase single-letter tiles
    """
    # Sorted so a seeded rng gives the same grid regardless of set ordering
    letters = sorted(set(word.upper()))
    grid = list(letters)

    needed = target_grid_size(word) - len(grid)
    if needed > 0:
        available = [c for c in ALPHABET if c not in letters]
        grid.extend(rng.sample(available, needed))

    rng.shuffle(grid)
    return grid


def generate_round(word: str, rng: random.Random, epoch: int = 0) -> Round:
    """Create a Round for `word` under the given epoch."""
    return Round(target_word=word.lower(), grid=tuple(generate_grid(word, rng)), epoch=epoch)
