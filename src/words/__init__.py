"""Word lists for Word Collector."""

from .meaningful import DEFAULT_WORDS, MEANINGFUL_WORDS, check as check_word

__all__ = [
    "DEFAULT_WORDS",
    "MEANINGFUL_WORDS",
    "check_word",
]
