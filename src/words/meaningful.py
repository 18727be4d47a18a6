# Word data for Word Collector: the target word list and the set of
# "meaningful" words accepted as alternate completions.

from typing import FrozenSet, Tuple

def check(word):
    '''
    Returns True if `word` is a meaningful word.
    Returns False otherwise.
    '''
    return word.lower() in MEANINGFUL_WORDS

# Target words played in a default session
DEFAULT_WORDS: Tuple[str, ...] = (
    "ring", "dream", "swim", "boy", "doctor", "song",
)

MEANINGFUL_WORDS: FrozenSet[str] = frozenset([
    "ring", "sing", "wing", "king", "bring", "spring", "string", "thing", "swing", "cling",
    "dream", "cream", "stream", "team", "beam", "seam", "gleam", "scream",
    "swim", "dim", "him", "rim", "trim", "grim", "prim", "slim",
    "boy", "toy", "joy", "coy", "ploy", "destroy", "enjoy",
    "doctor", "actor", "factor", "tractor", "reactor", "extractor",
    "song", "long", "strong", "wrong", "belong", "along", "among",
    "happy", "sappy", "snappy", "scrappy", "nappy", "zappy",
    "world", "word", "sword", "lord", "cord", "ford", "board",
    "music", "basic", "magic", "tragic", "comic", "atomic",
    "friend", "end", "bend", "send", "lend", "mend", "trend",
    "school", "cool", "pool", "tool", "fool", "stool", "rule",
    "family", "silly", "willy", "chilly", "hilly", "billy",
    "nature", "mature", "capture", "rapture", "sculpture",
    "beauty", "duty", "cute", "mute", "lute", "flute", "route",
    "wisdom", "kingdom", "freedom", "seldom", "random",
    "courage", "rage", "age", "sage", "wage", "stage", "page",
    "success", "access", "process", "progress", "express",
    "peace", "piece", "cease", "lease", "grease", "increase",
    "love", "dove", "glove", "above", "prove", "move", "rove",
    "hope", "rope", "cope", "scope", "slope", "grope",
    "faith", "bait", "wait", "gait", "trait", "strait",
    "trust", "rust", "dust", "must", "just", "adjust", "robust",
    "honor", "sonor", "donor", "minor", "senior", "junior",
    "pride", "ride", "side", "wide", "hide", "guide", "slide",
    "grace", "race", "face", "pace", "space", "place", "trace",
    "power", "tower", "flower", "shower", "hour", "sour",
    "wonder", "under", "thunder", "blunder", "plunder",
    "mystery", "history", "story", "glory", "victory",
    "adventure", "future",
])
