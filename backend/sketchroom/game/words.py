from __future__ import annotations

import random
from typing import Sequence


DEFAULT_WORDS = [
    "apple", "banana", "cat", "dog", "elephant", "flower", "guitar", "house",
    "island", "jacket", "kite", "lemon", "mountain", "notebook", "ocean",
    "pizza", "queen", "rainbow", "sun", "tree", "umbrella", "violin", "window",
    "xylophone", "yacht", "zebra", "airplane", "beach", "castle", "dolphin",
]


class WordSource:
    """Uniform random pick from a fixed vocabulary."""

    def __init__(self, words: Sequence[str] | None = None, rng: random.Random | None = None):
        vocabulary = [w.strip() for w in (DEFAULT_WORDS if words is None else words) if w and w.strip()]
        if not vocabulary:
            raise ValueError("word vocabulary must not be empty")
        self._words = vocabulary
        self._rng = rng or random.Random()

    def next_word(self) -> str:
        return self._rng.choice(self._words)
