"""
Feedback utilities: the per-letter colors a guess earns against a hidden word,
and parsing of the color strings people type in.
"""

from __future__ import annotations

import re
from collections import Counter
from enum import IntEnum
from typing import List, Sequence

from engine.errors import FeedbackFormatError


class Color(IntEnum):
    """Feedback for one letter. Values match the 0/1/2 digit notation."""

    BLACK = 0   # absent, or more copies guessed than the word holds
    YELLOW = 1  # present elsewhere
    GREEN = 2   # right letter, right slot

    @property
    def symbol(self) -> str:
        return "byg"[self.value]


_LIST_FORM = re.compile(r"\[\s*[012](\s*,\s*[012])*\s*\]")

_SYMBOLS = {
    "g": Color.GREEN, "y": Color.YELLOW, "b": Color.BLACK,
    "2": Color.GREEN, "1": Color.YELLOW, "0": Color.BLACK,
}


def score_pattern(guess: str, target: str) -> List[Color]:
    """
    Compute the feedback colors for `guess` against `target`.

    Duplicates follow the usual two-pass rule: greens consume their letter
    first, then yellows are handed out left to right while copies remain;
    every other slot is black.
    """
    if not isinstance(guess, str) or not isinstance(target, str):
        raise TypeError("guess and target must be strings")
    if len(guess) != len(target):
        raise ValueError("guess and target must have the same length")

    pattern: List[Color] = [Color.BLACK] * len(guess)
    remaining = Counter(target)

    # Pass 1: mark greens and decrement availability
    for i, (g, t) in enumerate(zip(guess, target)):
        if g == t:
            pattern[i] = Color.GREEN
            remaining[g] -= 1

    # Pass 2: mark yellows where counts allow (else black)
    for i, g in enumerate(guess):
        if pattern[i] == Color.BLACK and remaining[g] > 0:
            pattern[i] = Color.YELLOW
            remaining[g] -= 1

    return pattern


def parse_feedback(s: str, word_length: int = 5) -> List[Color]:
    """Parse typed feedback into a list of Colors.
    Accepted forms:
      - letters: g/y/b  (green/yellow/black)
      - digits:  2/1/0
      - list:   [0, 1, 2, 2, 0]
    Raises FeedbackFormatError on invalid input.
    """
    if not isinstance(s, str):
        raise FeedbackFormatError("feedback must be a string")
    s = s.strip().lower()
    # List-like form: [0,1,2,2,0]
    if s.startswith("[") and s.endswith("]"):
        if not _LIST_FORM.fullmatch(s):
            raise FeedbackFormatError("list form must be comma-separated 0/1/2 values, e.g. [0, 1, 2, 2, 0]")
        nums = re.findall(r"[012]", s)
        if len(nums) != word_length:
            raise FeedbackFormatError(f"list form must contain exactly {word_length} 0/1/2 values")
        return [Color(int(x)) for x in nums]

    if len(s) != word_length:
        raise FeedbackFormatError(f"feedback must be length {word_length} (gybgy / 21001 / [0,1,2,2,0])")
    try:
        return [_SYMBOLS[ch] for ch in s]
    except KeyError as e:
        raise FeedbackFormatError("feedback must use only g/y/b or 2/1/0") from e


def check_colors(colors: Sequence[int], word_length: int) -> List[Color]:
    """Validate an already-parsed color sequence."""
    if isinstance(colors, str):
        return parse_feedback(colors, word_length)
    if len(colors) != word_length:
        raise FeedbackFormatError(f"expected {word_length} colors, got {len(colors)}")
    try:
        return [Color(c) for c in colors]
    except ValueError as e:
        raise FeedbackFormatError("colors must be 0/1/2 (black/yellow/green)") from e


def format_pattern(pattern: Sequence[int]) -> str:
    """Render colors in g/y/b notation."""
    return "".join(Color(p).symbol for p in pattern)
