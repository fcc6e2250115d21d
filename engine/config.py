"""
config.py

Settings shared by the search engine and the command line tools.
"""

from __future__ import annotations

import os
import string
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Type

from engine.vocab import check_alphabet

if TYPE_CHECKING:
    from engine.constraints import WordleConstraint


@dataclass(frozen=True)
class SolverConfig:
    """Knobs for one solving session.

    Attributes
    ----------
    word_length : int
        Number of letters per word.
    alphabet : str
        Letters a word may contain, in index order.
    representation : str
        ``"positional"`` keeps a per-slot set of possible letters,
        ``"simple"`` only remembers pinned (green) letters.
    hard_mode : bool
        If True, only still-possible words are proposed as guesses.
    max_workers : int | None
        Thread pool size for ``optimize``; None uses the executor default.
    top_n : int
        How many ranked guesses the CLI prints.
    progress_every : int
        Emit a progress line every this many scored guesses (0 disables).
    """

    word_length: int = 5
    alphabet: str = string.ascii_lowercase
    representation: str = "positional"
    hard_mode: bool = False
    max_workers: Optional[int] = None
    top_n: int = 10
    progress_every: int = 100

    def __post_init__(self) -> None:
        if self.word_length <= 0:
            raise ValueError("word_length must be positive")
        check_alphabet(self.alphabet)
        if self.representation not in REPRESENTATIONS:
            raise ValueError(
                f"unknown representation {self.representation!r}; "
                f"choose from {', '.join(sorted(REPRESENTATIONS))}"
            )
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError("max_workers must be a positive integer")
        if self.top_n <= 0:
            raise ValueError("top_n must be a positive integer")
        if self.progress_every < 0:
            raise ValueError("progress_every must be >= 0")

    @property
    def workers(self) -> int:
        """Resolved thread count (same default as ThreadPoolExecutor)."""
        if self.max_workers is not None:
            return self.max_workers
        return min(32, (os.cpu_count() or 1) + 4)

    def constraint_type(self) -> Type["WordleConstraint"]:
        from engine.constraints import PositionalConstraint, SimpleConstraint

        return {"positional": PositionalConstraint, "simple": SimpleConstraint}[self.representation]

    def new_constraint(self) -> "WordleConstraint":
        """An empty constraint of the configured representation."""
        return self.constraint_type().default(self.word_length, self.alphabet)


REPRESENTATIONS = ("positional", "simple")
