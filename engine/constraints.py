"""
constraints.py

Keeps track of what feedback has revealed about the hidden word and filters
candidate words against it.

A constraint holds two kinds of knowledge:
- positional: which letters are still allowed in each slot
- frequency: for each letter, a minimum count and whether that minimum is
  also the exact count (set once a guess used more copies than the word has)

Two interchangeable representations implement the same contract:
- PositionalConstraint keeps a bitset of allowed letters per slot, so a
  yellow or black letter is ruled out of the slot it was guessed in.
- SimpleConstraint only remembers pinned (green) letters per slot.

Constraints are immutable and hashable; they are only ever combined with
`merge`, which is commutative and idempotent, so they can key a cache.
"""

from __future__ import annotations

import string
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Type

import numpy as np

from engine.errors import ConstraintConflictError
from engine.feedback import Color, check_colors
from engine.vocab import WordMatrix, check_alphabet, check_word, letter_counts, letter_index


class WordleConstraint(ABC):
    """Interface shared by both constraint representations."""

    alphabet: str
    freqs_min: Tuple[int, ...]
    freqs_exact: Tuple[bool, ...]

    # ---------- construction ----------

    @classmethod
    @abstractmethod
    def default(cls, word_length: int = 5, alphabet: str = string.ascii_lowercase) -> "WordleConstraint":
        """A constraint that every word satisfies."""

    @classmethod
    @abstractmethod
    def from_guess_and_correct(
        cls, guess: str, correct: str, alphabet: str = string.ascii_lowercase
    ) -> "WordleConstraint":
        """Everything a single guess reveals when `correct` is the hidden word."""

    @classmethod
    @abstractmethod
    def from_feedback(
        cls, guess: str, colors: Sequence[Color], alphabet: str = string.ascii_lowercase
    ) -> "WordleConstraint":
        """Everything a guess and its observed colors reveal."""

    # ---------- combination and tests ----------

    @abstractmethod
    def merge(self, other: "WordleConstraint") -> "WordleConstraint":
        """The tightest constraint implied by both `self` and `other`."""

    @abstractmethod
    def matches_word(self, word: str) -> bool:
        """True iff `word` is consistent with everything known."""

    @abstractmethod
    def match_mask(self, matrix: WordMatrix) -> np.ndarray:
        """Vectorised `matches_word` over every row of `matrix`."""

    @abstractmethod
    def is_finished(self) -> bool:
        """True iff every slot is pinned to a single letter."""

    @property
    @abstractmethod
    def word_length(self) -> int:
        ...

    def count_matches(self, matrix: WordMatrix) -> int:
        return int(np.count_nonzero(self.match_mask(matrix)))

    # ---------- frequency knowledge, identical for both representations ----------

    def _check_compatible(self, other: "WordleConstraint") -> None:
        if type(other) is not type(self):
            raise TypeError(f"cannot merge {type(self).__name__} with {type(other).__name__}")
        if other.alphabet != self.alphabet or other.word_length != self.word_length:
            raise ValueError("cannot merge constraints over different alphabets or word lengths")

    def _merged_freqs(self, other: "WordleConstraint") -> Tuple[Tuple[int, ...], Tuple[bool, ...]]:
        mins = tuple(max(a, b) for a, b in zip(self.freqs_min, other.freqs_min))
        exact = tuple(a or b for a, b in zip(self.freqs_exact, other.freqs_exact))
        return mins, exact

    def _freqs_ok(self, word: str) -> bool:
        counts = letter_counts(word, self.alphabet)
        for n, lo, ex in zip(counts, self.freqs_min, self.freqs_exact):
            if n < lo or (ex and n != lo):
                return False
        return True

    def _freqs_mask(self, counts: np.ndarray) -> np.ndarray:
        mins = np.asarray(self.freqs_min, dtype=np.uint8)
        ok = (counts >= mins).all(axis=1)
        exact = np.asarray(self.freqs_exact, dtype=bool)
        if exact.any():
            ok &= (counts[:, exact] == mins[exact]).all(axis=1)
        return ok

    def _freqs_str(self) -> str:
        parts = []
        for ch, lo, ex in zip(self.alphabet, self.freqs_min, self.freqs_exact):
            if ex:
                parts.append(f"{ch}={lo}")
            elif lo:
                parts.append(f"{ch}>={lo}")
        return " ".join(parts) or "-"


def _frequency_facts(
    guess: str, correct: str, alphabet: str
) -> Tuple[Tuple[int, ...], Tuple[bool, ...]]:
    g = letter_counts(guess, alphabet)
    h = letter_counts(correct, alphabet)
    return tuple(min(a, b) for a, b in zip(g, h)), tuple(a > b for a, b in zip(g, h))


def _frequency_facts_from_colors(
    guess: str, colors: Sequence[Color], alphabet: str
) -> Tuple[Tuple[int, ...], Tuple[bool, ...]]:
    # green/yellow copies raise the minimum; any black copy caps it
    idx = letter_index(alphabet)
    mins = [0] * len(alphabet)
    exact = [False] * len(alphabet)
    for ch, color in zip(guess, colors):
        if color == Color.BLACK:
            exact[idx[ch]] = True
        else:
            mins[idx[ch]] += 1
    return tuple(mins), tuple(exact)


@dataclass(frozen=True)
class PositionalConstraint(WordleConstraint):
    """
    Per-slot bitset of still-possible letters (bit i = alphabet[i]).

    A green pins its slot to one letter; a yellow or black letter is
    removed from the slot it was guessed in.
    """

    positions: Tuple[int, ...]
    freqs_min: Tuple[int, ...]
    freqs_exact: Tuple[bool, ...]
    alphabet: str = string.ascii_lowercase

    @classmethod
    def default(cls, word_length: int = 5, alphabet: str = string.ascii_lowercase) -> "PositionalConstraint":
        check_alphabet(alphabet)
        full = (1 << len(alphabet)) - 1
        return cls(
            positions=(full,) * word_length,
            freqs_min=(0,) * len(alphabet),
            freqs_exact=(False,) * len(alphabet),
            alphabet=alphabet,
        )

    @classmethod
    def _positions(cls, guess: str, greens: Iterable[bool], alphabet: str) -> Tuple[int, ...]:
        idx = letter_index(alphabet)
        full = (1 << len(alphabet)) - 1
        return tuple(
            (1 << idx[ch]) if green else full & ~(1 << idx[ch])
            for ch, green in zip(guess, greens)
        )

    @classmethod
    def from_guess_and_correct(
        cls, guess: str, correct: str, alphabet: str = string.ascii_lowercase
    ) -> "PositionalConstraint":
        mins, exact = _frequency_facts(guess, correct, alphabet)
        greens = (g == c for g, c in zip(guess, correct))
        return cls(cls._positions(guess, greens, alphabet), mins, exact, alphabet)

    @classmethod
    def from_feedback(
        cls, guess: str, colors: Sequence[Color], alphabet: str = string.ascii_lowercase
    ) -> "PositionalConstraint":
        mins, exact = _frequency_facts_from_colors(guess, colors, alphabet)
        greens = (c == Color.GREEN for c in colors)
        return cls(cls._positions(guess, greens, alphabet), mins, exact, alphabet)

    @property
    def word_length(self) -> int:
        return len(self.positions)

    def merge(self, other: WordleConstraint) -> "PositionalConstraint":
        self._check_compatible(other)
        mins, exact = self._merged_freqs(other)
        positions = tuple(a & b for a, b in zip(self.positions, other.positions))  # type: ignore[attr-defined]
        return PositionalConstraint(positions, mins, exact, self.alphabet)

    def matches_word(self, word: str) -> bool:
        if len(word) != self.word_length:
            return False
        idx = letter_index(self.alphabet)
        for allowed, ch in zip(self.positions, word):
            if ch not in idx or not (allowed >> idx[ch]) & 1:
                return False
        return self._freqs_ok(word)

    def allowed_matrix(self) -> np.ndarray:
        """(L, A) bool array: allowed_matrix()[i, a] is True if letter a may sit in slot i."""
        shifts = np.arange(len(self.alphabet), dtype=np.uint64)
        rows = np.array(self.positions, dtype=np.uint64)[:, None]
        return ((rows >> shifts) & np.uint64(1)).astype(bool)

    def match_mask(self, matrix: WordMatrix) -> np.ndarray:
        allowed = self.allowed_matrix()
        slots = np.arange(self.word_length)
        ok = allowed[slots[None, :], matrix.codes].all(axis=1)
        return ok & self._freqs_mask(matrix.counts)

    def is_finished(self) -> bool:
        return all(m != 0 and m & (m - 1) == 0 for m in self.positions)

    def __str__(self) -> str:
        slots = []
        for m in self.positions:
            letters = [ch for i, ch in enumerate(self.alphabet) if (m >> i) & 1]
            if len(letters) == 1:
                slots.append(letters[0])
            elif len(letters) == len(self.alphabet):
                slots.append("*")
            else:
                banned = "".join(ch for i, ch in enumerate(self.alphabet) if not (m >> i) & 1)
                slots.append(f"[^{banned}]")
        return f"slots: {' '.join(slots)} | letters: {self._freqs_str()}"


@dataclass(frozen=True)
class SimpleConstraint(WordleConstraint):
    """
    Remembers only pinned (green) letters per slot, None where unknown.

    Weaker than PositionalConstraint: a yellow letter is not ruled out of
    the slot it was guessed in.
    """

    positions: Tuple[Optional[str], ...]
    freqs_min: Tuple[int, ...]
    freqs_exact: Tuple[bool, ...]
    alphabet: str = string.ascii_lowercase

    @classmethod
    def default(cls, word_length: int = 5, alphabet: str = string.ascii_lowercase) -> "SimpleConstraint":
        check_alphabet(alphabet)
        return cls(
            positions=(None,) * word_length,
            freqs_min=(0,) * len(alphabet),
            freqs_exact=(False,) * len(alphabet),
            alphabet=alphabet,
        )

    @classmethod
    def from_guess_and_correct(
        cls, guess: str, correct: str, alphabet: str = string.ascii_lowercase
    ) -> "SimpleConstraint":
        mins, exact = _frequency_facts(guess, correct, alphabet)
        positions = tuple(g if g == c else None for g, c in zip(guess, correct))
        return cls(positions, mins, exact, alphabet)

    @classmethod
    def from_feedback(
        cls, guess: str, colors: Sequence[Color], alphabet: str = string.ascii_lowercase
    ) -> "SimpleConstraint":
        mins, exact = _frequency_facts_from_colors(guess, colors, alphabet)
        positions = tuple(ch if c == Color.GREEN else None for ch, c in zip(guess, colors))
        return cls(positions, mins, exact, alphabet)

    @property
    def word_length(self) -> int:
        return len(self.positions)

    def merge(self, other: WordleConstraint) -> "SimpleConstraint":
        self._check_compatible(other)
        positions = []
        for i, (a, b) in enumerate(zip(self.positions, other.positions)):  # type: ignore[attr-defined]
            if a is not None and b is not None and a != b:
                raise ConstraintConflictError(f"slot {i + 1} pinned to both {a!r} and {b!r}")
            positions.append(a if a is not None else b)
        mins, exact = self._merged_freqs(other)
        return SimpleConstraint(tuple(positions), mins, exact, self.alphabet)

    def matches_word(self, word: str) -> bool:
        if len(word) != self.word_length:
            return False
        for pinned, ch in zip(self.positions, word):
            if pinned is not None and pinned != ch:
                return False
        if any(ch not in letter_index(self.alphabet) for ch in word):
            return False
        return self._freqs_ok(word)

    def match_mask(self, matrix: WordMatrix) -> np.ndarray:
        idx = letter_index(self.alphabet)
        ok = self._freqs_mask(matrix.counts)
        for i, pinned in enumerate(self.positions):
            if pinned is not None:
                ok &= matrix.codes[:, i] == idx[pinned]
        return ok

    def is_finished(self) -> bool:
        return all(p is not None for p in self.positions)

    def __str__(self) -> str:
        slots = " ".join(p if p is not None else "*" for p in self.positions)
        return f"slots: {slots} | letters: {self._freqs_str()}"


# ---------- module-level entry points ----------

def default_constraint(
    word_length: int = 5,
    alphabet: str = string.ascii_lowercase,
    kind: Type[WordleConstraint] = PositionalConstraint,
) -> WordleConstraint:
    return kind.default(word_length, alphabet)


def apply_feedback(current: WordleConstraint, guess: str, colors: Sequence[int]) -> WordleConstraint:
    """
    Merge what `guess` and its observed `colors` reveal into `current`.

    `colors` may be a sequence of Color/0-1-2 values or a typed string
    (see `parse_feedback`). Raises WordFormatError / FeedbackFormatError on
    malformed input and ConstraintConflictError if a SimpleConstraint would
    pin one slot to two letters.
    """
    guess = check_word(guess, current.word_length, current.alphabet, where="guess ")
    parsed = check_colors(colors, current.word_length)
    return current.merge(type(current).from_feedback(guess, parsed, current.alphabet))


def merge(a: WordleConstraint, b: WordleConstraint) -> WordleConstraint:
    return a.merge(b)


def matches_word(constraint: WordleConstraint, word: str) -> bool:
    return constraint.matches_word(word)


def is_finished(constraint: WordleConstraint) -> bool:
    return constraint.is_finished()


def filter_candidates(words: Iterable[str], constraint: WordleConstraint) -> List[str]:
    """Keep only the words consistent with `constraint`, preserving order."""
    return [w for w in words if constraint.matches_word(w)]
