"""
vocab.py

The word universe: an ordered, immutable list of fixed-length words plus
numpy encodings of word subsets used for fast candidate counting.
"""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from engine.errors import WordFormatError

logger = logging.getLogger(__name__)


MAX_ALPHABET = 64


@lru_cache(maxsize=None)
def check_alphabet(alphabet: str) -> str:
    """Reject alphabets the bitset constraints cannot index."""
    if not isinstance(alphabet, str) or not alphabet:
        raise WordFormatError("alphabet must be a non-empty string")
    if len(set(alphabet)) != len(alphabet):
        raise WordFormatError(f"alphabet {alphabet!r} contains repeated letters")
    if len(alphabet) > MAX_ALPHABET:
        raise WordFormatError(f"alphabet may hold at most {MAX_ALPHABET} letters, got {len(alphabet)}")
    return alphabet


@lru_cache(maxsize=None)
def letter_index(alphabet: str) -> Dict[str, int]:
    """Map each letter of `alphabet` to its position."""
    return {c: i for i, c in enumerate(alphabet)}


@lru_cache(maxsize=1 << 16)
def letter_counts(word: str, alphabet: str = string.ascii_lowercase) -> Tuple[int, ...]:
    """Letter frequency vector of `word` over `alphabet`."""
    idx = letter_index(alphabet)
    counts = [0] * len(alphabet)
    for ch in word:
        counts[idx[ch]] += 1
    return tuple(counts)


def check_word(word: object, word_length: int, alphabet: str, where: str = "") -> str:
    """Normalise a single word or raise WordFormatError."""
    if not isinstance(word, str):
        raise WordFormatError(f"{where}expected a string, got {type(word).__name__}")
    w = word.strip().lower()
    if len(w) != word_length:
        raise WordFormatError(f"{where}{word!r} must have exactly {word_length} letters")
    idx = letter_index(alphabet)
    bad = sorted({ch for ch in w if ch not in idx})
    if bad:
        raise WordFormatError(f"{where}{word!r} contains letters outside the alphabet: {''.join(bad)}")
    return w


@dataclass(frozen=True, eq=False)
class WordMatrix:
    """
    Read-only numpy view of a list of words.

    codes  : (N, L) int8   letter index at each position
    counts : (N, A) uint8  letter frequency vector of each word
    """

    words: Tuple[str, ...]
    codes: np.ndarray
    counts: np.ndarray

    def __len__(self) -> int:
        return len(self.words)


class WordVocab:
    def __init__(
        self,
        words: List[str],
        *,
        word_length: int = 5,
        alphabet: str = string.ascii_lowercase,
    ) -> None:
        if not isinstance(words, list):
            raise TypeError("`words` must be a list of strings")
        if not words:
            raise WordFormatError("no words provided")

        self.word_length = word_length
        self.alphabet = check_alphabet(alphabet)
        self._words: List[str] = [
            check_word(w, word_length, alphabet, where=f"word #{i}: ") for i, w in enumerate(words)
        ]
        if len(set(self._words)) != len(self._words):
            raise WordFormatError("duplicate words detected; input to WordVocab must be deduplicated")
        self._index = {w: i for i, w in enumerate(self._words)}
        self._matrix: Optional[WordMatrix] = None

    # ---------- Construction helpers ----------

    @classmethod
    def from_text(
        cls,
        path: str,
        *,
        word_length: int = 5,
        alphabet: str = string.ascii_lowercase,
    ) -> "WordVocab":
        """
        Load a plain-text word list, one word per line.

        Blank lines and lines starting with '#' are skipped. Any other line
        that is not a valid word raises WordFormatError with its line number.
        Repeated words keep their first occurrence.
        """
        check_alphabet(alphabet)
        with open(path, encoding="utf-8") as f:
            lines = f.read().splitlines()
        words: List[str] = []
        seen = set()
        for lineno, line in enumerate(lines, start=1):
            s = line.strip()
            if not s or s.startswith("#"):
                continue
            w = check_word(s, word_length, alphabet, where=f"{path}:{lineno}: ")
            if w in seen:
                continue
            seen.add(w)
            words.append(w)
        if not words:
            raise WordFormatError(f"no words in {path}")
        vocab = cls(words, word_length=word_length, alphabet=alphabet)
        logger.info("loaded %d words from %s", len(vocab), path)
        return vocab

    @classmethod
    def from_csv(
        cls,
        path: str,
        column: str = "word",
        *,
        word_length: int = 5,
        alphabet: str = string.ascii_lowercase,
    ) -> "WordVocab":
        """
        Load words from a CSV column and build a WordVocab.

        Unlike `from_text` this is lenient: values are lowercased, rows that
        are not `word_length` alphabet letters are dropped, and later
        duplicates are ignored.

        Raises
        ------
        FileNotFoundError, KeyError, WordFormatError
        """
        df = pd.read_csv(path)
        if column not in df.columns:
            raise KeyError(f"column '{column}' not found in {path}")

        idx = letter_index(alphabet)
        clean: List[str] = []
        seen = set()
        for val in df[column].dropna().astype(str).str.strip().str.lower():
            if len(val) != word_length or any(ch not in idx for ch in val):
                continue
            if val in seen:
                continue
            seen.add(val)
            clean.append(val)

        if not clean:
            raise WordFormatError(f"no valid words in column '{column}' of {path}")
        logger.info("loaded %d words from %s (column %s)", len(clean), path, column)
        return cls(clean, word_length=word_length, alphabet=alphabet)

    # ---------- Basic protocol ----------

    def __len__(self) -> int:
        """Number of words in the vocabulary."""
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._index

    def words(self) -> List[str]:
        """Return a copy of the internal word list (to avoid external mutation)."""
        return list(self._words)

    def contains(self, word: str) -> bool:
        """Return True iff `word` exists in the vocabulary (case-sensitive)."""
        return word in self._index

    def index_of(self, word: str) -> int:
        """Return the index for `word`; raise KeyError if unknown."""
        try:
            return self._index[word]
        except KeyError:
            raise KeyError(f"unknown word: {word}") from None

    def word_at(self, idx: int) -> str:
        """Return the word at position `idx`; raise IndexError if out of bounds."""
        if idx < 0 or idx >= len(self._words):
            raise IndexError(f"index out of range: {idx}")
        return self._words[idx]

    # ---------- numpy encodings ----------

    def matrix(self, words: Optional[Sequence[str]] = None) -> WordMatrix:
        """
        Encode `words` (default: the whole vocabulary) as a WordMatrix.

        The full-vocabulary matrix is built once and reused.
        """
        if words is None:
            if self._matrix is None:
                self._matrix = encode_words(self._words, self.word_length, self.alphabet)
            return self._matrix
        return encode_words(words, self.word_length, self.alphabet)


def encode_words(words: Iterable[str], word_length: int, alphabet: str) -> WordMatrix:
    idx = letter_index(alphabet)
    ws = tuple(words)
    n = len(ws)
    codes = np.array([[idx[ch] for ch in w] for w in ws], dtype=np.int8).reshape(n, word_length)
    counts = np.zeros((n, len(alphabet)), dtype=np.uint8)
    rows = np.repeat(np.arange(n), word_length)
    np.add.at(counts, (rows, codes.ravel()), 1)
    codes.setflags(write=False)
    counts.setflags(write=False)
    return WordMatrix(words=ws, codes=codes, counts=counts)


def load(
    words: Iterable[str],
    *,
    word_length: int = 5,
    alphabet: str = string.ascii_lowercase,
) -> WordVocab:
    """
    Build a WordVocab from raw strings.

    The alphabet itself must hold at most 64 distinct letters.
    Every entry must be exactly `word_length` letters of `alphabet`
    (surrounding whitespace and case are normalised); anything else raises
    WordFormatError. Repeated words keep their first occurrence.
    """
    check_alphabet(alphabet)
    clean: List[str] = []
    seen = set()
    for i, raw in enumerate(words):
        w = check_word(raw, word_length, alphabet, where=f"word #{i}: ")
        if w in seen:
            continue
        seen.add(w)
        clean.append(w)
    return WordVocab(clean, word_length=word_length, alphabet=alphabet)
