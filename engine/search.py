"""
search.py

One-ply guess optimizer.

For every legal guess, average over all still-possible hidden words the
number of possible words that would remain after seeing that guess's
feedback, then rank guesses by that average (lower is better).

Usage:
  ranked = optimize(constraint, vocab, hard_mode=False)
  best_word, avg_remaining = ranked[0]
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from engine.constraints import WordleConstraint
from engine.errors import ContradictionError, SearchCancelled
from engine.vocab import WordMatrix, WordVocab

logger = logging.getLogger(__name__)

ProgressFn = Callable[[int, int], None]


class ConstraintCache:
    """
    Possible-word counts keyed by post-guess constraint.

    Shared by all workers of a single `optimize` call and dropped with it:
    the counts are only valid for that call's possible set. Reads take no
    lock; inserts go through `setdefault` under a lock, so a reader sees
    either no entry or a complete one, and racing workers that computed the
    same key agree on the stored value.
    """

    def __init__(self) -> None:
        self._data: Dict[WordleConstraint, float] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._data)

    def lookup(self, key: WordleConstraint) -> Optional[float]:
        return self._data.get(key)

    def insert(self, key: WordleConstraint, value: float) -> float:
        assert value >= 0, f"negative candidate count {value} for {key}"
        with self._lock:
            return self._data.setdefault(key, value)


def possible_words(constraint: WordleConstraint, vocab: WordVocab) -> List[str]:
    """Vocabulary words still consistent with `constraint`, in vocabulary order."""
    if constraint.word_length != vocab.word_length or constraint.alphabet != vocab.alphabet:
        raise ValueError("constraint and vocabulary disagree on word length or alphabet")
    mask = constraint.match_mask(vocab.matrix())
    return [w for w, ok in zip(vocab, mask) if ok]


def _score_guess(
    guess: str,
    accumulated: WordleConstraint,
    possible: Sequence[str],
    matrix: WordMatrix,
    cache: ConstraintCache,
    cancel: Optional[threading.Event],
) -> Tuple[float, int, int]:
    """Average remaining count for `guess`; also returns (cache hits, misses)."""
    if cancel is not None and cancel.is_set():
        raise SearchCancelled(f"search cancelled before scoring {guess!r}")

    kind = type(accumulated)
    alphabet = accumulated.alphabet
    total = 0.0
    hits = misses = 0
    for correct in possible:
        if guess == correct:
            continue  # solved, nothing remains
        merged = accumulated.merge(kind.from_guess_and_correct(guess, correct, alphabet))
        count = cache.lookup(merged)
        if count is None:
            count = cache.insert(merged, float(merged.count_matches(matrix)))
            misses += 1
        else:
            hits += 1
        total += count
    return total / len(possible), hits, misses


def optimize(
    accumulated: WordleConstraint,
    vocab: WordVocab,
    hard_mode: bool = False,
    *,
    max_workers: Optional[int] = None,
    progress: Optional[ProgressFn] = None,
    progress_every: int = 1,
    cancel: Optional[threading.Event] = None,
    guesses: Optional[Sequence[str]] = None,
) -> List[Tuple[str, float]]:
    """
    Rank every legal next guess by average remaining candidates.

    Parameters
    ----------
    accumulated : WordleConstraint
        Everything learned so far. Not modified.
    vocab : WordVocab
        The word universe.
    hard_mode : bool
        If True only still-possible words may be guessed; otherwise any
        vocabulary word may be used as a probe.
    max_workers : int | None
        Thread pool size (None: ThreadPoolExecutor default).
    progress : callable(done, total) | None
        Called on the calling thread as guesses finish, every
        `progress_every` completions and once at the end.
    cancel : threading.Event | None
        When set, guesses that have not started yet raise SearchCancelled,
        which aborts the whole search.
    guesses : sequence of str | None
        Only score these words (still subject to hard mode), e.g. to
        rank a short list of openers quickly.

    Returns
    -------
    list[(word, score)]
        Sorted ascending by score; ties keep vocabulary order.

    Raises
    ------
    ContradictionError
        If no vocabulary word is consistent with `accumulated`.
    """
    possible = possible_words(accumulated, vocab)
    if not possible:
        raise ContradictionError()
    guessable = possible if hard_mode else vocab.words()
    if guesses is not None:
        wanted = set(guesses)
        guessable = [g for g in guessable if g in wanted]
    logger.debug(
        "optimize: %d possible, %d guessable (hard_mode=%s)", len(possible), len(guessable), hard_mode
    )

    matrix = vocab.matrix(possible)
    cache = ConstraintCache()
    scores: List[float] = [0.0] * len(guessable)
    total = len(guessable)
    hits = misses = 0
    t0 = time.perf_counter()

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="optimize") as executor:
        futures: Dict[Future, int] = {
            executor.submit(_score_guess, guess, accumulated, possible, matrix, cache, cancel): i
            for i, guess in enumerate(guessable)
        }
        try:
            for done, future in enumerate(as_completed(futures), start=1):
                score, h, m = future.result()
                scores[futures[future]] = score
                hits += h
                misses += m
                if progress is not None and (done % max(1, progress_every) == 0 or done == total):
                    progress(done, total)
        except BaseException:
            for f in futures:
                f.cancel()
            raise

    ranked = sorted(zip(guessable, scores), key=lambda r: r[1])
    logger.info(
        "scored %d guesses against %d candidates in %.2fs (cache: %d entries, %d hits, %d misses)",
        total, len(possible), time.perf_counter() - t0, len(cache), hits, misses,
    )
    return ranked
