"""
starting_word/eval.py

Score candidate first guesses by the average number of words left after
their feedback, starting from no knowledge at all.

Usage:
  python -m starting_word.eval --words words.txt
  python -m starting_word.eval --csv word_list.csv --out starting_word_results.csv --top 30 --limit-guesses 500
"""

from __future__ import annotations

import argparse
import csv
import logging
import time
from typing import Dict, List, Optional, Sequence

from engine.config import REPRESENTATIONS, SolverConfig
from engine.search import optimize
from engine.vocab import WordVocab


def evaluate_first_guesses(
    vocab: WordVocab,
    config: Optional[SolverConfig] = None,
    *,
    limit_guesses: Optional[int] = None,
    progress: bool = False,
) -> List[Dict[str, float]]:
    """
    Rank opening guesses against the whole vocabulary.

    With `limit_guesses`, only the first K vocabulary words are scored as
    guesses (every word still counts as a possible answer).

    Returns
    -------
    list[dict]
        Sorted list (best first) of records with keys 'guess', 'avg_remaining'.
    """
    config = config or SolverConfig(word_length=vocab.word_length, alphabet=vocab.alphabet)

    def report(done: int, total: int) -> None:
        print(f"Scored {done}/{total} guesses...", flush=True)

    ranked = optimize(
        config.new_constraint(),
        vocab,
        config.hard_mode,
        max_workers=config.workers,
        progress=report if progress else None,
        progress_every=config.progress_every or 1,
        guesses=vocab.words()[:limit_guesses] if limit_guesses is not None else None,
    )
    return [{"guess": word, "avg_remaining": float(score)} for word, score in ranked]


def _print_top(results: List[Dict[str, float]], k: int = 20) -> None:
    print(f"\nTop {k} starting words by average remaining:")
    print(f"{'rank':>4}  {'guess':<8}  {'avg_rem':>8}")
    for idx, r in enumerate(results[:k], start=1):
        print(f"{idx:>4}  {r['guess']:<8}  {r['avg_remaining']:>8.2f}")


def _write_csv(results: List[Dict[str, float]], path: str) -> None:
    fieldnames = ["guess", "avg_remaining"]
    with open(path, mode="w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for row in results:
            writer.writerow(row)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Rank opening guesses by average remaining candidates.")
    src = ap.add_mutually_exclusive_group()
    src.add_argument("--words", default="words.txt", help="Plain-text word list, one word per line")
    src.add_argument("--csv", default=None, help="CSV word list with a 'word' column")
    ap.add_argument("--out", default="starting_word_results.csv", help="Output CSV filename")
    ap.add_argument("--top", type=int, default=20, help="How many top rows to print")
    ap.add_argument("--representation", choices=REPRESENTATIONS, default="positional")
    ap.add_argument("--workers", type=int, default=None, help="Worker threads")
    ap.add_argument(
        "--progress",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Show progress during evaluation (use --no-progress to disable)",
    )
    ap.add_argument("--limit-guesses", type=int, default=None, help="Evaluate only the first K guesses")
    ap.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    args = ap.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    vocab = WordVocab.from_csv(args.csv) if args.csv else WordVocab.from_text(args.words)
    config = SolverConfig(representation=args.representation, max_workers=args.workers)

    print(f"Scoring guesses against {len(vocab)} answers...", flush=True)
    t0 = time.perf_counter()
    results = evaluate_first_guesses(vocab, config, limit_guesses=args.limit_guesses, progress=args.progress)
    dt = time.perf_counter() - t0
    print(f"Done in {dt:.2f}s", flush=True)
    _print_top(results, k=args.top)
    _write_csv(results, args.out)
    print(f"Wrote results to {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
