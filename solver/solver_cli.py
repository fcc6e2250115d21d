"""
solver/solver_cli.py

Interactive Wordle helper (human-in-the-loop):
- After each guess you play, enter the word and the colors you saw, e.g. `crane gybbg`.
- `calc` ranks every next guess by the average number of words left afterwards.
- Colors accepted as: 'gybbg', '21001', or a Python-like list '[2, 1, 0, 0, 2]'.

Run:
  python -m solver.solver_cli --words words.txt
  python -m solver.solver_cli --csv word_list.csv --hard --representation simple

Commands:
  input  -> enter a guess and its colors
  calc   -> compute the best next guesses
  hard   -> toggle hard mode (only still-possible words are suggested)
  show   -> show how many words remain (and list them when few)
  reset  -> forget all feedback
  quit / q / exit  -> exit
"""
from __future__ import annotations

import argparse
import logging
from typing import Callable, List, Optional, Sequence, Tuple

from engine.config import REPRESENTATIONS, SolverConfig
from engine.constraints import WordleConstraint, apply_feedback
from engine.errors import ConstraintConflictError, ContradictionError, WordFormatError, FeedbackFormatError
from engine.feedback import Color, format_pattern, parse_feedback
from engine.search import optimize, possible_words
from engine.vocab import WordVocab

QUIT = {"q", "quit", "exit"}


def parse_guess_line(line: str, word_length: int = 5) -> Tuple[str, List[Color]]:
    """Split `crane gybbg` (or `crane [2,1,0,0,2]`) into the guess and its colors."""
    parts = line.strip().split(maxsplit=1)
    if len(parts) != 2:
        raise FeedbackFormatError("expected '<guess> <colors>', e.g. 'crane gybbg'")
    guess, colors = parts
    return guess.lower(), parse_feedback(colors, word_length)


def print_ranked(ranked: Sequence[Tuple[str, float]], n_possible: int, top_n: int) -> None:
    print(f"Best guesses: ({n_possible} possibilities)")
    for i, (word, score) in enumerate(ranked[:top_n]):
        print(f"#{i}: {word} ({round(score, 2)})")


def _progress_printer(every: int) -> Optional[Callable[[int, int], None]]:
    if every <= 0:
        return None

    def report(done: int, total: int) -> None:
        print(f"{done}/{total}", flush=True)

    return report


def run(vocab: WordVocab, config: SolverConfig, input_fn: Callable[[str], str] = input) -> int:
    """Drive the prompt loop until the user quits, solves, or input ends."""
    constraint: WordleConstraint = config.new_constraint()
    hard_mode = config.hard_mode
    progress = _progress_printer(config.progress_every)

    while True:
        try:
            cmd = input_fn("Enter: input/calc/hard/show/reset/quit ").strip().lower()
        except EOFError:
            return 0

        if cmd in QUIT:
            print("bye!")
            return 0

        if cmd == "hard":
            hard_mode = not hard_mode
            print(f"Hard mode: {hard_mode}")

        elif cmd == "reset":
            constraint = config.new_constraint()
            print("Feedback cleared.")

        elif cmd == "show":
            remaining = possible_words(constraint, vocab)
            print(f"Remaining candidates: {len(remaining)}")
            if 0 < len(remaining) <= 10:
                print("Candidates:", ", ".join(remaining))

        elif cmd == "input":
            try:
                line = input_fn("Enter letters/gyb: ")
            except EOFError:
                return 0
            try:
                guess, colors = parse_guess_line(line, config.word_length)
                constraint = apply_feedback(constraint, guess, colors)
            except (WordFormatError, FeedbackFormatError) as e:
                print("Invalid input:", e)
                print("Please re-enter with 'input'.")
                continue
            except ConstraintConflictError as e:
                print("Feedback contradicts earlier input:", e)
                continue
            print(f"{guess} {format_pattern(colors)} -> {constraint}")
            if all(c == Color.GREEN for c in colors) or constraint.is_finished():
                print("Solved! 🎉")
                return 0

        elif cmd == "calc":
            try:
                ranked = optimize(
                    constraint,
                    vocab,
                    hard_mode,
                    max_workers=config.workers,
                    progress=progress,
                    progress_every=config.progress_every or 1,
                )
            except ContradictionError:
                print("No consistent words remain. Check your feedback inputs (or 'reset').")
                continue
            except KeyboardInterrupt:
                print("Calculation interrupted.")
                continue
            n_possible = len(possible_words(constraint, vocab))
            print_ranked(ranked, n_possible, config.top_n)

        else:
            print("INVALID OPTION!")


def _load_vocab(args: argparse.Namespace, config: SolverConfig) -> WordVocab:
    if args.csv:
        return WordVocab.from_csv(args.csv, column=args.column, word_length=config.word_length)
    return WordVocab.from_text(args.words, word_length=config.word_length)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Interactive Wordle solver (manual feedback)")
    src = ap.add_mutually_exclusive_group()
    src.add_argument("--words", default="words.txt", help="Plain-text word list, one word per line")
    src.add_argument("--csv", default=None, help="CSV word list (see --column)")
    ap.add_argument("--column", default="word", help="CSV column holding the words")
    ap.add_argument("--length", type=int, default=5, help="Word length")
    ap.add_argument("--representation", choices=REPRESENTATIONS, default="positional",
                    help="Constraint representation")
    ap.add_argument("--hard", action="store_true", help="Start in hard mode")
    ap.add_argument("--workers", type=int, default=None, help="Worker threads for calc")
    ap.add_argument("--top", type=int, default=10, help="How many guesses to show")
    ap.add_argument("--progress-every", type=int, default=100,
                    help="Print progress every N scored guesses (0 disables)")
    ap.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = SolverConfig(
        word_length=args.length,
        representation=args.representation,
        hard_mode=args.hard,
        max_workers=args.workers,
        top_n=args.top,
        progress_every=args.progress_every,
    )
    try:
        vocab = _load_vocab(args, config)
    except (OSError, KeyError, WordFormatError) as e:
        print("Could not load word list:", e)
        return 2
    print(f"Loaded {len(vocab)} words.")
    return run(vocab, config)


if __name__ == "__main__":
    raise SystemExit(main())
