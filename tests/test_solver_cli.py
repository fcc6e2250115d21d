import pytest

import solver.solver_cli as solver_cli
from engine.config import SolverConfig
from engine.errors import FeedbackFormatError
from solver.solver_cli import main, parse_guess_line, print_ranked, run


def scripted(*lines):
    it = iter(lines)

    def fake_input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return fake_input


@pytest.fixture
def config():
    return SolverConfig(progress_every=0, max_workers=2)


def test_parse_guess_line():
    guess, colors = parse_guess_line("CRANE yggbg")
    assert guess == "crane"
    assert colors == [1, 2, 2, 0, 2]
    assert parse_guess_line("crane [1, 2, 2, 0, 2]")[1] == colors
    with pytest.raises(FeedbackFormatError):
        parse_guess_line("crane")


def test_print_ranked(capsys):
    print_ranked([("trace", 0.0), ("crane", 1.0), ("slate", 1.0 / 3)], 1, top_n=2)
    out = capsys.readouterr().out.splitlines()
    assert out == ["Best guesses: (1 possibilities)", "#0: trace (0.0)", "#1: crane (1.0)"]


def test_input_then_calc(small_vocab, config, capsys):
    rc = run(small_vocab, config, scripted("input", "crane yggbg", "calc", "quit"))
    out = capsys.readouterr().out
    assert rc == 0
    assert "Best guesses: (1 possibilities)" in out
    assert "#0: trace (0.0)" in out
    assert "bye!" in out


def test_invalid_feedback_asks_again(small_vocab, config, capsys):
    run(small_vocab, config, scripted("input", "crane ygg", "input", "cranes yggbg", "show"))
    out = capsys.readouterr().out
    assert out.count("Invalid input:") == 2
    assert "Remaining candidates: 4" in out


def test_contradiction_is_reported(small_vocab, config, capsys):
    run(small_vocab, config, scripted("input", "crane bbbbb", "calc", "reset", "show"))
    out = capsys.readouterr().out
    assert "No consistent words remain" in out
    assert "Best guesses" not in out
    assert "Feedback cleared." in out
    assert "Remaining candidates: 4" in out


def test_hard_mode_toggle_and_unknown_command(small_vocab, config, capsys):
    run(small_vocab, config, scripted("hard", "hard", "dance"))
    out = capsys.readouterr().out
    assert "Hard mode: True" in out
    assert "Hard mode: False" in out
    assert "INVALID OPTION!" in out


def test_solved_ends_session(small_vocab, config, capsys):
    rc = run(small_vocab, config, scripted("input", "trace ggggg", "calc"))
    out = capsys.readouterr().out
    assert rc == 0
    assert "Solved!" in out
    assert "Best guesses" not in out


def test_conflicting_pins_with_simple_representation(small_vocab, capsys):
    cfg = SolverConfig(representation="simple", progress_every=0)
    run(small_vocab, cfg, scripted("input", "crane gbbbb", "input", "slate gbbbb"))
    out = capsys.readouterr().out
    assert "Feedback contradicts earlier input" in out


def test_progress_lines(small_vocab, capsys):
    cfg = SolverConfig(progress_every=2, max_workers=1)
    run(small_vocab, cfg, scripted("calc"))
    out = capsys.readouterr().out.splitlines()
    assert "2/4" in out and "4/4" in out


def test_main_reports_missing_word_list(tmp_path, capsys):
    assert main(["--words", str(tmp_path / "missing.txt")]) == 2
    assert "Could not load word list" in capsys.readouterr().out


def test_calc_uses_configured_worker_count(monkeypatch, small_vocab):
    calls = []

    def fake_optimize(constraint, vocab, hard_mode, **kwargs):
        calls.append(kwargs["max_workers"])
        return [("trace", 0.0)]

    monkeypatch.setattr(solver_cli, "optimize", fake_optimize)
    run(small_vocab, SolverConfig(max_workers=3, progress_every=0), scripted("calc"))
    run(small_vocab, SolverConfig(progress_every=0), scripted("calc"))
    assert calls[0] == 3
    assert calls[1] == SolverConfig().workers and calls[1] >= 1
