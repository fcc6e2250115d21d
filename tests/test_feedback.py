import pytest

from engine.errors import FeedbackFormatError
from engine.feedback import Color, check_colors, format_pattern, parse_feedback, score_pattern


@pytest.mark.parametrize(
    "guess, target, expected",
    [
        ("crane", "crane", [2, 2, 2, 2, 2]),
        ("allot", "total", [1, 1, 0, 1, 1]),
        ("abbey", "cabin", [1, 0, 2, 0, 0]),
        ("press", "spree", [1, 1, 1, 1, 0]),
        ("crane", "trace", [1, 2, 2, 0, 2]),
    ],
)
def test_score_pattern_duplicates(guess, target, expected):
    assert score_pattern(guess, target) == expected


def test_score_pattern_rejects_length_mismatch():
    with pytest.raises(ValueError):
        score_pattern("crane", "cranes")


@pytest.mark.parametrize("text", ["yggbg", "YGGBG", "12202", "[1, 2, 2, 0, 2]", " yggbg \n"])
def test_parse_feedback_forms(text):
    assert parse_feedback(text) == [Color.YELLOW, Color.GREEN, Color.GREEN, Color.BLACK, Color.GREEN]


@pytest.mark.parametrize(
    "text",
    ["ygg", "yggbgg", "yggxg", "[1, 2, 2, 0]", "[1, 2, 2, 0, 3]", "[12202]", "[1 2 2 0 2]", "[1,,2,2,0,2]", "[1, 2, 2, 0, 2,]"],
)
def test_parse_feedback_rejects(text):
    with pytest.raises(FeedbackFormatError):
        parse_feedback(text)


def test_parse_feedback_other_lengths():
    assert parse_feedback("gbyg", word_length=4) == [2, 0, 1, 2]


def test_check_colors_and_format():
    assert check_colors([0, 1, 2, 2, 1], 5) == [Color.BLACK, Color.YELLOW, Color.GREEN, Color.GREEN, Color.YELLOW]
    with pytest.raises(FeedbackFormatError):
        check_colors([0, 1, 2], 5)
    assert format_pattern(score_pattern("allot", "total")) == "yybyy"
