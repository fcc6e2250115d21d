import string

import pytest

from engine.constraints import PositionalConstraint, SimpleConstraint
from engine.errors import WordFormatError
from engine.search import possible_words
from engine.vocab import WordVocab, letter_counts, load


def test_load_normalises_and_dedupes():
    v = load([" Crane", "slate", "crane", "TRACE"])
    assert v.words() == ["crane", "slate", "trace"]
    assert len(v) == 3
    assert v.index_of("slate") == 1
    assert v.word_at(2) == "trace"
    assert "crane" in v and v.contains("slate")
    assert list(v) == v.words()


@pytest.mark.parametrize("bad", ["cranes", "cran", "cr4ne", "", 12345])
def test_load_rejects_malformed_words(bad):
    with pytest.raises(WordFormatError):
        load(["slate", bad])


def test_format_error_is_a_value_error():
    with pytest.raises(ValueError, match="exactly 5 letters"):
        load(["toolong"])


def test_load_rejects_empty():
    with pytest.raises(WordFormatError):
        load([])


def test_unknown_word_lookups():
    v = load(["crane"])
    with pytest.raises(KeyError):
        v.index_of("slate")
    with pytest.raises(IndexError):
        v.word_at(1)


def test_other_word_lengths():
    v = load(["tree", "bark"], word_length=4)
    assert v.word_length == 4
    with pytest.raises(WordFormatError):
        load(["crane"], word_length=4)


def test_from_text_skips_blank_and_comment_lines(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("# five letter words\ncrane\n\nslate\ntrace\n", encoding="utf-8")
    v = WordVocab.from_text(str(path))
    assert v.words() == ["crane", "slate", "trace"]


def test_from_text_reports_line_number(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("crane\nslates\n", encoding="utf-8")
    with pytest.raises(WordFormatError, match=":2:"):
        WordVocab.from_text(str(path))


def test_from_csv_is_lenient(tmp_path):
    path = tmp_path / "word_list.csv"
    path.write_text("word,day\nCrane,1\nslate,\ncrane,3\nab,4\nsl4te,5\ntrace,6\n", encoding="utf-8")
    v = WordVocab.from_csv(str(path))
    assert v.words() == ["crane", "slate", "trace"]
    with pytest.raises(KeyError):
        WordVocab.from_csv(str(path), column="missing")


def test_matrix_encoding():
    v = load(["crane", "eerie"])
    m = v.matrix()
    assert m.codes.shape == (2, 5)
    assert m.counts.shape == (2, 26)
    assert list(m.codes[0]) == [2, 17, 0, 13, 4]
    assert m.counts[1, 4] == 3
    assert (m.counts.sum(axis=1) == 5).all()
    assert v.matrix() is m
    assert v.matrix(["eerie"]).words == ("eerie",)
    assert len(v.matrix([])) == 0


def test_letter_counts():
    counts = letter_counts("eerie")
    assert counts[4] == 3 and counts[17] == 1 and counts[8] == 1
    assert sum(counts) == 5


WIDE_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits + "#@"


def test_widest_alphabet_is_usable():
    assert len(WIDE_ALPHABET) == 64
    v = load(["aaaa#", "bbbb@"], alphabet=WIDE_ALPHABET)
    assert possible_words(PositionalConstraint.default(alphabet=WIDE_ALPHABET), v) == ["aaaa#", "bbbb@"]


@pytest.mark.parametrize("alphabet", [WIDE_ALPHABET + "$", "abca", ""])
def test_unusable_alphabets_are_rejected(alphabet):
    with pytest.raises(WordFormatError):
        load(["aaaa#"], alphabet=alphabet)
    with pytest.raises(ValueError):
        PositionalConstraint.default(alphabet=alphabet)
    with pytest.raises(ValueError):
        SimpleConstraint.default(alphabet=alphabet)


def test_from_text_rejects_wide_alphabet_before_reading(tmp_path):
    with pytest.raises(WordFormatError, match="at most 64"):
        WordVocab.from_text(str(tmp_path / "unused.txt"), alphabet=WIDE_ALPHABET + "$")


def test_from_text_builds_subclass_and_dedupes(tmp_path):
    class AnswerVocab(WordVocab):
        pass

    path = tmp_path / "words.txt"
    path.write_text("crane\nslate\nCRANE\n", encoding="utf-8")
    v = AnswerVocab.from_text(str(path))
    assert isinstance(v, AnswerVocab)
    assert v.words() == ["crane", "slate"]


def test_from_text_rejects_empty_file(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("# nothing here\n\n", encoding="utf-8")
    with pytest.raises(WordFormatError):
        WordVocab.from_text(str(path))
