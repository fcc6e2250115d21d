import pytest

from engine.constraints import PositionalConstraint, SimpleConstraint
from engine.vocab import load

KINDS = [PositionalConstraint, SimpleConstraint]


@pytest.fixture(params=KINDS, ids=lambda k: k.__name__)
def kind(request):
    return request.param


@pytest.fixture
def small_vocab():
    return load(["crane", "slate", "trace", "grate"])


@pytest.fixture
def bills_vocab():
    # four candidates that differ only in the first letter, plus one probe word
    return load(["bills", "fills", "hills", "mills", "fbhmz"])
