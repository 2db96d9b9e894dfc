import pytest

from riichi_score.errors import DecompositionError
from riichi_score.models import Pair, Sequence, Triplet, Wait
from riichi_score.tiles import parse_tile
from riichi_score.waits import classify_wait, winning_meld


def t(code: str):
    return parse_tile(code)


def seq(code: str, is_open: bool = False) -> Sequence:
    return Sequence(t(code), is_open=is_open)


OTHER_SETS = (seq("1p"), seq("4p"), Triplet(t("E")))


@pytest.mark.parametrize(
    ("start", "win", "wait"),
    [
        ("2s", "2s", Wait.ryanmen),
        ("6s", "8s", Wait.ryanmen),
        ("1s", "1s", Wait.ryanmen),
        ("7s", "9s", Wait.ryanmen),
        ("4s", "5s", Wait.kanchan),
        ("1s", "3s", Wait.penchan),
        ("7s", "7s", Wait.penchan),
    ],
)
def test_sequence_waits(start, win, wait):
    melds = OTHER_SETS + (seq(start),)
    assert classify_wait(melds, Pair(t("9m")), t(win)) == wait


def test_pair_wait_is_tanki():
    melds = OTHER_SETS + (seq("3m"),)
    assert classify_wait(melds, Pair(t("5m")), t("5m")) == Wait.tanki


def test_tanki_takes_priority_over_sequence():
    melds = OTHER_SETS + (seq("3m"),)
    assert classify_wait(melds, Pair(t("3m")), t("3m")) == Wait.tanki


def test_triplet_wait_is_shanpon():
    melds = OTHER_SETS + (Triplet(t("7m")),)
    assert classify_wait(melds, Pair(t("9m")), t("7m")) == Wait.shanpon


def test_concealed_set_is_preferred_over_call():
    melds = (seq("3m", is_open=True), seq("1p"), seq("4p"), seq("2m"))
    assert winning_meld(melds, t("3m")) == seq("2m")
    assert classify_wait(melds, Pair(t("9m")), t("3m")) == Wait.kanchan


def test_missing_winning_tile_is_an_internal_error():
    melds = OTHER_SETS + (seq("3m"),)
    with pytest.raises(DecompositionError):
        classify_wait(melds, Pair(t("9m")), t("8s"))


def test_classification_is_deterministic():
    melds = OTHER_SETS + (seq("4s"),)
    results = {classify_wait(melds, Pair(t("9m")), t("4s")) for _ in range(10)}
    assert results == {Wait.ryanmen}
