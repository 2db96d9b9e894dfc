import logging

import pytest

from riichi_score.errors import HandRejected, RejectReason
from riichi_score.hand_scoring import score_hand_shape
from riichi_score.models import Irregular
from riichi_score.patterns import Pattern, RecognizedPatterns
from riichi_score.schemas import ContextInput, HandInput, LimitTier, RuleSet


def base_hand() -> HandInput:
    return HandInput(
        closed_tiles=["1m", "2m", "3m", "4p", "5p", "6p", "7s", "8s", "9s", "E", "E", "E", "2p", "2p"],
        melds=[],
        win_tile="2p",
    )


def base_context(**kwargs) -> ContextInput:
    payload = {
        "win_type": "ron",
        "round_wind": "E",
        "seat_wind": "S",
        "riichi": True,
        "double_riichi": False,
        "ippatsu": False,
        "haitei": False,
        "houtei": False,
        "rinshan": False,
        "chankan": False,
        "chiihou": False,
        "tenhou": False,
        "dora_indicators": ["4p"],
        "aka_dora_count": 1,
        "honba": 0,
        "kyotaku": 0,
    }
    payload.update(kwargs)
    return ContextInput.model_validate(payload)


def names(result) -> list[str]:
    return [p.name for p in result.patterns]


def test_score_hand_shape_ron_non_dealer():
    result = score_hand_shape(base_hand(), base_context(), RuleSet())
    assert result.han == 4
    assert result.fu == 40
    assert [item.model_dump() for item in result.fu_breakdown] == [
        {"name": "副底", "fu": 20},
        {"name": "門前ロン", "fu": 10},
        {"name": "面子", "fu": 8},
        {"name": "待ち", "fu": 2},
    ]
    assert result.wait == "tanki"
    assert result.limit == LimitTier.mangan
    assert result.point_label == "満貫"
    assert result.points.total_payment == 8000
    assert result.points.base_payment == 8000
    assert result.payments.total_received == 8000
    assert "場風" in names(result)
    assert result.dora.dora == 1
    assert result.dora.aka_dora == 1


def test_score_hand_shape_uses_seat_wind_for_dealer_ron():
    context = base_context(seat_wind="E", round_wind="S")
    result = score_hand_shape(base_hand(), context, RuleSet())
    assert "自風" in names(result)
    assert result.points.total_payment == 12000


def test_score_hand_shape_uses_seat_wind_for_dealer_tsumo():
    context = base_context(win_type="tsumo", seat_wind="E", round_wind="S")
    result = score_hand_shape(base_hand(), context, RuleSet())
    assert result.han == 5
    assert result.points.non_dealer_payment == 4000
    assert result.points.dealer_payment == 0
    assert result.points.total_payment == 12000


def test_score_hand_shape_payments_breakdown_with_honba_kyotaku():
    result = score_hand_shape(base_hand(), base_context(honba=2, kyotaku=1), RuleSet())
    assert result.points.total_payment == 8600
    assert result.payments.honba_bonus == 600
    assert result.payments.kyotaku_bonus == 1000
    assert result.payments.total_received == 9600


def test_riichi_pinfu_tanyao_tsumo_with_dora():
    hand = HandInput(
        closed_tiles=["2m", "3m", "4m", "5m", "6m", "7m", "3p", "4p", "5p", "6p", "7p", "8p", "4s", "4s"],
        win_tile="8p",
    )
    context = base_context(
        win_type="tsumo",
        seat_wind="S",
        round_wind="E",
        riichi=True,
        dora_indicators=["2p"],
        ura_dora_indicators=["6m"],
        aka_dora_count=1,
        honba=1,
        kyotaku=1,
    )
    result = score_hand_shape(hand, context, RuleSet())
    assert result.wait == "ryanmen"
    assert result.fu == 20
    assert [p.code for p in result.patterns] == [
        "riichi",
        "menzen_tsumo",
        "tanyao",
        "pinfu",
        "dora",
        "ura_dora",
        "aka_dora",
    ]
    assert result.han == 7
    assert result.bonus_tiles == 1
    assert result.limit == LimitTier.haneman
    assert result.points.dealer_payment == 6000
    assert result.points.non_dealer_payment == 3000
    assert result.points.base_payment == 3000
    assert result.points.total_payment == 12300
    assert result.payments.total_received == 13300


def test_first_found_reading_is_scored():
    # 5p could also complete 345p two-sided; the 5p pair is found first
    hand = HandInput(
        closed_tiles=["1m", "2m", "3m", "4m", "5m", "6m", "3p", "4p", "5p", "6s", "7s", "8s", "5p", "5p"],
        win_tile="5p",
    )
    context = base_context(win_type="tsumo", riichi=False, aka_dora_count=0, dora_indicators=[])
    result = score_hand_shape(hand, context, RuleSet())
    assert result.wait == "tanki"
    assert [p.code for p in result.patterns] == ["menzen_tsumo"]
    assert result.fu == 30
    assert result.points.dealer_payment == 500
    assert result.points.non_dealer_payment == 300
    assert result.points.total_payment == 1100


def test_score_hand_shape_rejects_dora_only():
    context = base_context(round_wind="W", seat_wind="S", riichi=False, dora_indicators=["4m"], aka_dora_count=0)
    with pytest.raises(ValueError):
        score_hand_shape(base_hand(), context, RuleSet())


def test_score_hand_shape_double_riichi():
    context = base_context(riichi=False, double_riichi=True, aka_dora_count=0, dora_indicators=[])
    result = score_hand_shape(base_hand(), context, RuleSet())
    assert result.han == 3
    assert "ダブル立直" in names(result)


def test_score_hand_shape_adds_closed_ittsuu():
    hand = base_hand().model_copy(
        update={
            "closed_tiles": ["1m", "2m", "3m", "4m", "5m", "6m", "7m", "8m", "9m", "2p", "2p", "2p", "5s", "5s"],
            "win_tile": "5s",
        }
    )
    context = base_context(round_wind="W", seat_wind="S", riichi=False, aka_dora_count=0, dora_indicators=[])
    result = score_hand_shape(hand, context, RuleSet())
    assert result.han == 2
    assert any(p.name == "一気通貫" and p.han == 2 for p in result.patterns)
    assert result.fu == 40
    assert result.points.total_payment == 2600


def test_score_hand_shape_adds_open_ittsuu():
    hand = HandInput(
        closed_tiles=["4m", "5m", "6m", "7m", "8m", "9m", "2p", "2p", "2p", "5s", "5s"],
        melds=[{"type": "chi", "tiles": ["1m", "2m", "3m"], "open": True}],
        win_tile="5s",
    )
    context = base_context(round_wind="W", seat_wind="S", riichi=False, aka_dora_count=0, dora_indicators=[])
    result = score_hand_shape(hand, context, RuleSet())
    assert result.han == 1
    assert any(p.name == "一気通貫" and p.han == 1 for p in result.patterns)


def test_score_hand_shape_adds_toitoi():
    hand = HandInput(
        closed_tiles=["2m", "2m", "2m", "3p", "3p", "3p", "4s", "4s", "4s", "5s", "5s"],
        melds=[{"type": "pon", "tiles": ["1m", "1m", "1m"], "open": True}],
        win_tile="5s",
    )
    context = base_context(round_wind="W", seat_wind="S", riichi=False, aka_dora_count=0, dora_indicators=[])
    result = score_hand_shape(hand, context, RuleSet())
    assert result.han == 4
    assert any(p.name == "対々和" and p.han == 2 for p in result.patterns)
    assert any(p.name == "三暗刻" and p.han == 2 for p in result.patterns)
    assert result.fu == 40
    assert result.points.total_payment == 8000


def test_score_hand_shape_adds_sanshoku_doukou():
    hand = HandInput(
        closed_tiles=["1p", "1p", "1p", "1s", "1s", "1s", "9m", "9m", "9m", "5p", "5p"],
        melds=[{"type": "pon", "tiles": ["1m", "1m", "1m"], "open": True}],
        win_tile="5p",
    )
    context = base_context(round_wind="W", seat_wind="S", riichi=False, aka_dora_count=0, dora_indicators=[])
    result = score_hand_shape(hand, context, RuleSet())
    assert result.han == 6
    assert any(p.name == "三色同刻" for p in result.patterns)
    assert result.limit == LimitTier.haneman


def test_ron_on_shanpon_scores_concealed_triplet_fu():
    hand = HandInput(
        closed_tiles=["1m", "1m", "1m", "5p", "5p", "5p", "2s", "3s", "4s", "6s", "7s", "8s", "9s", "9s"],
        win_tile="5p",
    )
    context = base_context(aka_dora_count=0, dora_indicators=[])
    result = score_hand_shape(hand, context, RuleSet())
    assert result.wait == "shanpon"
    assert [p.code for p in result.patterns] == ["riichi"]
    assert result.fu == 50
    assert result.points.total_payment == 1600


def test_four_calls_without_pair_is_not_a_winning_shape():
    hand = HandInput(
        closed_tiles=["E", "S"],
        melds=[
            {"type": "pon", "tiles": ["1m", "1m", "1m"]},
            {"type": "pon", "tiles": ["2p", "2p", "2p"]},
            {"type": "pon", "tiles": ["3s", "3s", "3s"]},
            {"type": "pon", "tiles": ["P", "P", "P"]},
        ],
        win_tile="E",
    )
    context = base_context(riichi=False, aka_dora_count=0, dora_indicators=[])
    with pytest.raises(HandRejected) as exc_info:
        score_hand_shape(hand, context, RuleSet())
    assert exc_info.value.reason == RejectReason.no_pattern


def test_pattern_rejection_is_logged(caplog):
    context = base_context(round_wind="W", seat_wind="S", riichi=False, aka_dora_count=0)
    with caplog.at_level(logging.WARNING, logger="riichi_score"):
        with pytest.raises(HandRejected):
            score_hand_shape(base_hand(), context, RuleSet())
    assert any(record.levelno == logging.WARNING and "no_pattern" in record.getMessage() for record in caplog.records)


def test_seven_pairs_are_scored_from_the_irregular_outcome():
    hand = HandInput(
        closed_tiles=["2m", "2m", "5m", "5m", "8m", "8m", "3p", "3p", "6p", "6p", "4s", "4s", "7s", "7s"],
        win_tile="7s",
    )
    context = base_context(aka_dora_count=0, dora_indicators=[])
    result = score_hand_shape(hand, context, RuleSet())
    assert [p.code for p in result.patterns] == ["riichi", "chiitoitsu", "tanyao"]
    assert result.fu == 25
    assert result.han == 4
    assert result.wait == "tanki"
    assert result.points.total_payment == 6400


def test_score_hand_shape_adds_chiitoitsu_and_honroutou():
    hand = base_hand().model_copy(
        update={
            "closed_tiles": ["1m", "1m", "9m", "9m", "1p", "1p", "9p", "9p", "1s", "1s", "9s", "9s", "E", "E"],
            "win_tile": "E",
        }
    )
    context = base_context(round_wind="W", seat_wind="S", riichi=False, aka_dora_count=0, dora_indicators=[])
    result = score_hand_shape(hand, context, RuleSet())
    assert result.han == 4
    assert any(p.name == "七対子" and p.han == 2 for p in result.patterns)
    assert any(p.name == "混老頭" and p.han == 2 for p in result.patterns)


def test_kokushi_thirteen_wait_is_double_yakuman():
    hand = HandInput(
        closed_tiles=["1m", "9m", "1p", "9p", "1s", "9s", "E", "S", "W", "N", "P", "F", "C", "1m"],
        win_tile="1m",
    )
    context = base_context(riichi=False, aka_dora_count=0, dora_indicators=["9s"])
    result = score_hand_shape(hand, context, RuleSet())
    assert [p.code for p in result.patterns] == ["kokushi_thirteen"]
    assert result.han == 26
    assert result.fu == 0
    assert result.limit == LimitTier.double_yakuman
    assert result.wait == "kokushi_thirteen"
    assert result.points.total_payment == 64000


def test_kokushi_single_wait_without_double_yakuman_rule():
    hand = HandInput(
        closed_tiles=["1m", "9m", "1p", "9p", "1s", "9s", "E", "S", "W", "N", "P", "F", "C", "1m"],
        win_tile="C",
    )
    context = base_context(riichi=False, aka_dora_count=0, dora_indicators=[])
    result = score_hand_shape(hand, context, RuleSet(double_yakuman_ari=False))
    assert result.limit == LimitTier.yakuman
    assert result.wait == "kokushi_single"
    assert result.points.total_payment == 32000


def test_irregular_hand_without_pattern_is_rejected():
    hand = HandInput(
        closed_tiles=["1m", "2m", "4m", "5m", "7m", "8m", "1p", "3p", "5p", "7p", "9p", "E", "S", "W"],
        win_tile="W",
    )
    with pytest.raises(HandRejected) as exc_info:
        score_hand_shape(hand, base_context(aka_dora_count=0))
    assert exc_info.value.reason == RejectReason.no_pattern


def test_rejects_before_decomposition():
    context = base_context(win_type="ron", haitei=True, houtei=True)
    with pytest.raises(HandRejected) as exc_info:
        score_hand_shape(base_hand(), context)
    assert exc_info.value.reason == RejectReason.haitei_on_ron


def test_custom_recognizer_receives_decomposition():
    seen = []

    class StubRecognizer:
        def recognize(self, decomposition, hand, context, rules):
            seen.append(decomposition)
            return RecognizedPatterns(decomposition=decomposition, patterns=(Pattern.chiitoitsu,), bonus_tiles=0)

    hand = HandInput(
        closed_tiles=["2m", "2m", "5m", "5m", "8m", "8m", "3p", "3p", "6p", "6p", "4s", "4s", "7s", "7s"],
        win_tile="7s",
    )
    result = score_hand_shape(hand, base_context(riichi=False, aka_dora_count=0), recognizer=StubRecognizer())
    assert isinstance(seen[0], Irregular)
    assert result.fu == 25
    assert result.han == 2


def test_scoring_is_idempotent():
    first = score_hand_shape(base_hand(), base_context(), RuleSet())
    second = score_hand_shape(base_hand(), base_context(), RuleSet())
    assert first == second
