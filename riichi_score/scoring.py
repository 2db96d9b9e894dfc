"""Han, fu and payments for a recognized hand.

Runs only after the recognizer accepted the hand, so nothing here rejects
input. Limit patterns bypass han/fu entirely; everything else goes through
`fu * 2**(han + 2)` with the mangan cap and the fixed limit tiers.
"""

from __future__ import annotations

import logging
from collections import Counter

from riichi_score.errors import DecompositionError
from riichi_score.models import Meld, Quad, Regular, Sequence, Wait
from riichi_score.patterns import (
    BONUS_PATTERNS,
    PATTERN_NAMES,
    Pattern,
    RecognizedPatterns,
    limit_multiplier,
    pattern_han,
)
from riichi_score.schemas import (
    ContextInput,
    DoraBreakdown,
    FuBreakdownItem,
    LimitTier,
    PatternItem,
    Payments,
    Points,
    RuleSet,
    ScoreResult,
)
from riichi_score.tiles import parse_tile

logger = logging.getLogger(__name__)

YAKUMAN_BASE = 8000
MANGAN_BASE = 2000
BASE_FU = 20
CHIITOITSU_FU = 25
TSUMO_HONBA = 100
RON_HONBA = 300
KYOTAKU_POINTS = 1000

LIMIT_BASES = {
    LimitTier.mangan: 2000,
    LimitTier.haneman: 3000,
    LimitTier.baiman: 4000,
    LimitTier.sanbaiman: 6000,
    LimitTier.kazoe_yakuman: 8000,
}

LIMIT_LABELS = {
    None: "通常",
    LimitTier.mangan: "満貫",
    LimitTier.haneman: "跳満",
    LimitTier.baiman: "倍満",
    LimitTier.sanbaiman: "三倍満",
    LimitTier.kazoe_yakuman: "数え役満",
    LimitTier.yakuman: "役満",
    LimitTier.double_yakuman: "ダブル役満",
}

# (open, terminal_or_honor) -> triplet fu; a quad is worth four times as much
TRIPLET_FU = {
    (True, False): 2,
    (True, True): 4,
    (False, False): 4,
    (False, True): 8,
}

EXTRA_FU_WAITS = {Wait.tanki, Wait.kanchan, Wait.penchan}


def round_up_100(points: int) -> int:
    return ((points + 99) // 100) * 100


def round_up_10(fu: int) -> int:
    return ((fu + 9) // 10) * 10


def meld_fu(meld: Meld, is_open: bool) -> int:
    if isinstance(meld, Sequence):
        return 0
    fu = TRIPLET_FU[(is_open, meld.tile.is_terminal_or_honor)]
    return fu * 4 if isinstance(meld, Quad) else fu


def pair_fu(hand: Regular, context: ContextInput, rules: RuleSet) -> int:
    tile = hand.pair.tile
    if tile.is_dragon:
        return 2
    if not tile.is_wind:
        return 0
    is_round = tile == parse_tile(context.round_wind.value)
    is_seat = tile == parse_tile(context.seat_wind.value)
    if is_round and is_seat:
        return rules.renpu_fu
    return 2 if is_round or is_seat else 0


def calculate_fu(recognized: RecognizedPatterns, context: ContextInput, rules: RuleSet) -> tuple[int, list[FuBreakdownItem]]:
    patterns = recognized.patterns
    if Pattern.chiitoitsu in patterns:
        return CHIITOITSU_FU, [FuBreakdownItem(name="七対子", fu=CHIITOITSU_FU)]
    if Pattern.pinfu in patterns:
        if context.is_tsumo:
            return 20, [FuBreakdownItem(name="副底", fu=BASE_FU)]
        return 30, [FuBreakdownItem(name="副底", fu=BASE_FU), FuBreakdownItem(name="門前ロン", fu=10)]

    hand = recognized.decomposition
    if not isinstance(hand, Regular):
        raise DecompositionError("irregular hand reached the fu table without chiitoitsu")

    details = [FuBreakdownItem(name="副底", fu=BASE_FU)]
    if context.is_tsumo:
        details.append(FuBreakdownItem(name="ツモ", fu=2))
    elif hand.is_concealed:
        details.append(FuBreakdownItem(name="門前ロン", fu=10))

    for meld in hand.melds:
        mfu = meld_fu(meld, meld.is_open)
        if mfu:
            details.append(FuBreakdownItem(name="面子", fu=mfu))

    pfu = pair_fu(hand, context, rules)
    if pfu:
        details.append(FuBreakdownItem(name="雀頭", fu=pfu))

    if hand.wait in EXTRA_FU_WAITS:
        details.append(FuBreakdownItem(name="待ち", fu=2))

    total = sum(item.fu for item in details)
    rounded = round_up_10(total)
    if rounded > total:
        details.append(FuBreakdownItem(name="切り上げ", fu=rounded - total))
    return rounded, details


def basic_points(han: int, fu: int, rules: RuleSet) -> tuple[int, LimitTier | None]:
    if han >= 13:
        tier = LimitTier.kazoe_yakuman if rules.kazoe_yakuman_ari else LimitTier.sanbaiman
    elif han >= 11:
        tier = LimitTier.sanbaiman
    elif han >= 8:
        tier = LimitTier.baiman
    elif han >= 6:
        tier = LimitTier.haneman
    elif han == 5:
        tier = LimitTier.mangan
    else:
        points = fu * (2 ** (han + 2))
        if points >= MANGAN_BASE:
            return MANGAN_BASE, LimitTier.mangan
        return points, None
    return LIMIT_BASES[tier], tier


def calculate_payments(context: ContextInput, base: int) -> tuple[Points, Payments]:
    honba = context.honba
    if context.is_tsumo and context.is_dealer:
        each = round_up_100(base * 2)
        total = (each + honba * TSUMO_HONBA) * 3
        points = Points(base_payment=each, dealer_payment=0, non_dealer_payment=each, total_payment=total)
    elif context.is_tsumo:
        dealer_pay = round_up_100(base * 2)
        non_dealer_pay = round_up_100(base)
        total = (dealer_pay + honba * TSUMO_HONBA) + (non_dealer_pay + honba * TSUMO_HONBA) * 2
        points = Points(
            base_payment=non_dealer_pay,
            dealer_payment=dealer_pay,
            non_dealer_payment=non_dealer_pay,
            total_payment=total,
        )
    else:
        total = round_up_100(base * (6 if context.is_dealer else 4)) + honba * RON_HONBA
        points = Points(base_payment=total, total_payment=total)

    kyotaku_bonus = context.kyotaku * KYOTAKU_POINTS
    payments = Payments(
        honba_bonus=honba * RON_HONBA,
        kyotaku_bonus=kyotaku_bonus,
        total_received=points.total_payment + kyotaku_bonus,
    )
    return points, payments


def _yakuman_tier(multiplier: int) -> LimitTier:
    if multiplier == 1:
        return LimitTier.yakuman
    if multiplier == 2:
        return LimitTier.double_yakuman
    return LimitTier.multiple_yakuman


def _limit_result(recognized: RecognizedPatterns, context: ContextInput, rules: RuleSet, multiplier: int) -> ScoreResult:
    items = [
        PatternItem(code=p.value, name=PATTERN_NAMES[p], han=13 * limit_multiplier(p, rules.double_yakuman_ari))
        for p in recognized.patterns
        if limit_multiplier(p, rules.double_yakuman_ari)
    ]
    tier = _yakuman_tier(multiplier)
    points, payments = calculate_payments(context, YAKUMAN_BASE * multiplier)
    return ScoreResult(
        han=13 * multiplier,
        fu=0,
        patterns=items,
        bonus_tiles=0,
        wait=_wait_of(recognized),
        limit=tier,
        point_label=LIMIT_LABELS.get(tier, f"{multiplier}倍役満"),
        points=points,
        payments=payments,
    )


def _wait_of(recognized: RecognizedPatterns) -> str | None:
    if recognized.wait is not None:
        return recognized.wait.value
    if isinstance(recognized.decomposition, Regular):
        return recognized.decomposition.wait.value
    return None


def _is_concealed(recognized: RecognizedPatterns) -> bool:
    hand = recognized.decomposition
    return hand.is_concealed if isinstance(hand, Regular) else True


def calculate_score(recognized: RecognizedPatterns, context: ContextInput, rules: RuleSet) -> ScoreResult:
    multiplier = sum(limit_multiplier(p, rules.double_yakuman_ari) for p in recognized.patterns)
    if multiplier:
        result = _limit_result(recognized, context, rules, multiplier)
        logger.debug("limit hand x%d", multiplier)
        return result

    concealed = _is_concealed(recognized)
    items = [PatternItem(code=p.value, name=PATTERN_NAMES[p], han=pattern_han(p, concealed)) for p in recognized.patterns]
    han = sum(item.han for item in items)
    fu, fu_breakdown = calculate_fu(recognized, context, rules)
    base, tier = basic_points(han, fu, rules)
    points, payments = calculate_payments(context, base)

    bonus = Counter(p for p in recognized.patterns if p in BONUS_PATTERNS)
    return ScoreResult(
        han=han,
        fu=fu,
        fu_breakdown=fu_breakdown,
        patterns=items,
        bonus_tiles=recognized.bonus_tiles,
        dora=DoraBreakdown(
            dora=bonus[Pattern.dora],
            aka_dora=bonus[Pattern.aka_dora],
            ura_dora=bonus[Pattern.ura_dora],
        ),
        wait=_wait_of(recognized),
        limit=tier,
        point_label=LIMIT_LABELS[tier],
        points=points,
        payments=payments,
    )
