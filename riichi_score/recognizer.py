from __future__ import annotations

import logging
from collections import Counter

from riichi_score.errors import HandRejected, RejectReason
from riichi_score.models import Decomposition, Irregular, Meld, Quad, Regular, Sequence, Wait
from riichi_score.patterns import Pattern, RecognizedPatterns, is_limit_pattern
from riichi_score.schemas import ContextInput, HandInput, RuleSet
from riichi_score.tiles import Tile, dora_from_indicator, parse_tile, tiles_from_counts
from riichi_score.waits import winning_meld

logger = logging.getLogger(__name__)

TERMINAL_HONOR_INDICES = (0, 8, 9, 17, 18, 26, 27, 28, 29, 30, 31, 32, 33)
GREEN_INDICES = frozenset({19, 20, 21, 23, 25, 32})
CHUUREN_BASE = (3, 1, 1, 1, 1, 1, 1, 1, 3)


def _wind_tile(wind) -> Tile:
    return parse_tile(wind.value)


def _is_kokushi(counts: tuple[int, ...]) -> bool:
    if any(counts[i] > 0 for i in range(34) if i not in TERMINAL_HONOR_INDICES):
        return False
    if any(counts[i] == 0 for i in TERMINAL_HONOR_INDICES):
        return False
    return sum(1 for i in TERMINAL_HONOR_INDICES if counts[i] == 2) == 1


def _is_chiitoitsu(counts: tuple[int, ...]) -> bool:
    return sum(1 for c in counts if c == 2) == 7 and all(c in {0, 2} for c in counts)


def _is_triplet_like(meld: Meld) -> bool:
    return not isinstance(meld, Sequence)


def _has_terminal_or_honor(meld: Meld) -> bool:
    return any(t.is_terminal_or_honor for t in meld.tiles)


def _flush_patterns(tiles: list[Tile]) -> list[Pattern]:
    suits = {t.suit for t in tiles if not t.is_honor}
    has_honor = any(t.is_honor for t in tiles)
    if len(suits) != 1:
        return []
    return [Pattern.honitsu] if has_honor else [Pattern.chinitsu]


class StandardRecognizer:
    """Riichi pattern rules over a first-found decomposition."""

    def recognize(
        self,
        decomposition: Decomposition,
        hand: HandInput,
        context: ContextInput,
        rules: RuleSet,
    ) -> RecognizedPatterns:
        if isinstance(decomposition, Regular):
            patterns, tiles, wait = self._regular(decomposition, context, rules)
        else:
            patterns, tiles, wait = self._irregular(decomposition, hand, context, rules)

        limit = [p for p in patterns if is_limit_pattern(p)]
        if limit:
            logger.debug("limit patterns: %s", [p.value for p in limit])
            return RecognizedPatterns(decomposition=decomposition, patterns=tuple(limit), bonus_tiles=0, wait=wait)

        if not patterns:
            logger.warning("hand rejected: %s (no scoring pattern)", RejectReason.no_pattern.value)
            raise HandRejected(RejectReason.no_pattern, "No yaku: the hand has no scoring pattern")

        bonus = self._bonus_patterns(tiles, context, rules)
        aka = context.aka_dora_count if rules.aka_ari else 0
        return RecognizedPatterns(
            decomposition=decomposition,
            patterns=tuple(patterns + bonus),
            bonus_tiles=aka,
            wait=wait,
        )

    def _situational(self, context: ContextInput, concealed: bool) -> list[Pattern]:
        patterns: list[Pattern] = []
        if context.double_riichi:
            patterns.append(Pattern.double_riichi)
        elif context.riichi:
            patterns.append(Pattern.riichi)
        if context.ippatsu:
            patterns.append(Pattern.ippatsu)
        if context.is_tsumo and concealed:
            patterns.append(Pattern.menzen_tsumo)
        if context.haitei:
            patterns.append(Pattern.haitei)
        if context.houtei:
            patterns.append(Pattern.houtei)
        if context.rinshan:
            patterns.append(Pattern.rinshan)
        if context.chankan:
            patterns.append(Pattern.chankan)
        if context.tenhou:
            patterns.append(Pattern.tenhou)
        if context.chiihou:
            patterns.append(Pattern.chiihou)
        if context.renhou:
            patterns.append(Pattern.renhou)
        return patterns

    def _bonus_patterns(self, tiles: list[Tile], context: ContextInput, rules: RuleSet) -> list[Pattern]:
        counts = Counter(tiles)
        bonus: list[Pattern] = []
        for code in context.dora_indicators:
            bonus.extend([Pattern.dora] * counts[dora_from_indicator(parse_tile(code))])
        if context.riichi or context.double_riichi:
            for code in context.ura_dora_indicators:
                bonus.extend([Pattern.ura_dora] * counts[dora_from_indicator(parse_tile(code))])
        if rules.aka_ari:
            bonus.extend([Pattern.aka_dora] * context.aka_dora_count)
        return bonus

    def _irregular(
        self,
        hand: Irregular,
        hand_input: HandInput,
        context: ContextInput,
        rules: RuleSet,
    ) -> tuple[list[Pattern], list[Tile], Wait | None]:
        tiles = tiles_from_counts(list(hand.counts))
        if hand_input.melds:
            logger.warning("hand rejected: %s (not a winning shape)", RejectReason.no_pattern.value)
            raise HandRejected(RejectReason.no_pattern, "Hand is not a valid winning shape")

        if _is_kokushi(hand.counts):
            patterns = self._situational(context, concealed=True)
            if hand.counts[hand.win_tile.index] == 2:
                return patterns + [Pattern.kokushi_thirteen], tiles, Wait.kokushi_thirteen
            return patterns + [Pattern.kokushi], tiles, Wait.kokushi_single

        if not _is_chiitoitsu(hand.counts):
            logger.warning("hand rejected: %s (not a winning shape)", RejectReason.no_pattern.value)
            raise HandRejected(RejectReason.no_pattern, "Hand is not a valid winning shape")

        patterns = self._situational(context, concealed=True)
        patterns.append(Pattern.chiitoitsu)
        if all(t.is_honor for t in tiles):
            patterns.append(Pattern.tsuuiisou)
        elif all(t.is_terminal_or_honor for t in tiles):
            patterns.append(Pattern.honroutou)
        if all(t.is_simple for t in tiles):
            patterns.append(Pattern.tanyao)
        patterns.extend(_flush_patterns(tiles))
        return patterns, tiles, Wait.tanki

    def _regular(self, hand: Regular, context: ContextInput, rules: RuleSet) -> tuple[list[Pattern], list[Tile], Wait]:
        concealed = hand.is_concealed
        tiles = hand.tiles()
        melds = hand.melds
        pair = hand.pair.tile
        round_wind = _wind_tile(context.round_wind)
        seat_wind = _wind_tile(context.seat_wind)

        sequences = [m for m in melds if isinstance(m, Sequence)]
        triplets = [m for m in melds if _is_triplet_like(m)]
        quads = [m for m in melds if isinstance(m, Quad)]

        # a triplet completed by a discard does not count as concealed
        ron_triplet = None
        if not context.is_tsumo and hand.wait == Wait.shanpon:
            ron_triplet = winning_meld(melds, hand.win_tile)
        concealed_triplets = [m for m in triplets if not m.is_open and m is not ron_triplet]

        patterns = self._situational(context, concealed)

        for meld in triplets:
            if meld.tile == round_wind:
                patterns.append(Pattern.yakuhai_round_wind)
            if meld.tile == seat_wind:
                patterns.append(Pattern.yakuhai_seat_wind)
            if meld.tile.is_dragon:
                patterns.append(Pattern.yakuhai_dragon)

        if all(t.is_simple for t in tiles) and (concealed or rules.kuitan_ari):
            patterns.append(Pattern.tanyao)

        value_pair = pair.is_dragon or pair in {round_wind, seat_wind}
        if concealed and len(sequences) == 4 and not value_pair and hand.wait == Wait.ryanmen:
            patterns.append(Pattern.pinfu)

        if concealed:
            repeats = Counter(m.start for m in sequences)
            doubled = sum(c // 2 for c in repeats.values())
            if doubled == 2:
                patterns.append(Pattern.ryanpeikou)
            elif doubled == 1:
                patterns.append(Pattern.iipeikou)

        starts = {(m.start.suit, m.start.rank) for m in sequences}
        if any(all((suit, rank) in starts for suit in ("m", "p", "s")) for rank in range(1, 8)):
            patterns.append(Pattern.sanshoku_doujun)
        if any(all((suit, rank) in starts for rank in (1, 4, 7)) for suit in ("m", "p", "s")):
            patterns.append(Pattern.ittsu)

        if sequences and _has_terminal_or_honor_all(melds, pair):
            if any(t.is_honor for t in tiles):
                patterns.append(Pattern.chanta)
            else:
                patterns.append(Pattern.junchan)

        if len(triplets) == 4:
            patterns.append(Pattern.toitoi)
        if len(concealed_triplets) == 3:
            patterns.append(Pattern.sanankou)

        triplet_ranks = {(m.tile.suit, m.tile.rank) for m in triplets if not m.tile.is_honor}
        if any(all((suit, rank) in triplet_ranks for suit in ("m", "p", "s")) for rank in range(1, 10)):
            patterns.append(Pattern.sanshoku_doukou)

        if len(quads) == 3:
            patterns.append(Pattern.sankantsu)

        dragon_triplets = sum(1 for m in triplets if m.tile.is_dragon)
        if dragon_triplets == 2 and pair.is_dragon:
            patterns.append(Pattern.shousangen)

        if all(t.is_terminal_or_honor for t in tiles):
            patterns.append(Pattern.honroutou)

        patterns.extend(_flush_patterns(tiles))
        patterns.extend(self._regular_limits(hand, triplets, concealed_triplets, quads, tiles))
        return patterns, tiles, hand.wait

    def _regular_limits(
        self,
        hand: Regular,
        triplets: list[Meld],
        concealed_triplets: list[Meld],
        quads: list[Meld],
        tiles: list[Tile],
    ) -> list[Pattern]:
        limits: list[Pattern] = []
        pair = hand.pair.tile

        if sum(1 for m in triplets if m.tile.is_dragon) == 3:
            limits.append(Pattern.daisangen)

        if len(concealed_triplets) == 4:
            limits.append(Pattern.suuankou_tanki if hand.wait == Wait.tanki else Pattern.suuankou)

        wind_triplets = sum(1 for m in triplets if m.tile.is_wind)
        if wind_triplets == 4:
            limits.append(Pattern.daisuushii)
        elif wind_triplets == 3 and pair.is_wind:
            limits.append(Pattern.shousuushii)

        if all(t.is_honor for t in tiles):
            limits.append(Pattern.tsuuiisou)
        if all(t.is_terminal for t in tiles):
            limits.append(Pattern.chinroutou)
        if all(t.index in GREEN_INDICES for t in tiles):
            limits.append(Pattern.ryuuiisou)
        if len(quads) == 4:
            limits.append(Pattern.suukantsu)

        chuuren = self._chuuren(hand, tiles)
        if chuuren is not None:
            limits.append(chuuren)
        return limits

    def _chuuren(self, hand: Regular, tiles: list[Tile]) -> Pattern | None:
        if not hand.is_concealed or any(isinstance(m, Quad) for m in hand.melds):
            return None
        suits = {t.suit for t in tiles}
        if len(suits) != 1 or None in suits:
            return None
        ranks = Counter(t.rank for t in tiles)
        if any(ranks[r] < CHUUREN_BASE[r - 1] for r in range(1, 10)):
            return None
        extra = [r for r in range(1, 10) if ranks[r] > CHUUREN_BASE[r - 1]]
        if extra == [hand.win_tile.rank]:
            return Pattern.junsei_chuuren
        return Pattern.chuuren


def _has_terminal_or_honor_all(melds: tuple[Meld, ...], pair: Tile) -> bool:
    return pair.is_terminal_or_honor and all(_has_terminal_or_honor(m) for m in melds)
