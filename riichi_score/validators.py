from __future__ import annotations

import logging
from dataclasses import dataclass

from riichi_score.errors import HandRejected, RejectReason
from riichi_score.models import Meld, Quad, Sequence, Triplet
from riichi_score.schemas import ContextInput, HandInput, MeldType, WinType
from riichi_score.tiles import Tile, count_tiles, parse_tile, parse_tiles

logger = logging.getLogger(__name__)

MAX_CALLS = 4
MAX_COPIES = 4
MAX_AKA_DORA = 4
FIVE_INDICES = (4, 13, 22)


@dataclass(frozen=True)
class ParsedHand:
    closed_tiles: tuple[Tile, ...]
    calls: tuple[Meld, ...]
    win_tile: Tile
    counts: tuple[int, ...]

    @property
    def tile_count(self) -> int:
        return sum(self.counts)

    @property
    def concealed_counts(self) -> list[int]:
        return count_tiles(self.closed_tiles)


def _reject(reason: RejectReason, message: str, **details) -> HandRejected:
    logger.warning("hand rejected: %s (%s)", reason.value, message)
    return HandRejected(reason, message, details or None)


def validate_game_state(context: ContextInput, call_count: int) -> None:
    """Reject mutually exclusive win-condition flags."""
    ron = context.win_type == WinType.ron
    tsumo = context.win_type == WinType.tsumo

    if context.riichi and context.double_riichi:
        raise _reject(RejectReason.riichi_conflict, "riichi and double_riichi cannot both be true")
    if context.ippatsu and not (context.riichi or context.double_riichi):
        raise _reject(RejectReason.ippatsu_without_riichi, "ippatsu cannot be true when riichi/double_riichi is false")

    if context.haitei and ron:
        raise _reject(RejectReason.haitei_on_ron, "haitei cannot be true on ron")
    if context.houtei and tsumo:
        raise _reject(RejectReason.houtei_on_tsumo, "houtei cannot be true on tsumo")
    if context.haitei and context.houtei:
        raise _reject(RejectReason.haitei_with_houtei, "haitei and houtei cannot both be true")
    if context.rinshan and ron:
        raise _reject(RejectReason.rinshan_on_ron, "rinshan cannot be true on ron")
    if context.chankan and tsumo:
        raise _reject(RejectReason.chankan_on_tsumo, "chankan cannot be true on tsumo")

    if context.tenhou and context.chiihou:
        raise _reject(RejectReason.tenhou_with_chiihou, "chiihou and tenhou cannot both be true")
    if context.tenhou:
        if not context.is_dealer:
            raise _reject(RejectReason.tenhou_requires_dealer, "tenhou requires dealer")
        if not tsumo:
            raise _reject(RejectReason.tenhou_requires_tsumo, "tenhou requires tsumo")
        if call_count:
            raise _reject(RejectReason.tenhou_with_calls, "tenhou cannot have any calls")
    if context.chiihou:
        if context.is_dealer:
            raise _reject(RejectReason.chiihou_requires_non_dealer, "chiihou requires non-dealer")
        if not tsumo:
            raise _reject(RejectReason.chiihou_requires_tsumo, "chiihou requires tsumo")
        if call_count:
            raise _reject(RejectReason.chiihou_with_calls, "chiihou cannot have any calls")
    if context.renhou:
        if not ron:
            raise _reject(RejectReason.renhou_requires_ron, "renhou requires ron")
        if context.is_dealer:
            raise _reject(RejectReason.renhou_requires_non_dealer, "renhou requires non-dealer")


def parse_call(meld_type: MeldType, tiles: list[Tile], is_open: bool) -> Meld:
    if not tiles:
        raise _reject(RejectReason.invalid_call, f"{meld_type.value} has no tiles")
    first = tiles[0]
    if meld_type == MeldType.chi:
        ordered = sorted(tiles)
        if (
            len(ordered) != 3
            or ordered[0].is_honor
            or ordered[0].suit != ordered[2].suit
            or [t.index - ordered[0].index for t in ordered] != [0, 1, 2]
        ):
            raise _reject(RejectReason.invalid_call, "chi must be three consecutive tiles of one suit", tiles=[t.code for t in tiles])
        return Sequence(ordered[0], is_open=is_open)
    if meld_type == MeldType.pon:
        if len(tiles) != 3 or any(t != first for t in tiles):
            raise _reject(RejectReason.invalid_call, "pon must contain exactly 3 identical tiles", tiles=[t.code for t in tiles])
        return Triplet(first, is_open=is_open)
    if len(tiles) != 4 or any(t != first for t in tiles):
        raise _reject(RejectReason.invalid_call, f"{meld_type.value} must contain exactly 4 identical tiles", tiles=[t.code for t in tiles])
    return Quad(first, is_open=is_open and meld_type != MeldType.ankan)


def validate_hand_composition(closed: list[Tile], calls: list[Meld], win_tile: Tile, counts: list[int], aka_dora_count: int) -> None:
    quads = sum(1 for m in calls if isinstance(m, Quad))
    total_tiles = sum(counts)
    expected_tiles = 3 * (4 - quads) + 4 * quads + 2
    # 14 tiles without quads may also be chiitoitsu or kokushi
    if not (total_tiles == 14 and quads == 0) and total_tiles != expected_tiles:
        raise _reject(
            RejectReason.tile_count_mismatch,
            f"Total tiles must be {expected_tiles} at win state (14 + number of kans)",
            expected=expected_tiles,
            actual=total_tiles,
        )

    if win_tile not in closed:
        raise _reject(RejectReason.win_tile_not_held, f"Winning tile {win_tile} is not among the concealed tiles")

    for index, count in enumerate(counts):
        if count > MAX_COPIES:
            raise _reject(RejectReason.tile_overflow, f"Tile appears 5+ times in hand: {Tile(index)}")

    fives = sum(counts[i] for i in FIVE_INDICES)
    if aka_dora_count > fives:
        raise _reject(RejectReason.aka_exceeds_fives, "aka_dora_count exceeds the number of 5 tiles in hand")
    if aka_dora_count > MAX_AKA_DORA:
        raise _reject(RejectReason.aka_overflow, "aka_dora_count cannot be greater than 4")


def validate_score_request(hand: HandInput, context: ContextInput) -> ParsedHand:
    """Run every check before decomposition; the first failure raises HandRejected."""
    closed = parse_tiles(hand.closed_tiles)
    win_tile = parse_tile(hand.win_tile)
    meld_tiles = [parse_tiles(m.tiles) for m in hand.melds]
    parse_tiles(context.dora_indicators)
    parse_tiles(context.ura_dora_indicators)

    validate_game_state(context, len(hand.melds))

    if len(hand.melds) > MAX_CALLS:
        raise _reject(RejectReason.too_many_calls, f"At most {MAX_CALLS} calls can be declared", calls=len(hand.melds))
    calls = [parse_call(m.type, tiles, m.open) for m, tiles in zip(hand.melds, meld_tiles)]

    all_tiles = list(closed)
    for tiles in meld_tiles:
        all_tiles.extend(tiles)
    counts = count_tiles(all_tiles)
    validate_hand_composition(closed, calls, win_tile, counts, context.aka_dora_count)

    return ParsedHand(closed_tiles=tuple(closed), calls=tuple(calls), win_tile=win_tile, counts=tuple(counts))
