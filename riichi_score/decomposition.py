"""Split a winning hand into four sets and a pair.

The concealed tiles are searched with undo-based backtracking over a 34-slot
count vector. Pair candidates are tried in tile order and the first reading
that works is kept; when none works the hand is handed on as `Irregular` so
the pattern recognizer can test chiitoitsu and kokushi against the raw counts.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Sequence as SequenceType

from riichi_score.errors import HandRejected, RejectReason
from riichi_score.models import Decomposition, Irregular, Meld, Pair, Regular, Sequence, Triplet, Wait
from riichi_score.tiles import Tile
from riichi_score.validators import ParsedHand
from riichi_score.waits import classify_wait

logger = logging.getLogger(__name__)

SETS_PER_HAND = 4
IRREGULAR_HAND_SIZE = 14


@contextmanager
def _taken(counts: list[int], indices: tuple[int, ...]) -> Iterator[None]:
    for i in indices:
        counts[i] -= 1
    try:
        yield
    finally:
        for i in indices:
            counts[i] += 1


def _find_sets(counts: list[int], needed: int, found: list[Meld]) -> bool:
    first = next((i for i, c in enumerate(counts) if c > 0), -1)
    if first == -1:
        return len(found) == needed
    if len(found) == needed:
        return False

    tile = Tile(first)
    if counts[first] >= 3:
        with _taken(counts, (first, first, first)):
            found.append(Triplet(tile))
            if _find_sets(counts, needed, found):
                return True
            found.pop()

    if first < 27 and first % 9 <= 6 and counts[first + 1] > 0 and counts[first + 2] > 0:
        with _taken(counts, (first, first + 1, first + 2)):
            found.append(Sequence(tile))
            if _find_sets(counts, needed, found):
                return True
            found.pop()

    return False


def find_sets(counts: list[int], needed: int) -> list[Meld] | None:
    """Concealed sets covering `counts` exactly, or None. `counts` comes back unchanged."""
    found: list[Meld] = []
    if _find_sets(counts, needed, found):
        return found
    return None


def decompose(
    concealed_counts: SequenceType[int],
    calls: SequenceType[Meld],
    win_tile: Tile,
    full_counts: SequenceType[int],
) -> Decomposition:
    needed = SETS_PER_HAND - len(calls)

    if needed == 0:
        pairs = [i for i, c in enumerate(concealed_counts) if c == 2]
        if len(pairs) == 1 and sum(concealed_counts) == 2:
            pair = Pair(Tile(pairs[0]))
            logger.debug("four calls, pair %s", pair.tile)
            return Regular(melds=tuple(calls), pair=pair, win_tile=win_tile, wait=Wait.tanki)
        if sum(full_counts) != IRREGULAR_HAND_SIZE:
            logger.warning("hand rejected: %s (four calls, no pair)", RejectReason.no_pair.value)
            raise HandRejected(RejectReason.no_pair, "Four calls declared but no pair in the concealed tiles")
        return Irregular(counts=tuple(full_counts), win_tile=win_tile)

    for i, count in enumerate(concealed_counts):
        if count < 2:
            continue
        work = list(concealed_counts)
        work[i] -= 2
        logger.debug("trying pair %s", Tile(i))
        found = find_sets(work, needed)
        if found is None:
            continue
        melds = tuple(calls) + tuple(found)
        pair = Pair(Tile(i))
        wait = classify_wait(melds, pair, win_tile)
        logger.debug("regular reading with pair %s, wait %s", pair.tile, wait.value)
        return Regular(melds=melds, pair=pair, win_tile=win_tile, wait=wait)

    logger.debug("no 4-set reading, handing irregular counts to the recognizer")
    return Irregular(counts=tuple(full_counts), win_tile=win_tile)


def decompose_hand(parsed: ParsedHand) -> Decomposition:
    return decompose(parsed.concealed_counts, parsed.calls, parsed.win_tile, parsed.counts)
