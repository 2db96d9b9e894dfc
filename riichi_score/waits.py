from __future__ import annotations

from typing import Sequence as SequenceType

from riichi_score.errors import DecompositionError
from riichi_score.models import Meld, Pair, Sequence, Wait
from riichi_score.tiles import Tile


def winning_meld(melds: SequenceType[Meld], win_tile: Tile) -> Meld:
    # the winning tile always lands in the concealed part
    ordered = [m for m in melds if not m.is_open] + [m for m in melds if m.is_open]
    for meld in ordered:
        if meld.contains(win_tile):
            return meld
    raise DecompositionError(f"winning tile {win_tile} is in neither the pair nor any set")


def classify_wait(melds: SequenceType[Meld], pair: Pair, win_tile: Tile) -> Wait:
    if win_tile == pair.tile:
        return Wait.tanki

    meld = winning_meld(melds, win_tile)
    if not isinstance(meld, Sequence):
        return Wait.shanpon

    low, middle, high = meld.tiles
    if win_tile == middle:
        return Wait.kanchan
    if win_tile == low:
        return Wait.penchan if high.rank == 9 else Wait.ryanmen
    return Wait.penchan if low.rank == 1 else Wait.ryanmen
