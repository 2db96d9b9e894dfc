from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from riichi_score.errors import DecompositionError
from riichi_score.tiles import TILE_KINDS, Tile


class Wait(str, Enum):
    ryanmen = "ryanmen"
    penchan = "penchan"
    kanchan = "kanchan"
    shanpon = "shanpon"
    tanki = "tanki"
    kokushi_single = "kokushi_single"
    kokushi_thirteen = "kokushi_thirteen"


@dataclass(frozen=True)
class Sequence:
    start: Tile
    is_open: bool = False

    def __post_init__(self) -> None:
        if self.start.is_honor or self.start.rank > 7:
            raise ValueError(f"sequence cannot start at {self.start}")

    @property
    def tiles(self) -> tuple[Tile, Tile, Tile]:
        i = self.start.index
        return (self.start, Tile(i + 1), Tile(i + 2))

    def contains(self, tile: Tile) -> bool:
        return tile in self.tiles


@dataclass(frozen=True)
class Triplet:
    tile: Tile
    is_open: bool = False

    @property
    def tiles(self) -> tuple[Tile, Tile, Tile]:
        return (self.tile, self.tile, self.tile)

    def contains(self, tile: Tile) -> bool:
        return tile == self.tile


@dataclass(frozen=True)
class Quad:
    tile: Tile
    is_open: bool = False

    @property
    def tiles(self) -> tuple[Tile, Tile, Tile, Tile]:
        return (self.tile, self.tile, self.tile, self.tile)

    def contains(self, tile: Tile) -> bool:
        return tile == self.tile


Meld = Union[Sequence, Triplet, Quad]


@dataclass(frozen=True)
class Pair:
    tile: Tile

    @property
    def tiles(self) -> tuple[Tile, Tile]:
        return (self.tile, self.tile)


@dataclass(frozen=True)
class Regular:
    """Four sets and a pair."""

    melds: tuple[Meld, ...]
    pair: Pair
    win_tile: Tile
    wait: Wait

    def __post_init__(self) -> None:
        if len(self.melds) != 4:
            raise DecompositionError(f"regular hand needs 4 sets, got {len(self.melds)}")

    @property
    def is_concealed(self) -> bool:
        return not any(m.is_open for m in self.melds)

    def tiles(self) -> list[Tile]:
        tiles: list[Tile] = []
        for meld in self.melds:
            tiles.extend(meld.tiles)
        tiles.extend(self.pair.tiles)
        return sorted(tiles)


@dataclass(frozen=True)
class Irregular:
    """No 4-set/1-pair reading exists; the recognizer tests the raw counts."""

    counts: tuple[int, ...]
    win_tile: Tile

    def __post_init__(self) -> None:
        if len(self.counts) != TILE_KINDS:
            raise DecompositionError(f"count vector must have {TILE_KINDS} slots")


Decomposition = Union[Regular, Irregular]
