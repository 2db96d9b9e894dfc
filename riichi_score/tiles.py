from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from riichi_score.errors import HandRejected, RejectReason

TILE_KINDS = 34
TILE_RE = re.compile(r"^(?:[1-9][mps]|5[mps]r|[ESWNPFC])$")
SUITS = ("m", "p", "s")
HONORS = ("E", "S", "W", "N", "P", "F", "C")
WINDS = ("E", "S", "W", "N")
DRAGONS = ("P", "F", "C")
RED_FIVES = {"5mr", "5pr", "5sr"}


@dataclass(frozen=True, order=True)
class Tile:
    """One of the 34 tile kinds, identified by its canonical index.

    0-8 man 1-9, 9-17 pin 1-9, 18-26 sou 1-9, 27-30 E S W N, 31-33 P F C
    (white, green, red dragon).
    """

    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index < TILE_KINDS:
            raise IndexError(f"tile index out of range: {self.index}")

    @property
    def is_honor(self) -> bool:
        return self.index >= 27

    @property
    def is_wind(self) -> bool:
        return 27 <= self.index <= 30

    @property
    def is_dragon(self) -> bool:
        return self.index >= 31

    @property
    def suit(self) -> str | None:
        if self.is_honor:
            return None
        return SUITS[self.index // 9]

    @property
    def rank(self) -> int | None:
        if self.is_honor:
            return None
        return self.index % 9 + 1

    @property
    def is_terminal(self) -> bool:
        return self.rank in {1, 9}

    @property
    def is_terminal_or_honor(self) -> bool:
        return self.is_honor or self.is_terminal

    @property
    def is_simple(self) -> bool:
        return not self.is_terminal_or_honor

    @property
    def code(self) -> str:
        if self.is_honor:
            return HONORS[self.index - 27]
        return f"{self.rank}{self.suit}"

    def __str__(self) -> str:
        return self.code


def tile_to_index(tile: Tile) -> int:
    return tile.index


def index_to_tile(index: int) -> Tile:
    return Tile(index)


def normalize_code(code: str) -> str:
    if code in RED_FIVES:
        return code[:2]
    return code


def parse_tile(code: str) -> Tile:
    if not TILE_RE.fullmatch(code):
        raise HandRejected(RejectReason.invalid_tile, f"Invalid tile code: {code}", {"tile": code})
    t = normalize_code(code)
    if t in HONORS:
        return Tile(27 + HONORS.index(t))
    return Tile(SUITS.index(t[1]) * 9 + int(t[0]) - 1)


def parse_tiles(codes: Iterable[str]) -> list[Tile]:
    return [parse_tile(code) for code in codes]


def count_tiles(tiles: Iterable[Tile]) -> list[int]:
    counts = [0] * TILE_KINDS
    for tile in tiles:
        counts[tile.index] += 1
    return counts


def tiles_from_counts(counts: list[int]) -> list[Tile]:
    return [Tile(i) for i, c in enumerate(counts) for _ in range(c)]


def dora_from_indicator(indicator: Tile) -> Tile:
    if not indicator.is_honor:
        rank = 1 if indicator.rank == 9 else indicator.rank + 1
        return Tile(SUITS.index(indicator.suit) * 9 + rank - 1)
    if indicator.is_wind:
        return Tile(27 + (indicator.index - 27 + 1) % 4)
    return Tile(31 + (indicator.index - 31 + 1) % 3)
