from __future__ import annotations

from enum import Enum


class RejectReason(str, Enum):
    invalid_tile = "invalid_tile"
    invalid_call = "invalid_call"
    riichi_conflict = "riichi_conflict"
    ippatsu_without_riichi = "ippatsu_without_riichi"
    haitei_on_ron = "haitei_on_ron"
    houtei_on_tsumo = "houtei_on_tsumo"
    haitei_with_houtei = "haitei_with_houtei"
    rinshan_on_ron = "rinshan_on_ron"
    chankan_on_tsumo = "chankan_on_tsumo"
    tenhou_with_chiihou = "tenhou_with_chiihou"
    tenhou_requires_dealer = "tenhou_requires_dealer"
    tenhou_requires_tsumo = "tenhou_requires_tsumo"
    tenhou_with_calls = "tenhou_with_calls"
    chiihou_requires_non_dealer = "chiihou_requires_non_dealer"
    chiihou_requires_tsumo = "chiihou_requires_tsumo"
    chiihou_with_calls = "chiihou_with_calls"
    renhou_requires_ron = "renhou_requires_ron"
    renhou_requires_non_dealer = "renhou_requires_non_dealer"
    too_many_calls = "too_many_calls"
    tile_count_mismatch = "tile_count_mismatch"
    win_tile_not_held = "win_tile_not_held"
    tile_overflow = "tile_overflow"
    aka_exceeds_fives = "aka_exceeds_fives"
    aka_overflow = "aka_overflow"
    no_pair = "no_pair"
    no_pattern = "no_pattern"


class HandRejected(ValueError):
    """The request cannot be scored. `reason` is a stable code for callers."""

    def __init__(self, reason: RejectReason, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.details = details


class DecompositionError(RuntimeError):
    """Broken internal invariant in the decomposition engine. Not a bad input."""
