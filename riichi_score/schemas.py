from __future__ import annotations

from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, conint

from riichi_score.config import settings


class Wind(str, Enum):
    E = "E"
    S = "S"
    W = "W"
    N = "N"


class WinType(str, Enum):
    ron = "ron"
    tsumo = "tsumo"


class MeldType(str, Enum):
    chi = "chi"
    pon = "pon"
    kan = "kan"
    ankan = "ankan"
    kakan = "kakan"


class LimitTier(str, Enum):
    mangan = "mangan"
    haneman = "haneman"
    baiman = "baiman"
    sanbaiman = "sanbaiman"
    kazoe_yakuman = "kazoe_yakuman"
    yakuman = "yakuman"
    double_yakuman = "double_yakuman"
    multiple_yakuman = "multiple_yakuman"


TileCode = str


class ErrorBody(BaseModel):
    code: str
    message: str
    details: dict | None = None


class ErrorResponse(BaseModel):
    error: ErrorBody


class Meld(BaseModel):
    type: MeldType
    tiles: list[TileCode]
    open: bool = True


class HandInput(BaseModel):
    closed_tiles: list[TileCode]
    melds: list[Meld] = Field(default_factory=list)
    win_tile: TileCode


class ContextInput(BaseModel):
    win_type: WinType
    round_wind: Wind
    seat_wind: Wind
    riichi: bool = False
    double_riichi: bool = False
    ippatsu: bool = False
    haitei: bool = False
    houtei: bool = False
    rinshan: bool = False
    chankan: bool = False
    chiihou: bool = False
    tenhou: bool = False
    renhou: bool = False
    dora_indicators: list[TileCode] = Field(default_factory=list)
    ura_dora_indicators: list[TileCode] = Field(default_factory=list)
    aka_dora_count: conint(ge=0) = 0
    honba: conint(ge=0) = 0
    kyotaku: conint(ge=0) = 0

    @property
    def is_dealer(self) -> bool:
        return self.seat_wind == Wind.E

    @property
    def is_tsumo(self) -> bool:
        return self.win_type == WinType.tsumo


class RuleSet(BaseModel):
    aka_ari: bool = Field(default_factory=lambda: settings.aka_ari)
    kuitan_ari: bool = Field(default_factory=lambda: settings.kuitan_ari)
    double_yakuman_ari: bool = Field(default_factory=lambda: settings.double_yakuman_ari)
    kazoe_yakuman_ari: bool = Field(default_factory=lambda: settings.kazoe_yakuman_ari)
    renpu_fu: Literal[2, 4] = Field(default_factory=lambda: settings.renpu_fu)


class ScoreRequest(BaseModel):
    hand: HandInput
    context: ContextInput
    rules: RuleSet = Field(default_factory=RuleSet)


class PatternItem(BaseModel):
    code: str
    name: str
    han: int


class FuBreakdownItem(BaseModel):
    name: str
    fu: int


class DoraBreakdown(BaseModel):
    dora: int = 0
    aka_dora: int = 0
    ura_dora: int = 0


class Points(BaseModel):
    # ron: base is the discarder's whole payment and equals total.
    # tsumo: base is what each non-dealer pays; dealer_payment is 0 for a dealer win.
    # honba is excluded from the three per-payer values and included in total.
    base_payment: int = 0
    dealer_payment: int = 0
    non_dealer_payment: int = 0
    total_payment: int


class Payments(BaseModel):
    honba_bonus: int = 0
    kyotaku_bonus: int = 0
    total_received: int


class ScoreResult(BaseModel):
    han: int
    fu: int
    fu_breakdown: list[FuBreakdownItem] = Field(default_factory=list)
    patterns: list[PatternItem] = Field(default_factory=list)
    bonus_tiles: int = 0
    dora: DoraBreakdown = Field(default_factory=DoraBreakdown)
    wait: str | None = None
    limit: LimitTier | None = None
    point_label: str
    points: Points
    payments: Payments


class ScoreResponse(BaseModel):
    score_id: UUID
    status: Literal["ok"]
    result: ScoreResult
