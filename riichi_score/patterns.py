from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from riichi_score.models import Decomposition, Wait
from riichi_score.schemas import ContextInput, HandInput, RuleSet


class Pattern(str, Enum):
    riichi = "riichi"
    ippatsu = "ippatsu"
    menzen_tsumo = "menzen_tsumo"
    pinfu = "pinfu"
    iipeikou = "iipeikou"
    haitei = "haitei"
    houtei = "houtei"
    rinshan = "rinshan"
    chankan = "chankan"
    tanyao = "tanyao"
    yakuhai_seat_wind = "yakuhai_seat_wind"
    yakuhai_round_wind = "yakuhai_round_wind"
    yakuhai_dragon = "yakuhai_dragon"

    double_riichi = "double_riichi"
    chiitoitsu = "chiitoitsu"
    sanshoku_doujun = "sanshoku_doujun"
    ittsu = "ittsu"
    chanta = "chanta"
    toitoi = "toitoi"
    sanankou = "sanankou"
    sanshoku_doukou = "sanshoku_doukou"
    sankantsu = "sankantsu"
    shousangen = "shousangen"
    honroutou = "honroutou"

    ryanpeikou = "ryanpeikou"
    junchan = "junchan"
    honitsu = "honitsu"

    chinitsu = "chinitsu"

    tenhou = "tenhou"
    chiihou = "chiihou"
    renhou = "renhou"
    daisangen = "daisangen"
    suuankou = "suuankou"
    daisuushii = "daisuushii"
    shousuushii = "shousuushii"
    tsuuiisou = "tsuuiisou"
    chinroutou = "chinroutou"
    ryuuiisou = "ryuuiisou"
    suukantsu = "suukantsu"
    kokushi = "kokushi"
    chuuren = "chuuren"

    suuankou_tanki = "suuankou_tanki"
    kokushi_thirteen = "kokushi_thirteen"
    junsei_chuuren = "junsei_chuuren"

    dora = "dora"
    ura_dora = "ura_dora"
    aka_dora = "aka_dora"


PATTERN_NAMES: dict[Pattern, str] = {
    Pattern.riichi: "立直",
    Pattern.ippatsu: "一発",
    Pattern.menzen_tsumo: "門前清自摸和",
    Pattern.pinfu: "平和",
    Pattern.iipeikou: "一盃口",
    Pattern.haitei: "海底摸月",
    Pattern.houtei: "河底撈魚",
    Pattern.rinshan: "嶺上開花",
    Pattern.chankan: "槍槓",
    Pattern.tanyao: "断么九",
    Pattern.yakuhai_seat_wind: "自風",
    Pattern.yakuhai_round_wind: "場風",
    Pattern.yakuhai_dragon: "役牌",
    Pattern.double_riichi: "ダブル立直",
    Pattern.chiitoitsu: "七対子",
    Pattern.sanshoku_doujun: "三色同順",
    Pattern.ittsu: "一気通貫",
    Pattern.chanta: "混全帯么九",
    Pattern.toitoi: "対々和",
    Pattern.sanankou: "三暗刻",
    Pattern.sanshoku_doukou: "三色同刻",
    Pattern.sankantsu: "三槓子",
    Pattern.shousangen: "小三元",
    Pattern.honroutou: "混老頭",
    Pattern.ryanpeikou: "二盃口",
    Pattern.junchan: "純全帯么九",
    Pattern.honitsu: "混一色",
    Pattern.chinitsu: "清一色",
    Pattern.tenhou: "天和",
    Pattern.chiihou: "地和",
    Pattern.renhou: "人和",
    Pattern.daisangen: "大三元",
    Pattern.suuankou: "四暗刻",
    Pattern.daisuushii: "大四喜",
    Pattern.shousuushii: "小四喜",
    Pattern.tsuuiisou: "字一色",
    Pattern.chinroutou: "清老頭",
    Pattern.ryuuiisou: "緑一色",
    Pattern.suukantsu: "四槓子",
    Pattern.kokushi: "国士無双",
    Pattern.chuuren: "九蓮宝燈",
    Pattern.suuankou_tanki: "四暗刻単騎",
    Pattern.kokushi_thirteen: "国士無双十三面待ち",
    Pattern.junsei_chuuren: "純正九蓮宝燈",
    Pattern.dora: "ドラ",
    Pattern.ura_dora: "裏ドラ",
    Pattern.aka_dora: "赤ドラ",
}

# (concealed han, open han); 0 open han means the pattern needs a concealed hand
PATTERN_HAN: dict[Pattern, tuple[int, int]] = {
    Pattern.riichi: (1, 0),
    Pattern.ippatsu: (1, 0),
    Pattern.menzen_tsumo: (1, 0),
    Pattern.pinfu: (1, 0),
    Pattern.iipeikou: (1, 0),
    Pattern.haitei: (1, 1),
    Pattern.houtei: (1, 1),
    Pattern.rinshan: (1, 1),
    Pattern.chankan: (1, 1),
    Pattern.tanyao: (1, 1),
    Pattern.yakuhai_seat_wind: (1, 1),
    Pattern.yakuhai_round_wind: (1, 1),
    Pattern.yakuhai_dragon: (1, 1),
    Pattern.double_riichi: (2, 0),
    Pattern.chiitoitsu: (2, 0),
    Pattern.sanshoku_doujun: (2, 1),
    Pattern.ittsu: (2, 1),
    Pattern.chanta: (2, 1),
    Pattern.toitoi: (2, 2),
    Pattern.sanankou: (2, 2),
    Pattern.sanshoku_doukou: (2, 2),
    Pattern.sankantsu: (2, 2),
    Pattern.shousangen: (2, 2),
    Pattern.honroutou: (2, 2),
    Pattern.ryanpeikou: (3, 0),
    Pattern.junchan: (3, 2),
    Pattern.honitsu: (3, 2),
    Pattern.chinitsu: (6, 5),
    Pattern.dora: (1, 1),
    Pattern.ura_dora: (1, 1),
    Pattern.aka_dora: (1, 1),
}

LIMIT_MULTIPLIERS: dict[Pattern, int] = {
    Pattern.tenhou: 1,
    Pattern.chiihou: 1,
    Pattern.renhou: 1,
    Pattern.daisangen: 1,
    Pattern.suuankou: 1,
    Pattern.shousuushii: 1,
    Pattern.tsuuiisou: 1,
    Pattern.chinroutou: 1,
    Pattern.ryuuiisou: 1,
    Pattern.suukantsu: 1,
    Pattern.kokushi: 1,
    Pattern.chuuren: 1,
    Pattern.daisuushii: 2,
    Pattern.suuankou_tanki: 2,
    Pattern.kokushi_thirteen: 2,
    Pattern.junsei_chuuren: 2,
}

BONUS_PATTERNS = frozenset({Pattern.dora, Pattern.ura_dora, Pattern.aka_dora})


def pattern_han(pattern: Pattern, concealed: bool) -> int:
    closed_han, open_han = PATTERN_HAN.get(pattern, (0, 0))
    return closed_han if concealed else open_han


def limit_multiplier(pattern: Pattern, double_yakuman_ari: bool = True) -> int:
    multiplier = LIMIT_MULTIPLIERS.get(pattern, 0)
    if not double_yakuman_ari:
        return min(multiplier, 1)
    return multiplier


def is_limit_pattern(pattern: Pattern) -> bool:
    return pattern in LIMIT_MULTIPLIERS


@dataclass(frozen=True)
class RecognizedPatterns:
    """Recognizer output: the reading it scored plus one entry per pattern occurrence."""

    decomposition: Decomposition
    patterns: tuple[Pattern, ...] = field(default_factory=tuple)
    bonus_tiles: int = 0
    wait: Wait | None = None


class PatternRecognizer(Protocol):
    def recognize(
        self,
        decomposition: Decomposition,
        hand: HandInput,
        context: ContextInput,
        rules: RuleSet,
    ) -> RecognizedPatterns:
        """Return the patterns for the hand or raise HandRejected(no_pattern)."""
        ...
