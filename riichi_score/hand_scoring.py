from __future__ import annotations

import logging

from riichi_score.decomposition import decompose_hand
from riichi_score.errors import HandRejected, RejectReason
from riichi_score.patterns import BONUS_PATTERNS, PatternRecognizer
from riichi_score.recognizer import StandardRecognizer
from riichi_score.schemas import ContextInput, HandInput, RuleSet, ScoreResult
from riichi_score.scoring import calculate_score
from riichi_score.validators import validate_score_request

logger = logging.getLogger(__name__)

default_recognizer = StandardRecognizer()


def score_hand_shape(
    hand: HandInput,
    context: ContextInput,
    rules: RuleSet | None = None,
    recognizer: PatternRecognizer | None = None,
) -> ScoreResult:
    """Hand shape -> score. Raises HandRejected; never returns a partial result."""
    rules = rules or RuleSet()
    recognizer = recognizer or default_recognizer

    parsed = validate_score_request(hand, context)
    decomposition = decompose_hand(parsed)
    recognized = recognizer.recognize(decomposition, hand, context, rules)
    if not any(p not in BONUS_PATTERNS for p in recognized.patterns):
        logger.warning("hand rejected: %s (no scoring pattern)", RejectReason.no_pattern.value)
        raise HandRejected(RejectReason.no_pattern, "No yaku: dora-only hands cannot win")

    result = calculate_score(recognized, context, rules)
    logger.info(
        "scored hand: han=%d fu=%d label=%s total=%d",
        result.han,
        result.fu,
        result.point_label,
        result.payments.total_received,
    )
    return result
