from enum import Enum
from typing import Optional

from packages.tia_core.dto import AnswerEvaluation

NEUTRAL_SCORE = 0.5

INCREASE_THRESHOLD = 0.7
DECREASE_THRESHOLD = 0.5


class PerformanceBand(str, Enum):
    """
    Qualitative classification of a turn's performance.
    """
    CORRECT = "correct"
    PARTIAL = "partial"
    INCORRECT = "incorrect"
    TIMEOUT = "timeout"


def performance_score(evaluation: Optional[AnswerEvaluation]) -> float:
    """
    Mean of correctness, clarity and confidence.
    A missing evaluation counts as neutral (0.5).
    """
    if evaluation is None:
        return NEUTRAL_SCORE
    return (evaluation.correctness + evaluation.clarity + evaluation.confidence) / 3


def classify(score: float) -> PerformanceBand:
    if score >= INCREASE_THRESHOLD:
        return PerformanceBand.CORRECT
    if score < DECREASE_THRESHOLD:
        return PerformanceBand.INCORRECT
    return PerformanceBand.PARTIAL


def band_proxy_score(band: PerformanceBand) -> float:
    """Numeric stand-in for a band, handed to the question generator."""
    if band == PerformanceBand.CORRECT:
        return 0.8
    if band == PerformanceBand.PARTIAL:
        return 0.6
    return 0.3
