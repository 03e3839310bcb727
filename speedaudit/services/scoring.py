"""
Performance score (0-100) and recommendation from mean mobile load time.
"""
from typing import Sequence

from speedaudit.core.exceptions import NoPagesSucceededError
from speedaudit.models.audit import PageAudit

# (upper bound in seconds, inclusive; score)
SCORE_STEPS: tuple[tuple[float, int], ...] = (
    (2.0, 90),
    (3.0, 75),
    (4.0, 60),
    (5.0, 45),
)
FLOOR_SCORE = 30

GOOD_SCORE = 75
MODERATE_SCORE = 50


def calculate_score(load_time_seconds: float) -> int:
    """Calculate overall score (0-100)."""
    for upper_bound, score in SCORE_STEPS:
        if load_time_seconds <= upper_bound:
            return score
    return FLOOR_SCORE


def get_recommendation(score: int) -> str:
    if score >= GOOD_SCORE:
        return "Good performance, minor optimizations recommended"
    if score >= MODERATE_SCORE:
        return "Moderate performance issues that should be addressed"
    return "Significant performance issues affecting user experience"


def average_load_time(audits: Sequence[PageAudit], base_url: str = "") -> float:
    """Arithmetic mean of per-page load times; undefined (an error) for no pages."""
    if not audits:
        raise NoPagesSucceededError(base_url)
    return sum(a.metrics.load_time_seconds for a in audits) / len(audits)
