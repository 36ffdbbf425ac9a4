"""Compliance score: a 0-100 triage signal, not a legal determination."""

from typing import Sequence

from .calculations import clamp, round_half_up
from .deviation import Deviation

DEVIATION_PENALTY = 5
UNACCOUNTED_KM_PER_POINT = 10
MAX_UNACCOUNTED_PENALTY = 50


def compliance_score(deviations: Sequence[Deviation], total_unaccounted_km: float) -> int:
    """
    Score how well logged trips reconcile with the odometer history.

    - 5 points off per deviation
    - 1 point off per 10 unaccounted km, at most 50
    """
    deviation_penalty = len(deviations) * DEVIATION_PENALTY
    unaccounted_penalty = min(
        MAX_UNACCOUNTED_PENALTY, total_unaccounted_km / UNACCOUNTED_KM_PER_POINT
    )
    return round_half_up(clamp(100 - deviation_penalty - unaccounted_penalty, 0, 100))
