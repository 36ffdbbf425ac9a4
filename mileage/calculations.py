"""Helper functions for odometer and time arithmetic."""

import math
from typing import Iterable, List, TypeVar

MS_PER_DAY = 1000 * 60 * 60 * 24

T = TypeVar("T")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (1.5 -> 2, -1.5 -> -2)."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def days_between(start_ms: int, end_ms: int) -> float:
    """Elapsed days between two epoch-millisecond timestamps."""
    return (end_ms - start_ms) / MS_PER_DAY


def sort_chronologically(items: Iterable[T]) -> List[T]:
    """
    Sort anything with a timestamp attribute, oldest first.

    Stable: items sharing a timestamp keep their input order.
    """
    return sorted(items, key=lambda item: item.timestamp)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
