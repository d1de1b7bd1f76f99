"""Validation of candidate period intervals against the recorded log.

A candidate is rejected outright if it intersects any recorded period in any
way.  Nothing is merged or partially accepted; the caller surfaces the
``OverlapError`` so the user can correct the dates.
"""

from __future__ import annotations

import bisect
import logging
from typing import Iterable, Sequence

from src.cycles.errors import InvalidIntervalError, OverlapError
from src.cycles.models import PeriodInterval

logger = logging.getLogger("mitra.cycles.interval_validator")


def find_overlaps(
    candidate: PeriodInterval, existing: Iterable[PeriodInterval]
) -> list[PeriodInterval]:
    """Return every recorded interval the candidate intersects, oldest first."""
    return sorted(p for p in existing if candidate.overlaps(p))


def validate_interval(
    candidate: PeriodInterval, existing: Sequence[PeriodInterval]
) -> None:
    """Check a candidate period against the recorded periods.

    Args:
        candidate: The interval the user wants to add.
        existing:  Recorded intervals (any order).

    Raises:
        InvalidIntervalError: If the candidate ends before it starts.
        OverlapError:         If the candidate shares a day with any recorded interval.
    """
    if candidate.to_date < candidate.from_date:
        raise InvalidIntervalError(f"Period {candidate.describe()} ends before it starts")

    conflicts = find_overlaps(candidate, existing)
    if conflicts:
        logger.info(
            "Rejected period %s: overlaps %d recorded period(s)",
            candidate.describe(), len(conflicts),
        )
        raise OverlapError(candidate, conflicts)


def insert_interval(
    candidate: PeriodInterval, existing: Sequence[PeriodInterval]
) -> list[PeriodInterval]:
    """Validate a candidate and return a new log with it inserted in order.

    The input sequence is not modified.

    Returns:
        A new list sorted ascending by ``from_date``.
    """
    validate_interval(candidate, existing)
    updated = sorted(existing)
    bisect.insort(updated, candidate)
    return updated
