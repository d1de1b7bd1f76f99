"""Derive cycle-length observations from recorded period intervals.

Cycle length is the day difference between consecutive period starts.
Pairs with a non-positive gap (duplicate or out-of-order starts) are dropped
from the series and reported as a warning, never silently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Sequence

from src.cycles.models import CycleObservation, PeriodInterval

logger = logging.getLogger("mitra.cycles.cycle_derivation")


@dataclass(frozen=True)
class CycleDerivation:
    """Result of deriving cycles from a period log.

    Attributes:
        observations:  Cycles with a strictly positive length, in input order.
        dropped_pairs: ``(start, next_start)`` pairs whose gap was <= 0.
    """

    observations: tuple[CycleObservation, ...] = ()
    dropped_pairs: tuple[tuple[date, date], ...] = field(default=())

    @property
    def dropped_count(self) -> int:
        return len(self.dropped_pairs)

    def to_dict(self) -> dict:
        return {
            "cycleObservations": [c.to_dict() for c in self.observations],
            "droppedCount": self.dropped_count,
        }


def derive_cycle_report(intervals: Sequence[PeriodInterval]) -> CycleDerivation:
    """Derive cycles and keep track of the pairs that were dropped.

    Args:
        intervals: Period intervals, expected sorted ascending by ``from_date``.
                   The sequence is neither mutated nor re-sorted.

    Returns:
        CycleDerivation with the kept observations and the dropped pairs.
    """
    if len(intervals) < 2:
        return CycleDerivation()

    observations: list[CycleObservation] = []
    dropped: list[tuple[date, date]] = []

    for current, following in zip(intervals, intervals[1:]):
        length = (following.from_date - current.from_date).days
        if length > 0:
            observations.append(
                CycleObservation(start_date=current.from_date, cycle_length=length)
            )
        else:
            dropped.append((current.from_date, following.from_date))

    if dropped:
        logger.warning(
            "Dropped %d cycle pair(s) with non-positive length (duplicate or "
            "out-of-order period starts): %s",
            len(dropped),
            ", ".join(f"{a.isoformat()}→{b.isoformat()}" for a, b in dropped),
        )

    return CycleDerivation(observations=tuple(observations), dropped_pairs=tuple(dropped))


def derive_cycles(intervals: Sequence[PeriodInterval]) -> list[CycleObservation]:
    """Return the cycle-length series for a sorted period log.

    Fewer than two intervals yield an empty list.  Non-positive gaps are
    skipped (and logged, see ``derive_cycle_report``).
    """
    return list(derive_cycle_report(intervals).observations)
