"""Typed errors raised by the cycle analytics engine.

The engine never swallows or retries these; they propagate synchronously to
the immediate caller, which decides how to surface them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from src.cycles.models import PeriodInterval


class CycleDataError(ValueError):
    """Base class for every data error raised by the cycle engine."""


class InvalidIntervalError(CycleDataError):
    """Raised when a period interval ends before it starts."""


class OverlapError(CycleDataError):
    """Raised when a candidate period interval intersects a recorded one.

    Attributes:
        candidate:   The rejected interval.
        conflicting: Every recorded interval it intersects, oldest first.
    """

    def __init__(
        self,
        candidate: PeriodInterval,
        conflicting: Sequence[PeriodInterval],
    ) -> None:
        self.candidate = candidate
        self.conflicting = tuple(conflicting)
        first = self.conflicting[0] if self.conflicting else None
        detail = f" (conflicts with {first.describe()})" if first else ""
        super().__init__(
            f"Period {candidate.describe()} overlaps an existing period{detail}"
        )


class DataIntegrityError(CycleDataError):
    """Raised when a non-positive cycle length reaches the classifier.

    Cycle derivation filters those out, so this signals an upstream bug.
    """


class InsufficientDataError(CycleDataError):
    """Raised when there is nothing to build an insight request from."""
