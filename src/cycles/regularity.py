"""Regularity classification and next-period prediction.

Classifies a cycle history as regular when every cycle length falls within
the physiological range (21–35 days by default) and the spread between the
shortest and longest cycle is at most 7 days.  Short histories still get a
best-effort label, with Low confidence and a summary that says so.

Does NOT diagnose anything.  The assessment is structured input for the
external insight generator and for display.
"""

from __future__ import annotations

import logging
import statistics
from datetime import date, timedelta
from typing import Sequence

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.errors import DataIntegrityError
from src.cycles.models import (
    Confidence,
    CycleObservation,
    NextPeriodPrediction,
    RegularityAssessment,
)

logger = logging.getLogger("mitra.cycles.regularity")


class RegularityClassifier:
    """Classify cycle regularity and predict the next period start.

    Usage::

        classifier = RegularityClassifier()
        assessment = classifier.classify(cycles)
        print(assessment.summary)
        print(assessment.next_expected.describe())

    Pure: the same cycles always produce the same assessment.
    """

    def __init__(self, config: CycleConfig | None = None) -> None:
        self._config = config or get_cycle_config()

    @property
    def _reg_config(self):
        return self._config.regularity

    def classify(
        self,
        cycles: Sequence[CycleObservation],
        last_period_start: date | None = None,
    ) -> RegularityAssessment:
        """Assess a cycle history.

        Args:
            cycles:            Cycle observations, oldest first.
            last_period_start: Start of the most recent recorded period.  When
                               omitted it is inferred from the last cycle
                               (its start plus its length).

        Returns:
            RegularityAssessment; indeterminate prediction when ``cycles`` is empty.

        Raises:
            DataIntegrityError: If any cycle length is zero or negative.
        """
        bad = [c for c in cycles if c.cycle_length <= 0]
        if bad:
            raise DataIntegrityError(
                f"{len(bad)} cycle(s) with non-positive length reached the classifier "
                f"(first: {bad[0].start_date.isoformat()}, {bad[0].cycle_length} days)"
            )

        if not cycles:
            return RegularityAssessment(
                is_regular=False,
                summary=(
                    "No complete cycles recorded yet, so regularity is hard to assess "
                    "with limited data. Log at least two period start dates to see "
                    "your cycle length."
                ),
                next_expected=NextPeriodPrediction(),
                confidence=Confidence.Low,
                prompt_for_more_info=True,
            )

        rc = self._reg_config
        lengths = [c.cycle_length for c in cycles]
        shortest = min(lengths)
        longest = max(lengths)
        spread = longest - shortest
        median = statistics.median(lengths)

        in_range = all(rc.min_cycle_days <= n <= rc.max_cycle_days for n in lengths)
        low_variation = spread <= rc.max_variation_days
        is_regular = in_range and low_variation
        limited = len(lengths) < rc.min_cycles_for_assessment

        anchor = last_period_start or (
            cycles[-1].start_date + timedelta(days=cycles[-1].cycle_length)
        )
        prediction = self._predict(anchor, median, shortest, longest, low_variation)

        assessment = RegularityAssessment(
            is_regular=is_regular,
            summary=self._summarize(lengths, is_regular, in_range, spread, limited),
            next_expected=prediction,
            confidence=self._confidence(is_regular, spread, limited),
            cycle_count=len(lengths),
            min_length=shortest,
            max_length=longest,
            median_length=float(median),
            variation_days=spread,
            prompt_for_more_info=limited or not is_regular,
            warnings=tuple(self._length_warnings(lengths)),
        )
        logger.debug(
            "Classified %d cycle(s): regular=%s spread=%d confidence=%s",
            len(lengths), is_regular, spread, assessment.confidence.value,
        )
        return assessment

    def classify_length(self, cycle_length: int) -> str:
        """Classify one cycle length as 'short', 'normal' or 'long'."""
        rc = self._reg_config
        if cycle_length < rc.min_cycle_days:
            return "short"
        if cycle_length > rc.max_cycle_days:
            return "long"
        return "normal"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _predict(
        anchor: date,
        median: float,
        shortest: int,
        longest: int,
        low_variation: bool,
    ) -> NextPeriodPrediction:
        expected = anchor + timedelta(days=round(median))
        if low_variation:
            return NextPeriodPrediction(expected=expected, earliest=expected, latest=expected)
        return NextPeriodPrediction(
            expected=expected,
            earliest=anchor + timedelta(days=shortest),
            latest=anchor + timedelta(days=longest),
        )

    def _confidence(self, is_regular: bool, spread: int, limited: bool) -> Confidence:
        if limited:
            return Confidence.Low
        if is_regular:
            return Confidence.High
        if spread <= self._reg_config.medium_confidence_max_variation_days:
            return Confidence.Medium
        return Confidence.Low

    def _summarize(
        self,
        lengths: list[int],
        is_regular: bool,
        in_range: bool,
        spread: int,
        limited: bool,
    ) -> str:
        rc = self._reg_config
        shortest, longest = min(lengths), max(lengths)

        if is_regular:
            if shortest == longest:
                text = f"Your cycles appear regular at {shortest} days."
            else:
                text = f"Your cycles appear regular, varying by {shortest}-{longest} days."
        else:
            reasons = []
            if spread > rc.max_variation_days:
                reasons.append(
                    f"cycle length varies by {spread} days (more than {rc.max_variation_days})"
                )
            if not in_range:
                reasons.append(
                    f"some cycles fall outside the {rc.min_cycle_days}-{rc.max_cycle_days} "
                    "day range"
                )
            text = (
                f"Your cycles show irregularity, ranging from {shortest} to {longest} days: "
                + " and ".join(reasons) + "."
            )

        if limited:
            plural = "cycle" if len(lengths) == 1 else "cycles"
            text += (
                f" Regularity is hard to assess with limited data ({len(lengths)} {plural} "
                f"recorded); at least {rc.min_cycles_for_assessment} are needed."
            )
        return text

    def _length_warnings(self, lengths: list[int]) -> list[str]:
        rc = self._reg_config
        warnings = []
        short = [n for n in lengths if n < rc.min_cycle_days]
        long_ = [n for n in lengths if n > rc.max_cycle_days]
        if short:
            warnings.append(
                f"Short cycle detected: {min(short)} days (below {rc.min_cycle_days} day minimum)"
            )
        if long_:
            warnings.append(
                f"Long cycle detected: {max(long_)} days (above {rc.max_cycle_days} day maximum)"
            )
        return warnings
