"""Fold a chronological symptom log into per-category trend summaries.

For each symptom category (mood, skin, pain, discharge, hair growth) this
counts how often it was logged and, when period dates are available, whether
those days cluster around the cycle:

- "logged on 6 of 14 days, concentrated in the week preceding recorded period starts"
- "logged on 3 of 14 days, concentrated during recorded periods"
- "logged on 4 of 14 days, most often around cycle day 12"

Entries missing a category are excluded from that category; they are not
evidence that the symptom was absent.
"""

from __future__ import annotations

import bisect
import logging
import statistics
from datetime import date
from typing import Sequence

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.models import PeriodInterval, SymptomCategory, SymptomLogEntry, TrendSummary

logger = logging.getLogger("mitra.cycles.symptom_aggregator")

MENSTRUAL = "menstrual"
PREMENSTRUAL = "premenstrual"
OTHER = "other"


class SymptomHistoryAggregator:
    """Summarize symptom frequency and cycle clustering.

    Usage::

        aggregator = SymptomHistoryAggregator()
        trends = aggregator.aggregate(symptom_logs, periods=recorded_periods)
        for trend in trends:
            print(trend.category.value, trend.note)
    """

    def __init__(self, config: CycleConfig | None = None) -> None:
        self._config = config or get_cycle_config()

    @property
    def _sym_config(self):
        return self._config.symptoms

    def aggregate(
        self,
        logs: Sequence[SymptomLogEntry],
        periods: Sequence[PeriodInterval] = (),
    ) -> list[TrendSummary]:
        """Build one TrendSummary per logged category.

        Args:
            logs:    Symptom log entries in any order; same-day duplicates allowed.
            periods: Recorded period intervals used for clustering (optional).

        Returns:
            Summaries ordered by descending frequency, ties broken by the
            configured category priority.  Categories never logged are omitted.
        """
        if not logs:
            return []

        sc = self._sym_config
        total_days = len({log.date for log in logs})
        ordered_periods = sorted(periods)
        starts = [p.from_date for p in ordered_periods]

        trends: list[TrendSummary] = []
        for category in sc.categories:
            entries = [log for log in logs if log.value_for(category) is not None]
            if not entries:
                continue
            days = sorted({log.date for log in entries})
            cluster, note_suffix = self._cluster(days, ordered_periods, starts)
            trends.append(
                TrendSummary(
                    category=category,
                    frequency=len(days),
                    entry_count=len(entries),
                    total_days=total_days,
                    note=_frequency_phrase(len(days), total_days) + note_suffix,
                    cluster=cluster,
                )
            )

        trends.sort(key=lambda t: (-t.frequency, sc.priority_of(t.category)))
        logger.debug(
            "Aggregated %d log(s) over %d day(s) into %d trend(s)",
            len(logs), total_days, len(trends),
        )
        return trends

    # ------------------------------------------------------------------
    # Clustering
    # ------------------------------------------------------------------

    def _cluster(
        self,
        days: list[date],
        periods: list[PeriodInterval],
        starts: list[date],
    ) -> tuple[str | None, str]:
        """Return (cluster label, note suffix) for one category's days."""
        if not periods:
            return None, ""

        sc = self._sym_config
        placements = [self._place(day, periods, starts) for day in days]
        counts = {
            PREMENSTRUAL: placements.count(PREMENSTRUAL),
            MENSTRUAL: placements.count(MENSTRUAL),
        }
        # max() keeps the first key on ties, so premenstrual wins a tie
        phase = max(counts, key=lambda k: counts[k])
        hits = counts[phase]
        if hits >= sc.cluster_min_days and hits / len(days) >= sc.cluster_min_share:
            if phase == PREMENSTRUAL:
                window = sc.premenstrual_window_days
                span = "the week" if window == 7 else f"the {window} days"
                return phase, f", concentrated in {span} preceding recorded period starts"
            return phase, ", concentrated during recorded periods"

        cycle_days = [d for d in (cycle_day_of(day, starts) for day in days) if d is not None]
        if cycle_days:
            typical = round(statistics.median(cycle_days))
            return None, f", most often around cycle day {typical}"
        return None, ""

    def _place(
        self, day: date, periods: list[PeriodInterval], starts: list[date]
    ) -> str:
        """Place a day as menstrual, premenstrual or other."""
        idx = bisect.bisect_right(starts, day)
        # Only the latest period starting on or before the day can contain it
        if idx > 0 and periods[idx - 1].contains(day):
            return MENSTRUAL
        if idx < len(starts):
            days_before = (starts[idx] - day).days
            if days_before <= self._sym_config.premenstrual_window_days:
                return PREMENSTRUAL
        return OTHER


def cycle_day_of(day: date, starts: Sequence[date]) -> int | None:
    """Return the 1-indexed cycle day relative to the nearest preceding start.

    Args:
        day:    Date to place.
        starts: Period start dates, sorted ascending.

    Returns:
        Cycle day, or None when no period started on or before ``day``.
    """
    idx = bisect.bisect_right(starts, day)
    if idx == 0:
        return None
    return (day - starts[idx - 1]).days + 1


def _frequency_phrase(frequency: int, total_days: int) -> str:
    unit = "day" if total_days == 1 else "days"
    return f"logged on {frequency} of {total_days} {unit}"
