"""Assemble the normalized request handed to the external insight generator.

Pure assembly: no network call happens here.  The builder enforces the
request schema (non-empty data, positive cycle lengths, array bounds) and
fixes a deterministic ordering so identical inputs always serialize
identically.
"""

from __future__ import annotations

import logging
from typing import Sequence

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.errors import DataIntegrityError, InsufficientDataError
from src.cycles.models import CycleObservation, InsightRequest, SymptomLogEntry, TrendSummary

logger = logging.getLogger("mitra.cycles.insight_request")


class InsightRequestBuilder:
    """Build InsightRequest payloads from derived cycle and symptom data."""

    def __init__(self, config: CycleConfig | None = None) -> None:
        self._config = config or get_cycle_config()

    def build(
        self,
        cycles: Sequence[CycleObservation],
        trends: Sequence[TrendSummary],
        symptom_logs: Sequence[SymptomLogEntry] = (),
        additional_symptoms_text: str | None = None,
    ) -> InsightRequest:
        """Assemble an insight request.

        Args:
            cycles:                   Derived cycle observations.
            trends:                   Symptom trend summaries.
            symptom_logs:             Raw symptom entries to forward.
            additional_symptoms_text: Free text passed through unmodified.

        Returns:
            A frozen InsightRequest.  Cycles are ordered oldest first and
            capped to the most recent ``max_cycle_observations``; logs are
            ordered most recent first and capped to ``max_symptom_logs``.

        Raises:
            InsufficientDataError: If there are no cycles and no symptom data.
            DataIntegrityError:    If any cycle length is zero or negative.
        """
        if not cycles and not trends and not symptom_logs:
            raise InsufficientDataError(
                "Not enough data to analyze yet: record at least two periods or "
                "log some symptoms first."
            )

        bad = [c for c in cycles if c.cycle_length <= 0]
        if bad:
            raise DataIntegrityError(
                f"Invalid cycle data: cycle lengths must be positive "
                f"({bad[0].start_date.isoformat()} has {bad[0].cycle_length})"
            )

        bounds = self._config.insight_request
        ordered_cycles = sorted(cycles, key=lambda c: c.start_date)
        ordered_logs = sorted(symptom_logs, key=lambda log: log.date, reverse=True)

        if len(ordered_cycles) > bounds.max_cycle_observations:
            logger.info(
                "Trimming %d cycle observation(s) to the most recent %d",
                len(ordered_cycles), bounds.max_cycle_observations,
            )
            ordered_cycles = ordered_cycles[-bounds.max_cycle_observations:]
        if len(ordered_logs) > bounds.max_symptom_logs:
            logger.info(
                "Trimming %d symptom log(s) to the most recent %d",
                len(ordered_logs), bounds.max_symptom_logs,
            )
            ordered_logs = ordered_logs[: bounds.max_symptom_logs]

        return InsightRequest(
            cycle_observations=tuple(ordered_cycles),
            symptom_logs=tuple(ordered_logs),
            symptom_trends=tuple(trends),
            additional_symptoms_text=additional_symptoms_text or None,
        )
