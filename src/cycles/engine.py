"""Cycle Analytics Engine.

Runs the full deterministic chain for one analysis request:

    period log ─► cycle derivation ─► regularity classifier ─┐
    symptom log ─► symptom history aggregator ───────────────┴─► insight request

The engine owns no state; every result is recomputed from its inputs.
Thresholds come from cycle_config.yaml via the config_loader module.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.cycle_derivation import CycleDerivation, derive_cycle_report
from src.cycles.insight_request import InsightRequestBuilder
from src.cycles.models import (
    InsightRequest,
    PeriodInterval,
    RegularityAssessment,
    SymptomLogEntry,
    TrendSummary,
)
from src.cycles.regularity import RegularityClassifier
from src.cycles.symptom_aggregator import SymptomHistoryAggregator

logger = logging.getLogger("mitra.cycles.engine")


@dataclass(frozen=True)
class CycleAnalysis:
    """Every intermediate and final result of one analysis.

    Attributes:
        derivation: Derived cycles plus any dropped pairs.
        assessment: Regularity label and next-period prediction.
        trends:     Symptom trend summaries.
        request:    Payload for the external insight generator.
    """

    derivation: CycleDerivation
    assessment: RegularityAssessment
    trends: tuple[TrendSummary, ...] = field(default=())
    request: InsightRequest | None = None


class CycleAnalyticsEngine:
    """Facade over the validator-to-request pipeline.

    Usage::

        engine = CycleAnalyticsEngine()
        analysis = engine.analyze(periods, symptom_logs, "irregular acne")
        send(analysis.request.to_dict())
    """

    def __init__(self, config: CycleConfig | None = None) -> None:
        self._config = config or get_cycle_config()
        self._classifier = RegularityClassifier(self._config)
        self._aggregator = SymptomHistoryAggregator(self._config)
        self._builder = InsightRequestBuilder(self._config)

    @property
    def config(self) -> CycleConfig:
        return self._config

    def assess(
        self, intervals: Sequence[PeriodInterval]
    ) -> tuple[CycleDerivation, RegularityAssessment]:
        """Derive cycles from a sorted period log and classify them."""
        derivation = derive_cycle_report(intervals)
        last_start = intervals[-1].from_date if intervals else None
        assessment = self._classifier.classify(
            derivation.observations, last_period_start=last_start
        )
        return derivation, assessment

    def aggregate_symptoms(
        self,
        symptom_logs: Sequence[SymptomLogEntry],
        intervals: Sequence[PeriodInterval] = (),
    ) -> list[TrendSummary]:
        return self._aggregator.aggregate(symptom_logs, periods=intervals)

    def analyze(
        self,
        intervals: Sequence[PeriodInterval],
        symptom_logs: Sequence[SymptomLogEntry] = (),
        additional_symptoms_text: str | None = None,
    ) -> CycleAnalysis:
        """Run derivation, classification, aggregation and request assembly.

        Args:
            intervals:                Period log, sorted ascending by start.
            symptom_logs:             Symptom entries (any order).
            additional_symptoms_text: Optional free text, forwarded unmodified.

        Returns:
            CycleAnalysis carrying every result.

        Raises:
            InsufficientDataError: If there are no cycles and no symptom data.
            DataIntegrityError:    If a non-positive cycle length slipped through.
        """
        derivation, assessment = self.assess(intervals)
        trends = self.aggregate_symptoms(symptom_logs, intervals)
        request = self._builder.build(
            derivation.observations,
            trends,
            symptom_logs=symptom_logs,
            additional_symptoms_text=additional_symptoms_text,
        )
        logger.info(
            "Analysis built: %d cycle(s), %d dropped, %d symptom log(s), regular=%s",
            len(derivation.observations), derivation.dropped_count,
            len(symptom_logs), assessment.is_regular,
        )
        return CycleAnalysis(
            derivation=derivation,
            assessment=assessment,
            trends=tuple(trends),
            request=request,
        )
