"""Mitra cycle analytics engine.

Pure, synchronous functions over calendar dates that turn a recorded period
log and symptom history into structured input for an external insight
generator.  No storage, no network, no UI.

Modules:
    models: Canonical value types (PeriodInterval, CycleObservation, ...)
    errors: OverlapError, DataIntegrityError, InsufficientDataError
    config_loader: Load/validate/hot-reload cycle_config.yaml
    interval_validator: Overlap checks for new period intervals
    cycle_derivation: Period starts → cycle-length series
    regularity: Regularity label + next-period prediction
    symptom_aggregator: Symptom frequency and cycle clustering
    insight_request: Normalized request for the insight generator
    engine: Facade running the whole chain
"""

from src.cycles.config_loader import CycleConfig, get_cycle_config
from src.cycles.cycle_derivation import CycleDerivation, derive_cycle_report, derive_cycles
from src.cycles.engine import CycleAnalysis, CycleAnalyticsEngine
from src.cycles.errors import (
    CycleDataError,
    DataIntegrityError,
    InsufficientDataError,
    InvalidIntervalError,
    OverlapError,
)
from src.cycles.insight_request import InsightRequestBuilder
from src.cycles.interval_validator import insert_interval, validate_interval
from src.cycles.models import (
    Confidence,
    CycleObservation,
    InsightRequest,
    NextPeriodPrediction,
    PeriodInterval,
    RegularityAssessment,
    SymptomCategory,
    SymptomLogEntry,
    TrendSummary,
)
from src.cycles.regularity import RegularityClassifier
from src.cycles.symptom_aggregator import SymptomHistoryAggregator

__all__ = [
    "CycleAnalysis",
    "CycleAnalyticsEngine",
    "CycleConfig",
    "CycleDataError",
    "CycleDerivation",
    "CycleObservation",
    "Confidence",
    "DataIntegrityError",
    "InsightRequest",
    "InsightRequestBuilder",
    "InsufficientDataError",
    "InvalidIntervalError",
    "NextPeriodPrediction",
    "OverlapError",
    "PeriodInterval",
    "RegularityAssessment",
    "RegularityClassifier",
    "SymptomCategory",
    "SymptomHistoryAggregator",
    "SymptomLogEntry",
    "TrendSummary",
    "derive_cycle_report",
    "derive_cycles",
    "get_cycle_config",
    "insert_interval",
    "validate_interval",
]
