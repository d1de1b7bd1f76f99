"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from src.config import Settings, get_settings
from src.cycles.engine import CycleAnalyticsEngine
from src.services.insight_generator import HttpInsightGenerator, InFlightGuard, InsightGenerator
from src.services.store import (
    PERIODS_KEY,
    SYMPTOM_LOGS_KEY,
    JsonFileStore,
    PeriodLog,
    SymptomJournal,
)

LOCAL_USER_ID = "local"


@dataclass(frozen=True)
class AuthContext:
    """Authenticated user context.  Authentication is a no-op: single local user."""

    user_id: str = LOCAL_USER_ID


async def get_current_user() -> AuthContext:
    return AuthContext()


@lru_cache
def get_period_log() -> PeriodLog:
    return PeriodLog(JsonFileStore(get_settings().data_dir, PERIODS_KEY))


@lru_cache
def get_symptom_journal() -> SymptomJournal:
    return SymptomJournal(JsonFileStore(get_settings().data_dir, SYMPTOM_LOGS_KEY))


@lru_cache
def get_engine() -> CycleAnalyticsEngine:
    return CycleAnalyticsEngine()


@lru_cache
def get_in_flight_guard() -> InFlightGuard:
    return InFlightGuard()


def get_insight_generator() -> InsightGenerator | None:
    return HttpInsightGenerator.from_settings()


# Annotated shortcuts for route signatures
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Periods = Annotated[PeriodLog, Depends(get_period_log)]
Journal = Annotated[SymptomJournal, Depends(get_symptom_journal)]
Engine = Annotated[CycleAnalyticsEngine, Depends(get_engine)]
Guard = Annotated[InFlightGuard, Depends(get_in_flight_guard)]
Generator = Annotated[InsightGenerator | None, Depends(get_insight_generator)]
