"""Cycle analysis and insight-generation endpoints.

``GET /cycles/analysis`` is computed locally by the cycle engine.  The two
``/insights`` endpoints build an InsightRequest and forward it to the
external insight generator, at most one call in flight per user and kind.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from src.cycles.errors import DataIntegrityError, InsufficientDataError
from src.cycles.models import InsightRequest
from src.dependencies import (
    AuthContext,
    CurrentUser,
    Engine,
    Generator,
    Guard,
    Journal,
    Periods,
)
from src.models.base import ErrorDetail
from src.models.tracking import (
    AssessmentRead,
    CycleAnalysisRead,
    InsightResponse,
    PeriodAnalysisCreate,
)
from src.services.insight_generator import (
    AnalysisInProgressError,
    InFlightGuard,
    InsightGenerator,
    InsightGeneratorError,
    InsightKind,
)

router = APIRouter(tags=["insights"])
logger = logging.getLogger("mitra.routers.insights")

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    409: {"model": ErrorDetail},
    422: {"model": ErrorDetail},
    502: {"model": ErrorDetail},
    503: {"model": ErrorDetail},
}


async def _dispatch(
    user: AuthContext,
    guard: InFlightGuard,
    generator: InsightGenerator | None,
    kind: InsightKind,
    request: InsightRequest,
) -> dict[str, Any]:
    if generator is None:
        raise HTTPException(status_code=503, detail="Insight generator is not configured")
    try:
        async with guard.hold(user.user_id, kind):
            return await generator.generate(kind, request)
    except AnalysisInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except InsightGeneratorError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.get("/cycles/analysis", response_model=CycleAnalysisRead)
async def cycle_analysis(user: CurrentUser, periods: Periods, engine: Engine) -> Any:
    try:
        derivation, assessment = engine.assess(periods.list_periods())
    except DataIntegrityError as exc:
        logger.error("Cycle analysis integrity failure: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return CycleAnalysisRead.model_validate(
        {**derivation.to_dict(), "assessment": assessment.to_dict()}
    )


@router.post(
    "/insights/period-analysis",
    response_model=InsightResponse,
    responses=_ERROR_RESPONSES,
)
async def period_analysis(
    user: CurrentUser,
    periods: Periods,
    engine: Engine,
    guard: Guard,
    generator: Generator,
    body: PeriodAnalysisCreate | None = None,
) -> Any:
    recorded = periods.list_periods()
    additional = body.additional_symptoms if body else None
    try:
        analysis = engine.analyze(recorded, additional_symptoms_text=additional)
    except InsufficientDataError as exc:
        if len(recorded) >= 2:
            detail = "Could not calculate cycle lengths. Ensure period dates are distinct."
        else:
            detail = "Please record at least two period occurrences to analyze cycles."
        raise HTTPException(status_code=422, detail=detail) from exc
    except DataIntegrityError as exc:
        logger.error("Period analysis integrity failure: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    insight = await _dispatch(user, guard, generator, InsightKind.period_analysis, analysis.request)
    return InsightResponse(
        request=analysis.request.to_dict(),
        assessment=AssessmentRead.model_validate(analysis.assessment.to_dict()),
        insight=insight,
    )


@router.post(
    "/insights/symptom-forecast",
    response_model=InsightResponse,
    responses=_ERROR_RESPONSES,
)
async def symptom_forecast(
    user: CurrentUser,
    periods: Periods,
    journal: Journal,
    engine: Engine,
    guard: Guard,
    generator: Generator,
) -> Any:
    logs = journal.list_logs()
    if not logs:
        raise HTTPException(
            status_code=422, detail="At least one symptom log is required for analysis."
        )
    try:
        analysis = engine.analyze(periods.list_periods(), logs)
    except InsufficientDataError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except DataIntegrityError as exc:
        logger.error("Symptom forecast integrity failure: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    insight = await _dispatch(user, guard, generator, InsightKind.symptom_forecast, analysis.request)
    return InsightResponse(
        request=analysis.request.to_dict(),
        assessment=AssessmentRead.model_validate(analysis.assessment.to_dict()),
        insight=insight,
    )
