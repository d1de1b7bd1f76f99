"""Endpoints for the recorded period log."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from src.cycles.errors import InvalidIntervalError, OverlapError
from src.cycles.models import PeriodInterval
from src.dependencies import CurrentUser, Periods
from src.models.base import ErrorDetail
from src.models.tracking import PeriodCreate, PeriodRead

router = APIRouter(prefix="/periods", tags=["periods"])
logger = logging.getLogger("mitra.routers.periods")


def _to_read(periods: list[PeriodInterval]) -> list[PeriodRead]:
    return [
        PeriodRead(
            index=i,
            from_date=p.from_date,
            to_date=p.to_date,
            duration_days=p.duration_days,
        )
        for i, p in enumerate(periods)
    ]


@router.get("", response_model=list[PeriodRead])
async def list_periods(user: CurrentUser, log: Periods) -> Any:
    return _to_read(log.list_periods())


@router.post(
    "",
    response_model=list[PeriodRead],
    status_code=201,
    responses={409: {"model": ErrorDetail}, 422: {"model": ErrorDetail}},
)
async def add_period(user: CurrentUser, log: Periods, body: PeriodCreate) -> Any:
    try:
        candidate = PeriodInterval(from_date=body.from_date, to_date=body.to_date)
        updated = log.add(candidate)
    except OverlapError as exc:
        raise HTTPException(
            status_code=409,
            detail="This period range overlaps with an existing one.",
        ) from exc
    except InvalidIntervalError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _to_read(updated)


@router.delete("/{index}", status_code=204)
async def remove_period(index: int, user: CurrentUser, log: Periods) -> None:
    try:
        log.remove(index)
    except IndexError as exc:
        raise HTTPException(status_code=404, detail="Period not found") from exc
