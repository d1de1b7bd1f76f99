"""Endpoints for daily symptom logs and their trend summaries."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from src.cycles.models import SymptomLogEntry
from src.dependencies import CurrentUser, Engine, Journal, Periods
from src.models.tracking import SymptomLogCreate, SymptomLogRead, TrendRead

router = APIRouter(prefix="/symptom-logs", tags=["symptom logs"])


def _to_read(logs: list[SymptomLogEntry]) -> list[SymptomLogRead]:
    return [
        SymptomLogRead.model_validate({"index": i, **log.to_dict()})
        for i, log in enumerate(logs)
    ]


@router.get("", response_model=list[SymptomLogRead])
async def list_logs(user: CurrentUser, journal: Journal) -> Any:
    return _to_read(journal.list_logs())


@router.post("", response_model=list[SymptomLogRead], status_code=201)
async def add_log(user: CurrentUser, journal: Journal, body: SymptomLogCreate) -> Any:
    entry = SymptomLogEntry(
        date=body.log_date,
        mood=body.mood,
        skin=body.skin,
        pain=body.pain,
        period=body.period,
        discharge=body.discharge,
        hair_growth=body.hair_growth,
        journal_text=body.journal_text,
    )
    return _to_read(journal.add(entry))


@router.get("/trends", response_model=list[TrendRead])
async def symptom_trends(
    user: CurrentUser, journal: Journal, periods: Periods, engine: Engine
) -> Any:
    trends = engine.aggregate_symptoms(journal.list_logs(), periods.list_periods())
    return [TrendRead.model_validate(t.to_dict()) for t in trends]


@router.delete("/{index}", status_code=204)
async def remove_log(index: int, user: CurrentUser, journal: Journal) -> None:
    try:
        journal.remove(index)
    except IndexError as exc:
        raise HTTPException(status_code=404, detail="Symptom log not found") from exc
