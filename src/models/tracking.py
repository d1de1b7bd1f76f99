"""Pydantic models for period tracking, symptom logs, and cycle insights.

Field names are snake_case in Python and camelCase on the wire, matching the
payload field names the insight generator expects (``startDate``,
``cycleLength``, ``hairGrowth`` ...).
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.models.base import MitraBase


def _truncate_to_date(value: Any) -> Any:
    """Discard time of day from datetimes and ISO datetime strings."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
        return value[:10]
    return value


class CamelModel(MitraBase):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
    )


# ---------- Periods ----------

class PeriodCreate(CamelModel):
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def truncate_time(cls, value: Any) -> Any:
        return _truncate_to_date(value)

    @model_validator(mode="after")
    def check_order(self) -> PeriodCreate:
        if self.to_date < self.from_date:
            raise ValueError("End date cannot be before start date.")
        return self


class PeriodRead(CamelModel):
    index: int
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    duration_days: int


# ---------- Symptom logs ----------

class SymptomLogCreate(CamelModel):
    log_date: date = Field(default_factory=date.today, alias="date")
    mood: str | None = Field(default=None, max_length=200)
    skin: str | None = Field(default=None, max_length=200)
    pain: str | None = Field(default=None, max_length=200)
    period: str | None = Field(default=None, max_length=200)
    discharge: str | None = Field(default=None, max_length=200)
    hair_growth: str | None = Field(default=None, max_length=200)
    journal_text: str | None = Field(default=None, max_length=5000)

    @field_validator("log_date", mode="before")
    @classmethod
    def truncate_time(cls, value: Any) -> Any:
        return _truncate_to_date(value)


class SymptomLogRead(CamelModel):
    index: int
    log_date: date = Field(alias="date")
    mood: str | None = None
    skin: str | None = None
    pain: str | None = None
    period: str | None = None
    discharge: str | None = None
    hair_growth: str | None = None
    journal_text: str | None = None


class TrendRead(CamelModel):
    category: str
    frequency: int
    entry_count: int
    total_days: int
    note: str
    cluster: str | None = None


# ---------- Cycle analysis ----------

class CycleObservationRead(CamelModel):
    start_date: date
    cycle_length: int


class NextPeriodRead(CamelModel):
    expected: date | None = None
    earliest: date | None = None
    latest: date | None = None
    display: str


class AssessmentRead(CamelModel):
    is_regular: bool
    summary: str
    next_expected_date: NextPeriodRead
    confidence: str
    cycle_count: int
    min_length: int | None = None
    max_length: int | None = None
    median_length: float | None = None
    variation_days: int | None = None
    prompt_for_more_info: bool
    warnings: list[str] = Field(default_factory=list)


class CycleAnalysisRead(CamelModel):
    cycle_observations: list[CycleObservationRead]
    dropped_count: int
    assessment: AssessmentRead


# ---------- Insight requests ----------

class PeriodAnalysisCreate(CamelModel):
    # 10–500 characters when present, as the symptom form enforced
    additional_symptoms: str | None = Field(default=None, min_length=10, max_length=500)


class InsightResponse(CamelModel):
    request: dict[str, Any]
    assessment: AssessmentRead | None = None
    insight: dict[str, Any]
