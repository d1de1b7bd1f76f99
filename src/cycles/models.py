"""Canonical value types for the Mitra cycle analytics engine.

Every type here is a frozen dataclass over calendar dates (no time of day, no
timezone).  They are the single source of truth shared by the validator,
derivation, classifier, aggregator and request builder, and by the storage
and API layers that feed them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from src.cycles.errors import InvalidIntervalError


def to_calendar_date(value: date | datetime | str) -> date:
    """Truncate a date-like value to a plain calendar date.

    Args:
        value: A ``date``, a ``datetime`` (time of day discarded) or an ISO
               ``YYYY-MM-DD`` string.

    Returns:
        The calendar date.
    """
    # datetime is a subclass of date, so it must be checked first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


# ---------------------------------------------------------------------------
# Period intervals and cycles
# ---------------------------------------------------------------------------


@dataclass(frozen=True, order=True)
class PeriodInterval:
    """A recorded menstrual period.

    Attributes:
        from_date: First day of bleeding.
        to_date:   Last day of bleeding (inclusive, ``>= from_date``).

    Ordering compares ``from_date`` first, so ``sorted()`` yields the
    ascending-by-start order the period log is kept in.
    """

    from_date: date
    to_date: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "from_date", to_calendar_date(self.from_date))
        object.__setattr__(self, "to_date", to_calendar_date(self.to_date))
        if self.to_date < self.from_date:
            raise InvalidIntervalError(
                f"Period end {self.to_date.isoformat()} is before its start "
                f"{self.from_date.isoformat()}"
            )

    @property
    def duration_days(self) -> int:
        """Number of bleeding days, counting both ends."""
        return (self.to_date - self.from_date).days + 1

    def contains(self, day: date) -> bool:
        return self.from_date <= day <= self.to_date

    def overlaps(self, other: PeriodInterval) -> bool:
        """Return True if the two closed intervals share at least one day.

        Equivalent to: this start inside ``other``, this end inside
        ``other``, or ``other``'s start inside this interval.
        """
        return (
            other.contains(self.from_date)
            or other.contains(self.to_date)
            or self.contains(other.from_date)
        )

    def describe(self) -> str:
        return f"{self.from_date.isoformat()}..{self.to_date.isoformat()}"

    def to_dict(self) -> dict[str, str]:
        return {"from": self.from_date.isoformat(), "to": self.to_date.isoformat()}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> PeriodInterval:
        return cls(from_date=raw["from"], to_date=raw["to"])


@dataclass(frozen=True)
class CycleObservation:
    """One derived cycle: start of a period to the start of the next.

    Attributes:
        start_date:   First day of the period that opens this cycle.
        cycle_length: Days until the next recorded period start.
    """

    start_date: date
    cycle_length: int

    def to_dict(self) -> dict[str, Any]:
        return {"startDate": self.start_date.isoformat(), "cycleLength": self.cycle_length}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> CycleObservation:
        return cls(
            start_date=to_calendar_date(raw["startDate"]),
            cycle_length=int(raw["cycleLength"]),
        )


# ---------------------------------------------------------------------------
# Symptom logs
# ---------------------------------------------------------------------------


class SymptomCategory(str, Enum):
    """Symptom categories folded by the aggregator, in priority order."""

    mood = "mood"
    skin = "skin"
    pain = "pain"
    discharge = "discharge"
    hair_growth = "hairGrowth"


# SymptomLogEntry attribute → wire key
_LOG_FIELDS: dict[str, str] = {
    "mood": "mood",
    "skin": "skin",
    "pain": "pain",
    "period": "period",
    "discharge": "discharge",
    "hair_growth": "hairGrowth",
    "journal_text": "journalText",
}


@dataclass(frozen=True)
class SymptomLogEntry:
    """A single daily symptom log.

    Multiple entries may share the same date; nothing deduplicates them.
    Free-text values are kept exactly as the user typed them.
    """

    date: date
    mood: str | None = None
    skin: str | None = None
    pain: str | None = None
    period: str | None = None
    discharge: str | None = None
    hair_growth: str | None = None
    journal_text: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "date", to_calendar_date(self.date))

    def value_for(self, category: SymptomCategory) -> str | None:
        """Return the logged value for a category, or None when missing/blank."""
        value = getattr(self, category.name)
        if value is None or not str(value).strip():
            return None
        return value

    def to_dict(self) -> dict[str, str]:
        out = {"date": self.date.isoformat()}
        for attr, key in _LOG_FIELDS.items():
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SymptomLogEntry:
        day = raw.get("date", raw.get("logDate"))
        if day is None:
            raise KeyError("Symptom log entry has no 'date'")
        return cls(
            date=to_calendar_date(day),
            **{attr: raw.get(key) for attr, key in _LOG_FIELDS.items()},
        )


# ---------------------------------------------------------------------------
# Derived results
# ---------------------------------------------------------------------------


class Confidence(str, Enum):
    High = "High"
    Medium = "Medium"
    Low = "Low"


@dataclass(frozen=True)
class NextPeriodPrediction:
    """Predicted start of the next period.

    Exactly one of three shapes:
      - single date: ``expected`` set, ``earliest == latest == expected``
      - range:       ``earliest < latest``, ``expected`` is the median-based date
      - indeterminate: every field None (no cycles to extrapolate from)
    """

    expected: date | None = None
    earliest: date | None = None
    latest: date | None = None

    @property
    def is_indeterminate(self) -> bool:
        return self.expected is None

    @property
    def is_range(self) -> bool:
        return (
            self.earliest is not None
            and self.latest is not None
            and self.earliest != self.latest
        )

    def describe(self) -> str:
        if self.expected is None:
            return "Insufficient data to predict the next period"
        if self.is_range:
            return f"{self.earliest.isoformat()} to {self.latest.isoformat()}"
        return self.expected.isoformat()

    def to_dict(self) -> dict[str, Any]:
        return {
            "expected": self.expected.isoformat() if self.expected else None,
            "earliest": self.earliest.isoformat() if self.earliest else None,
            "latest": self.latest.isoformat() if self.latest else None,
            "display": self.describe(),
        }


@dataclass(frozen=True)
class RegularityAssessment:
    """Regularity label and next-period prediction for a cycle history.

    Attributes:
        is_regular:           Lengths within range and spread within threshold.
        summary:              Human-readable explanation of the label.
        next_expected:        Next period prediction (date, range or none).
        confidence:           High / Medium / Low.
        cycle_count:          Number of cycles assessed.
        min_length:           Shortest cycle, None without cycles.
        max_length:           Longest cycle, None without cycles.
        median_length:        Median cycle length, None without cycles.
        variation_days:       ``max_length - min_length``.
        prompt_for_more_info: True when the user should add data or symptoms.
        warnings:             Short/long cycle flags.
    """

    is_regular: bool
    summary: str
    next_expected: NextPeriodPrediction
    confidence: Confidence
    cycle_count: int = 0
    min_length: int | None = None
    max_length: int | None = None
    median_length: float | None = None
    variation_days: int | None = None
    prompt_for_more_info: bool = False
    warnings: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "isRegular": self.is_regular,
            "summary": self.summary,
            "nextExpectedDate": self.next_expected.to_dict(),
            "confidence": self.confidence.value,
            "cycleCount": self.cycle_count,
            "minLength": self.min_length,
            "maxLength": self.max_length,
            "medianLength": self.median_length,
            "variationDays": self.variation_days,
            "promptForMoreInfo": self.prompt_for_more_info,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class TrendSummary:
    """Frequency and clustering of one symptom category.

    Attributes:
        category:    Symptom category.
        frequency:   Distinct days on which the category was logged.
        entry_count: Log entries carrying the category (same-day duplicates count).
        total_days:  Distinct logged days across all entries.
        note:        Qualitative statement, e.g. "logged on 4 of 10 days, ...".
        cluster:     'menstrual', 'premenstrual', or None when not concentrated.
    """

    category: SymptomCategory
    frequency: int
    entry_count: int
    total_days: int
    note: str
    cluster: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "frequency": self.frequency,
            "entryCount": self.entry_count,
            "totalDays": self.total_days,
            "note": self.note,
            "cluster": self.cluster,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TrendSummary:
        return cls(
            category=SymptomCategory(raw["category"]),
            frequency=int(raw["frequency"]),
            entry_count=int(raw["entryCount"]),
            total_days=int(raw["totalDays"]),
            note=raw["note"],
            cluster=raw.get("cluster"),
        )


@dataclass(frozen=True)
class InsightRequest:
    """Normalized payload handed to the external insight generator.

    Built fresh per request and never mutated.  ``to_dict()`` is plain
    JSON-serializable data with ISO calendar dates.
    """

    cycle_observations: tuple[CycleObservation, ...] = ()
    symptom_logs: tuple[SymptomLogEntry, ...] = ()
    symptom_trends: tuple[TrendSummary, ...] = field(default=())
    additional_symptoms_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "cycleObservations": [c.to_dict() for c in self.cycle_observations],
            "symptomLogs": [log.to_dict() for log in self.symptom_logs],
            "symptomTrends": [t.to_dict() for t in self.symptom_trends],
        }
        if self.additional_symptoms_text is not None:
            payload["additionalSymptomsText"] = self.additional_symptoms_text
        return payload

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> InsightRequest:
        return cls(
            cycle_observations=tuple(
                CycleObservation.from_dict(c) for c in raw.get("cycleObservations", [])
            ),
            symptom_logs=tuple(
                SymptomLogEntry.from_dict(s) for s in raw.get("symptomLogs", [])
            ),
            symptom_trends=tuple(
                TrendSummary.from_dict(t) for t in raw.get("symptomTrends", [])
            ),
            additional_symptoms_text=raw.get("additionalSymptomsText"),
        )
