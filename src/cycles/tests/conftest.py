"""Shared fixtures for cycle analytics engine tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.cycles.config_loader import CycleConfig, load_cycle_config
from src.cycles.models import PeriodInterval, SymptomLogEntry

# Fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cycle_config() -> CycleConfig:
    """Load the real bundled cycle config for tests."""
    return load_cycle_config()


# ---------------------------------------------------------------------------
# JSON fixture loaders
# ---------------------------------------------------------------------------


@pytest.fixture
def period_history() -> dict:
    return json.loads((FIXTURES_DIR / "period_history.json").read_text())


@pytest.fixture
def regular_periods(period_history: dict) -> list[PeriodInterval]:
    """Five periods with cycle lengths 28, 29, 28, 28."""
    return [PeriodInterval.from_dict(p) for p in period_history["regular_periods"]]


@pytest.fixture
def irregular_periods(period_history: dict) -> list[PeriodInterval]:
    """Five periods with cycle lengths 28, 30, 29, 45."""
    return [PeriodInterval.from_dict(p) for p in period_history["irregular_periods"]]


@pytest.fixture
def symptom_logs(period_history: dict) -> list[SymptomLogEntry]:
    """Eight entries over seven distinct days, around the regular periods."""
    return [SymptomLogEntry.from_dict(s) for s in period_history["symptom_logs"]]
