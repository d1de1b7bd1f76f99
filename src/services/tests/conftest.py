"""Shared fixtures for storage and insight generator tests."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.cycles.models import CycleObservation, InsightRequest
from src.services.store import InMemoryStore, PeriodLog, SymptomJournal


@pytest.fixture
def period_log() -> PeriodLog:
    return PeriodLog(InMemoryStore())


@pytest.fixture
def symptom_journal() -> SymptomJournal:
    return SymptomJournal(InMemoryStore())


@pytest.fixture
def insight_request() -> InsightRequest:
    return InsightRequest(
        cycle_observations=(CycleObservation(date(2024, 1, 1), 29),),
        additional_symptoms_text="Persistent acne along the jawline.",
    )


@pytest.fixture
def mock_httpx_client() -> MagicMock:
    """Mock httpx.AsyncClient for testing the generator without real calls."""
    client = MagicMock()
    response = MagicMock()
    response.status_code = 200
    response.raise_for_status = MagicMock()
    response.json = MagicMock(return_value={"isRegular": True})
    client.post = AsyncMock(return_value=response)
    return client
