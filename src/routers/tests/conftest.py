"""Fixtures for API tests: an app wired to in-memory stores and a fake generator."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.cycles.models import InsightRequest
from src.dependencies import (
    get_in_flight_guard,
    get_insight_generator,
    get_period_log,
    get_symptom_journal,
)
from src.main import create_app
from src.services.insight_generator import InFlightGuard, InsightGenerator, InsightKind
from src.services.store import InMemoryStore, PeriodLog, SymptomJournal


class FakeInsightGenerator(InsightGenerator):
    """Records every request and replies with a canned body."""

    def __init__(self, reply: dict[str, Any] | None = None) -> None:
        self.reply = reply or {"isRegular": True, "regularitySummary": "Looks regular."}
        self.calls: list[tuple[InsightKind, InsightRequest]] = []

    async def generate(self, kind: InsightKind, request: InsightRequest) -> dict[str, Any]:
        self.calls.append((kind, request))
        return self.reply


@pytest.fixture
def fake_generator() -> FakeInsightGenerator:
    return FakeInsightGenerator()


@pytest.fixture
def app(fake_generator: FakeInsightGenerator) -> FastAPI:
    application = create_app()
    period_log = PeriodLog(InMemoryStore())
    journal = SymptomJournal(InMemoryStore())
    guard = InFlightGuard()
    application.dependency_overrides[get_period_log] = lambda: period_log
    application.dependency_overrides[get_symptom_journal] = lambda: journal
    application.dependency_overrides[get_in_flight_guard] = lambda: guard
    application.dependency_overrides[get_insight_generator] = lambda: fake_generator
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def record_periods(client: TestClient):
    """Post a list of (from, to) ISO pairs to the period log."""

    def _record(*ranges: tuple[str, str]) -> None:
        for start, end in ranges:
            response = client.post("/api/v1/periods", json={"from": start, "to": end})
            assert response.status_code == 201, response.text

    return _record
