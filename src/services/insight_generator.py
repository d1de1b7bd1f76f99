"""Client for the external insight generator (LLM service).

The generator is opaque: it receives an ``InsightRequest`` payload and
returns narrative guidance as JSON.  This module only transports the
request.  It does not author prompts, retry, or interpret the reply.

One analysis per user and kind may be in flight at a time; a second
concurrent request is refused by ``InFlightGuard`` rather than queued.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator

import httpx

from src.config import Settings, get_settings
from src.cycles.models import InsightRequest

logger = logging.getLogger("mitra.insight_generator")


class InsightKind(str, Enum):
    period_analysis = "period-analysis"
    symptom_forecast = "symptom-forecast"


class InsightGeneratorError(RuntimeError):
    """Raised when the insight generator cannot be reached or rejects a request."""


class AnalysisInProgressError(RuntimeError):
    """Raised when the same user already has an identical analysis in flight."""


class InsightGenerator(ABC):
    """Request/response contract for insight generation."""

    @abstractmethod
    async def generate(self, kind: InsightKind, request: InsightRequest) -> dict[str, Any]:
        """Send one request and return the generator's JSON reply."""


class HttpInsightGenerator(InsightGenerator):
    """POST insight requests to ``{base_url}/{kind}`` as JSON.

    Args:
        base_url:    Root URL of the insight service.
        api_key:     Optional bearer token.
        timeout:     Per-request timeout in seconds.
        http_client: Optional pre-configured httpx client (for testing).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> HttpInsightGenerator | None:
        """Build a client from settings, or return None when no URL is configured."""
        s = settings or get_settings()
        if not s.insight_generator_url:
            return None
        return cls(
            base_url=s.insight_generator_url,
            api_key=s.insight_generator_api_key,
            timeout=s.insight_generator_timeout_seconds,
        )

    def _build_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def generate(self, kind: InsightKind, request: InsightRequest) -> dict[str, Any]:
        """Send the request and return the parsed JSON reply.

        Raises:
            InsightGeneratorError: On transport errors, non-2xx replies, or a
                                   reply that is not a JSON object.
        """
        url = f"{self._base_url}/{kind.value}"
        payload = request.to_dict()
        headers = self._build_headers()

        try:
            if self._http_client:
                response = await self._http_client.post(
                    url, json=payload, headers=headers, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Insight generator returned %s for %s", exc.response.status_code, kind.value
            )
            raise InsightGeneratorError(
                f"Insight generator returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Insight generator request failed for %s: %s", kind.value, exc)
            raise InsightGeneratorError(f"Insight generator unreachable: {exc}") from exc
        except ValueError as exc:
            raise InsightGeneratorError("Insight generator reply is not valid JSON") from exc

        if not isinstance(body, dict):
            raise InsightGeneratorError("Insight generator reply must be a JSON object")

        logger.info(
            "Insight generated: kind=%s cycles=%d logs=%d",
            kind.value, len(request.cycle_observations), len(request.symptom_logs),
        )
        return body


class InFlightGuard:
    """Refuse a second concurrent analysis for the same (user, kind)."""

    def __init__(self) -> None:
        self._locks: dict[tuple[str, str], asyncio.Lock] = defaultdict(asyncio.Lock)

    def is_busy(self, user_id: str, kind: InsightKind) -> bool:
        return self._locks[(user_id, kind.value)].locked()

    @asynccontextmanager
    async def hold(self, user_id: str, kind: InsightKind) -> AsyncIterator[None]:
        """Hold the (user, kind) slot for the duration of the block.

        Raises:
            AnalysisInProgressError: If the slot is already held.
        """
        lock = self._locks[(user_id, kind.value)]
        if lock.locked():
            raise AnalysisInProgressError(
                f"A {kind.value} analysis is already running for this user"
            )
        async with lock:
            yield
