"""Tests for the insight generator client and the in-flight guard."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.config import Settings
from src.cycles.models import InsightRequest
from src.services.insight_generator import (
    AnalysisInProgressError,
    HttpInsightGenerator,
    InFlightGuard,
    InsightGeneratorError,
    InsightKind,
)


class TestFromSettings:
    def test_disabled_without_url(self) -> None:
        assert HttpInsightGenerator.from_settings(Settings(insight_generator_url=None)) is None

    def test_enabled_with_url(self) -> None:
        settings = Settings(insight_generator_url="http://insights.local/")
        assert isinstance(HttpInsightGenerator.from_settings(settings), HttpInsightGenerator)


class TestGenerate:
    @pytest.mark.asyncio
    async def test_posts_payload_to_kind_endpoint(
        self, mock_httpx_client: MagicMock, insight_request: InsightRequest
    ) -> None:
        generator = HttpInsightGenerator(
            "http://insights.local/", api_key="secret", http_client=mock_httpx_client
        )
        reply = await generator.generate(InsightKind.period_analysis, insight_request)

        assert reply == {"isRegular": True}
        mock_httpx_client.post.assert_called_once()
        args, kwargs = mock_httpx_client.post.call_args
        assert args[0] == "http://insights.local/period-analysis"
        assert kwargs["json"] == insight_request.to_dict()
        assert kwargs["headers"]["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_no_auth_header_without_key(
        self, mock_httpx_client: MagicMock, insight_request: InsightRequest
    ) -> None:
        generator = HttpInsightGenerator("http://insights.local", http_client=mock_httpx_client)
        await generator.generate(InsightKind.symptom_forecast, insight_request)
        _, kwargs = mock_httpx_client.post.call_args
        assert "Authorization" not in kwargs["headers"]

    @pytest.mark.asyncio
    async def test_http_error_status_mapped(self, insight_request: InsightRequest) -> None:
        request = httpx.Request("POST", "http://insights.local/period-analysis")
        response = httpx.Response(500, request=request)
        client = MagicMock()
        client.post = AsyncMock(return_value=response)

        generator = HttpInsightGenerator("http://insights.local", http_client=client)
        with pytest.raises(InsightGeneratorError, match="HTTP 500"):
            await generator.generate(InsightKind.period_analysis, insight_request)

    @pytest.mark.asyncio
    async def test_transport_error_mapped(self, insight_request: InsightRequest) -> None:
        client = MagicMock()
        client.post = AsyncMock(side_effect=httpx.ConnectError("connection refused"))

        generator = HttpInsightGenerator("http://insights.local", http_client=client)
        with pytest.raises(InsightGeneratorError, match="unreachable"):
            await generator.generate(InsightKind.period_analysis, insight_request)

    @pytest.mark.asyncio
    async def test_non_object_reply_rejected(
        self, mock_httpx_client: MagicMock, insight_request: InsightRequest
    ) -> None:
        mock_httpx_client.post.return_value.json = MagicMock(return_value=["not", "an", "object"])
        generator = HttpInsightGenerator("http://insights.local", http_client=mock_httpx_client)
        with pytest.raises(InsightGeneratorError, match="JSON object"):
            await generator.generate(InsightKind.period_analysis, insight_request)


class TestInFlightGuard:
    @pytest.mark.asyncio
    async def test_second_concurrent_request_refused(self) -> None:
        guard = InFlightGuard()
        async with guard.hold("local", InsightKind.period_analysis):
            assert guard.is_busy("local", InsightKind.period_analysis)
            with pytest.raises(AnalysisInProgressError):
                async with guard.hold("local", InsightKind.period_analysis):
                    pass
        assert not guard.is_busy("local", InsightKind.period_analysis)

    @pytest.mark.asyncio
    async def test_other_kinds_and_users_independent(self) -> None:
        guard = InFlightGuard()
        async with guard.hold("local", InsightKind.period_analysis):
            async with guard.hold("local", InsightKind.symptom_forecast):
                pass
            async with guard.hold("someone-else", InsightKind.period_analysis):
                pass

    @pytest.mark.asyncio
    async def test_slot_released_after_error(self) -> None:
        guard = InFlightGuard()
        with pytest.raises(RuntimeError):
            async with guard.hold("local", InsightKind.period_analysis):
                raise RuntimeError("generator failed")
        assert not guard.is_busy("local", InsightKind.period_analysis)
