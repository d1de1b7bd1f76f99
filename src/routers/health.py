"""Health check endpoint. Public, no auth required."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from src.config import get_settings
from src.cycles.config_loader import get_cycle_config

router = APIRouter(tags=["system"])
logger = logging.getLogger("mitra.health")


@router.get("/health")
async def health_check() -> dict:
    """Liveness probe. Returns 200 if the API process is up.

    Also reports whether the cycle thresholds loaded and whether an
    insight generator is configured.
    """
    settings = get_settings()
    config_version: str | None = None
    try:
        config_version = get_cycle_config().version
    except Exception as exc:
        logger.warning("Health check config probe failed: %s", exc)

    return {
        "status": "healthy" if config_version else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "cycle_config": config_version or "unavailable",
        "insight_generator": "configured" if settings.insight_generator_url else "disabled",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
