"""Health and status endpoints"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..utils.config import config
from ..utils.services import ExplorerServices
from .dependencies import services_dependency

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Fast health check endpoint"""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": config.app.version,
    }


@router.get("/api/status")
async def status(services: ExplorerServices = Depends(services_dependency)):
    """CLI readiness, aggregation cache state and session scope."""
    cli_status = await services.gateway.check_availability()
    selected = services.session.selected
    last_strategy = services.aggregator.last_strategy
    return {
        "cli": cli_status.to_dict(),
        "aggregation_cache": services.aggregator.cache.get_statistics(),
        "last_strategy": last_strategy.value if last_strategy else None,
        "selected_subscription": selected.to_dict() if selected else None,
        "loading": services.session.is_loading,
    }
