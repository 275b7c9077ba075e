"""
Subscriptions API Router

  - List subscriptions (after the CLI availability / login check)
  - Change the default subscription
  - Select the browsing scope for the session
"""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException

from ..utils.logger import get_logger
from ..utils.services import ExplorerServices
from .dependencies import ensure_cli_ready, services_dependency
from .schemas import SelectRequest, StandardResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["subscriptions"])


@router.get("/subscriptions", response_model=StandardResponse)
async def list_subscriptions(services: ExplorerServices = Depends(services_dependency)):
    """List subscriptions; the default one is flagged with ``isDefault``."""
    start = time.time()
    await ensure_cli_ready(services)
    subscriptions = await services.aggregator.list_subscriptions()
    return StandardResponse(
        data=[sub.to_dict() for sub in subscriptions],
        duration_ms=round((time.time() - start) * 1000, 1),
    )


@router.post("/subscriptions/{subscription_id}/default", response_model=StandardResponse)
async def set_default_subscription(
    subscription_id: str,
    services: ExplorerServices = Depends(services_dependency),
):
    """Make ``subscription_id`` the CLI default and mirror the flag locally."""
    await ensure_cli_ready(services)
    subscriptions = await services.aggregator.set_default_subscription(subscription_id)
    return StandardResponse(
        data=[sub.to_dict() for sub in subscriptions],
        message=f"Default subscription set to {subscription_id}",
    )


@router.post("/session/scope", response_model=StandardResponse)
async def select_scope(
    body: SelectRequest,
    services: ExplorerServices = Depends(services_dependency),
):
    """Browse one subscription, or pass null to return to the all-subscriptions view."""
    if body.subscription_id is None:
        await services.session.select_subscription(None)
        return StandardResponse(data={"selected": None, "resourceCount": 0})

    subscriptions = services.aggregator.subscriptions
    if subscriptions is None:
        await ensure_cli_ready(services)
        subscriptions = await services.aggregator.list_subscriptions()

    selected = next((sub for sub in subscriptions if sub.id == body.subscription_id), None)
    if selected is None:
        raise HTTPException(status_code=404, detail=f"Unknown subscription {body.subscription_id}")

    resources = await services.session.select_subscription(selected)
    return StandardResponse(
        data={"selected": selected.to_dict(), "resourceCount": len(resources)},
    )
