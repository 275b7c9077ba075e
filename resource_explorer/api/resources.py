"""
Resources API Router

Search within the selected subscription, or across every subscription when
none is selected, and open resources in the Azure Portal.
"""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends, Query

from ..utils.azure_cli_executor import build_portal_url
from ..utils.logger import get_logger
from ..utils.search_engine import ALL_FILTER
from ..utils.services import ExplorerServices
from .dependencies import ensure_cli_ready, services_dependency
from .schemas import ResourcePayload, StandardResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/api/resources", tags=["resources"])


@router.get("/search", response_model=StandardResponse)
async def search_resources(
    q: str = Query("", description="Case-insensitive substring"),
    type: str = Query(ALL_FILTER, description="Exact resource type, or 'all'"),
    location: str = Query(ALL_FILTER, description="Exact location, or 'all'"),
    services: ExplorerServices = Depends(services_dependency),
):
    """Run a query in the current scope.

    With no subscription selected and a non-empty ``q`` the first call loads
    every subscription's resources; results are capped for display and the
    full match count is reported as ``total``.
    """
    start = time.time()
    if services.session.selected is None and q:
        await ensure_cli_ready(services)
    view = await services.session.search(q, type, location)
    if view is None:
        return StandardResponse(data=None, message="Superseded by a newer search")
    return StandardResponse(
        data=view.to_dict(),
        duration_ms=round((time.time() - start) * 1000, 1),
    )


@router.post("/open", response_model=StandardResponse)
async def open_resource(
    body: ResourcePayload,
    services: ExplorerServices = Depends(services_dependency),
):
    """Record the resource in history and return its portal URL."""
    url = services.session.open_resource(body.to_resource())
    return StandardResponse(data={"url": url})


@router.get("/portal-url", response_model=StandardResponse)
async def portal_url(resource_id: str = Query(..., description="Full Azure resource ID")):
    return StandardResponse(data={"url": build_portal_url(resource_id)})
