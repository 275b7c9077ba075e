"""History API Router"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..utils.services import ExplorerServices
from .dependencies import services_dependency
from .schemas import StandardResponse

router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("", response_model=StandardResponse)
async def get_history(
    limit: Optional[int] = Query(None, ge=1),
    services: ExplorerServices = Depends(services_dependency),
):
    entries = services.history.list()
    if limit is not None:
        entries = entries[:limit]
    return StandardResponse(data=[entry.to_dict() for entry in entries])


@router.delete("", response_model=StandardResponse)
async def clear_history(
    confirm: bool = Query(False, description="Must be true; clearing cannot be undone"),
    services: ExplorerServices = Depends(services_dependency),
):
    if not confirm:
        raise HTTPException(status_code=400, detail="Pass confirm=true to clear the history")
    services.history.clear()
    return StandardResponse(data=[], message="History cleared")
