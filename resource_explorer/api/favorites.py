"""Favorites API Router"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..utils.services import ExplorerServices
from .dependencies import services_dependency
from .schemas import ResourcePayload, StandardResponse

router = APIRouter(prefix="/api/favorites", tags=["favorites"])


@router.get("", response_model=StandardResponse)
async def list_favorites(services: ExplorerServices = Depends(services_dependency)):
    return StandardResponse(data=[fav.to_dict() for fav in services.favorites.list()])


@router.get("/contains", response_model=StandardResponse)
async def contains_favorite(
    resource_id: str = Query(...),
    services: ExplorerServices = Depends(services_dependency),
):
    return StandardResponse(data={"isFavorite": services.favorites.contains(resource_id)})


@router.post("", response_model=StandardResponse)
async def add_favorite(
    body: ResourcePayload,
    services: ExplorerServices = Depends(services_dependency),
):
    added = services.favorites.add(body.to_resource())
    return StandardResponse(
        data={"added": added},
        message=None if added else "Already a favorite",
    )


# Resource IDs contain slashes, hence the path converter
@router.delete("/{resource_id:path}", response_model=StandardResponse)
async def remove_favorite(
    resource_id: str,
    services: ExplorerServices = Depends(services_dependency),
):
    if not resource_id.startswith("/"):
        resource_id = f"/{resource_id}"
    removed = services.favorites.remove(resource_id)
    return StandardResponse(data={"removed": removed})
