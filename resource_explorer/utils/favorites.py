"""Pinned resources, kept in insertion order."""
from __future__ import annotations

from typing import Any, List, Optional

from .config import config
from .item_store import dump_json_list, load_json_list
from .logger import get_logger
from .models import Resource

logger = get_logger(__name__)


class FavoritesRegistry:
    """Deduplicated set of favorite resources keyed by resource id.

    ``add`` and ``remove`` are idempotent. A corrupt stored blob reads as an
    empty set.
    """

    def __init__(self, store: Any, key: Optional[str] = None):
        self._store = store
        self._key = key or config.explorer.favorites_key

    def list(self) -> List[Resource]:
        return load_json_list(self._store, self._key, Resource.from_dict)

    def contains(self, resource_id: str) -> bool:
        return any(fav.id == resource_id for fav in self.list())

    def add(self, resource: Resource) -> bool:
        """Append ``resource``; returns False when it was already a favorite."""
        favorites = self.list()
        if any(fav.id == resource.id for fav in favorites):
            return False
        favorites.append(resource)
        dump_json_list(self._store, self._key, favorites)
        logger.info("Added %s to favorites", resource.id)
        return True

    def remove(self, resource_id: str) -> bool:
        """Drop the favorite with ``resource_id``; returns False when absent."""
        favorites = self.list()
        remaining = [fav for fav in favorites if fav.id != resource_id]
        if len(remaining) == len(favorites):
            return False
        dump_json_list(self._store, self._key, remaining)
        logger.info("Removed %s from favorites", resource_id)
        return True
