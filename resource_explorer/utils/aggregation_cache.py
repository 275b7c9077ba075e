"""
Session cache for the "all resources across all subscriptions" result.

States move Empty -> Loading -> Loaded and never leave Loaded within a
session. A failed load (the subscription list itself could not be fetched)
drops back to Empty so the next global search can try again.
"""
from __future__ import annotations

import asyncio
import enum
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .logger import get_logger
from .models import Resource

logger = get_logger(__name__)

Loader = Callable[[], Awaitable[List[Resource]]]


class CacheState(str, enum.Enum):
    EMPTY = "empty"
    LOADING = "loading"
    LOADED = "loaded"


class AggregationCache:
    """Load-once holder for the aggregated resource list.

    Concurrent callers during Loading share the same in-flight load. The load
    is shielded from caller cancellation: a superseded search abandons its
    wait but the load still completes and fills the cache.
    """

    def __init__(self) -> None:
        self._state = CacheState.EMPTY
        self._data: Optional[List[Resource]] = None
        self._task: Optional[asyncio.Task] = None
        self._loaded_at: Optional[float] = None

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state is CacheState.LOADED

    @property
    def is_loading(self) -> bool:
        return self._state is CacheState.LOADING

    @property
    def data(self) -> Optional[List[Resource]]:
        """Cached resources, or None until Loaded."""
        return self._data

    async def get_or_load(self, loader: Loader) -> List[Resource]:
        if self._state is CacheState.LOADED:
            return self._data  # type: ignore[return-value]

        if self._task is None:
            self._state = CacheState.LOADING
            self._task = asyncio.ensure_future(self._load(loader))
            logger.info("Aggregation cache loading")

        return await asyncio.shield(self._task)

    async def _load(self, loader: Loader) -> List[Resource]:
        start = time.time()
        try:
            data = await loader()
        except BaseException:
            self._state = CacheState.EMPTY
            self._task = None
            raise
        self._data = data
        self._state = CacheState.LOADED
        self._loaded_at = time.time()
        logger.info(
            "Aggregation cache loaded: %d resources in %.1fs",
            len(data), self._loaded_at - start,
        )
        return data

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "state": self._state.value,
            "resource_count": len(self._data) if self._data is not None else 0,
            "loaded_at": self._loaded_at,
        }
