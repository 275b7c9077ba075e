"""Recently accessed resources, most recent first."""
from __future__ import annotations

import time
from typing import Any, Callable, List, Optional

from .config import config
from .item_store import dump_json_list, load_json_list
from .logger import get_logger
from .models import HistoryEntry, Resource

logger = get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class HistoryTracker:
    """Bounded, deduplicated access history persisted under one key.

    At most one entry per resource id; recording an id that is already
    present moves it to the front with a fresh timestamp. Entries beyond
    ``max_items`` are dropped from the tail.
    """

    def __init__(
        self,
        store: Any,
        key: Optional[str] = None,
        max_items: Optional[int] = None,
        clock: Callable[[], int] = _now_ms,
    ):
        self._store = store
        self._key = key or config.explorer.history_key
        self._max_items = max_items if max_items is not None else config.explorer.history_max_items
        self._clock = clock

    @property
    def max_items(self) -> int:
        return self._max_items

    def list(self) -> List[HistoryEntry]:
        return load_json_list(self._store, self._key, HistoryEntry.from_dict)

    def recent(self, limit: int) -> List[HistoryEntry]:
        return self.list()[:limit]

    def record(self, resource: Resource) -> HistoryEntry:
        """Record an access to ``resource`` and persist the new sequence."""
        entry = HistoryEntry(resource=resource, accessed_at=self._clock())
        remaining = [e for e in self.list() if e.resource.id != resource.id]
        updated = [entry, *remaining][: self._max_items]
        dump_json_list(self._store, self._key, updated)
        logger.debug("Recorded access to %s (%d in history)", resource.id, len(updated))
        return entry

    def clear(self) -> None:
        """Erase the whole history. Callers confirm with the user first."""
        self._store.delete(self._key)
        logger.info("History cleared")
