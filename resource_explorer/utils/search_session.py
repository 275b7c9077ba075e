"""
Search session controller.

Holds the user's current scope (one subscription, or none) and query state,
and turns each query into a view. Every query bumps a generation number; an
in-flight query from an older generation is cancelled and its result is
discarded, so only the latest request is ever applied.

With no subscription selected, the first non-empty query triggers the
cross-subscription aggregation; later global queries reuse the cached result.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from . import search_engine
from .azure_cli_executor import build_portal_url
from .config import config
from .favorites import FavoritesRegistry
from .history import HistoryTracker
from .logger import get_logger
from .models import HistoryEntry, Resource, Subscription
from .resource_aggregator import ResourceAggregator
from .search_engine import ALL_FILTER

logger = get_logger(__name__)

MODE_LANDING = "landing"
MODE_GLOBAL = "global"
MODE_SUBSCRIPTION = "subscription"


@dataclass
class SearchView:
    """Result of one query, tagged with the generation it was computed for."""
    generation: int
    mode: str
    text: str = ""
    type_filter: str = ALL_FILTER
    location_filter: str = ALL_FILTER
    items: List[Resource] = field(default_factory=list)
    total: int = 0
    types: List[str] = field(default_factory=list)
    locations: List[str] = field(default_factory=list)
    subscriptions: List[Subscription] = field(default_factory=list)
    recent: List[HistoryEntry] = field(default_factory=list)
    favorite_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        favorites = set(self.favorite_ids)
        return {
            "generation": self.generation,
            "mode": self.mode,
            "query": {
                "text": self.text,
                "type": self.type_filter,
                "location": self.location_filter,
            },
            "items": [
                {**res.to_dict(), "shortType": res.short_type, "isFavorite": res.id in favorites}
                for res in self.items
            ],
            "count": len(self.items),
            "total": self.total,
            "filters": {"types": self.types, "locations": self.locations},
            "subscriptions": [sub.to_dict() for sub in self.subscriptions],
            "recent": [entry.to_dict() for entry in self.recent],
        }


class SearchSession:
    """One user's browsing session over an aggregator."""

    def __init__(
        self,
        aggregator: ResourceAggregator,
        history: Optional[HistoryTracker] = None,
        favorites: Optional[FavoritesRegistry] = None,
        result_limit: Optional[int] = None,
        recent_limit: Optional[int] = None,
    ):
        self._aggregator = aggregator
        self._history = history
        self._favorites = favorites
        self._result_limit = result_limit if result_limit is not None else config.explorer.search_result_limit
        self._recent_limit = recent_limit if recent_limit is not None else config.explorer.recent_history_items

        self._selected: Optional[Subscription] = None
        self._resources: List[Resource] = []
        self._generation = 0
        self._scope_generation = 0
        self._task: Optional[asyncio.Task] = None
        self._scope_task: Optional[asyncio.Task] = None
        self.latest: Optional[SearchView] = None

    # -- state --------------------------------------------------------------

    @property
    def selected(self) -> Optional[Subscription]:
        return self._selected

    @property
    def resources(self) -> List[Resource]:
        return list(self._resources)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_loading(self) -> bool:
        in_flight = any(
            task is not None and not task.done() for task in (self._task, self._scope_task)
        )
        return in_flight or self._aggregator.cache.is_loading

    def _supersede(self) -> int:
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        return self._generation

    # -- scope --------------------------------------------------------------

    async def select_subscription(self, subscription: Optional[Subscription]) -> List[Resource]:
        """Change scope; filters reset to "all". GatewayError propagates with an empty scope.

        A selection superseded by a newer one while its resources are still
        loading returns ``[]`` and leaves the newer scope untouched.
        """
        self._supersede()
        self._scope_generation += 1
        scope_generation = self._scope_generation
        if self._scope_task is not None and not self._scope_task.done():
            self._scope_task.cancel()

        self._selected = subscription
        self._resources = []
        self.latest = None
        if subscription is None:
            return []

        task = asyncio.ensure_future(
            self._aggregator.list_resources(subscription.id, subscription.name)
        )
        self._scope_task = task
        try:
            resources = await task
        except asyncio.CancelledError:
            if task.cancelled() and scope_generation != self._scope_generation:
                logger.debug("Discarding superseded selection of %s", subscription.id)
                return []
            raise
        finally:
            if self._scope_task is task:
                self._scope_task = None

        if scope_generation != self._scope_generation:
            return []
        self._resources = resources
        return list(resources)

    # -- queries ------------------------------------------------------------

    async def search(
        self,
        text: str = "",
        type_filter: str = ALL_FILTER,
        location_filter: str = ALL_FILTER,
    ) -> Optional[SearchView]:
        """Run a query; returns None if a newer query superseded this one."""
        generation = self._supersede()
        task = asyncio.ensure_future(
            self._compute(generation, text, type_filter, location_filter)
        )
        self._task = task

        try:
            view = await task
        except asyncio.CancelledError:
            if task.cancelled() and generation != self._generation:
                logger.debug("Discarding superseded search generation %d", generation)
                return None
            raise
        finally:
            if self._task is task:
                self._task = None

        if generation != self._generation:
            return None
        self.latest = view
        return view

    async def _compute(
        self,
        generation: int,
        text: str,
        type_filter: str,
        location_filter: str,
    ) -> SearchView:
        view = SearchView(
            generation=generation,
            mode=MODE_SUBSCRIPTION,
            text=text,
            type_filter=type_filter,
            location_filter=location_filter,
        )

        if self._selected is not None:
            resources = self._resources
            result = search_engine.search(resources, text, type_filter, location_filter)
        else:
            view.subscriptions = search_engine.filter_subscriptions(
                self._aggregator.subscriptions or [], text,
            )
            if not text:
                view.mode = MODE_LANDING
                view.recent = self._history.recent(self._recent_limit) if self._history else []
                return view
            view.mode = MODE_GLOBAL
            resources = await self._aggregator.get_all_resources()
            result = search_engine.search(
                resources, text, type_filter, location_filter, limit=self._result_limit,
            )

        view.items = result.items
        view.total = result.total
        view.types = search_engine.distinct_types(resources)
        view.locations = search_engine.distinct_locations(resources)
        if self._favorites is not None:
            view.favorite_ids = [fav.id for fav in self._favorites.list()]
        return view

    # -- actions ------------------------------------------------------------

    def open_resource(self, resource: Resource) -> str:
        """Record the access in history and return the portal URL."""
        if self._history is not None:
            self._history.record(resource)
        return build_portal_url(resource.id)
