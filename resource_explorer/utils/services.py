"""Wiring of the gateway, stores, aggregator and session for one process."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .config import config
from .favorites import FavoritesRegistry
from .history import HistoryTracker
from .item_store import JsonFileItemStore
from .resource_aggregator import ResourceAggregator
from .search_session import SearchSession


@dataclass
class ExplorerServices:
    gateway: Any
    aggregator: ResourceAggregator
    history: HistoryTracker
    favorites: FavoritesRegistry
    session: SearchSession


def build_services(gateway: Any = None, store: Any = None) -> ExplorerServices:
    """Create a fresh session; the aggregation cache starts cold."""
    if gateway is None:
        from .azure_cli_executor import get_azure_cli_executor
        gateway = get_azure_cli_executor()
    if store is None:
        store = JsonFileItemStore(config.explorer.state_dir)

    aggregator = ResourceAggregator(gateway)
    history = HistoryTracker(store)
    favorites = FavoritesRegistry(store)
    session = SearchSession(aggregator, history=history, favorites=favorites)
    return ExplorerServices(
        gateway=gateway,
        aggregator=aggregator,
        history=history,
        favorites=favorites,
        session=session,
    )


_services: Optional[ExplorerServices] = None


def get_services() -> ExplorerServices:
    """Get or create the process-wide services."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def set_services(services: Optional[ExplorerServices]) -> None:
    """Install (or reset with None) the process-wide services."""
    global _services
    _services = services
