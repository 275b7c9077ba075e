"""
Test suite for SearchSession.

Tests scope selection, lazy global aggregation, result capping,
generation-based discarding of superseded searches and history recording.
"""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from resource_explorer.utils.aggregation_cache import CacheState
from resource_explorer.utils.errors import GatewayError
from resource_explorer.utils.favorites import FavoritesRegistry
from resource_explorer.utils.history import HistoryTracker
from resource_explorer.utils.resource_aggregator import ResourceAggregator
from resource_explorer.utils.search_engine import ALL_FILTER
from resource_explorer.utils.search_session import (
    MODE_GLOBAL,
    MODE_LANDING,
    MODE_SUBSCRIPTION,
    SearchSession,
)

from .conftest import SUB_DEV_ID, SUB_PROD_ID, make_resource

pytestmark = [pytest.mark.unit]


@pytest.fixture
def history(store):
    return HistoryTracker(store)


@pytest.fixture
def favorites(store):
    return FavoritesRegistry(store)


@pytest.fixture
def aggregator(gateway):
    return ResourceAggregator(gateway)


@pytest.fixture
def session(aggregator, history, favorites):
    return SearchSession(aggregator, history=history, favorites=favorites, result_limit=50)


class TestLandingAndGlobalMode:
    async def test_empty_query_does_not_trigger_aggregation(self, session, aggregator, gateway):
        await aggregator.list_subscriptions()
        view = await session.search("")

        assert view.mode == MODE_LANDING
        assert [s.name for s in view.subscriptions] == ["Production", "Development"]
        assert aggregator.cache.state is CacheState.EMPTY
        gateway.list_resources.assert_not_awaited()

    async def test_first_non_empty_query_loads_then_reuses(self, session, aggregator, gateway):
        view = await session.search("vm")
        assert view.mode == MODE_GLOBAL
        assert sorted(r.name for r in view.items) == ["vm-dev", "vm-web"]
        assert aggregator.cache.is_loaded

        await session.search("st")
        assert gateway.list_resources.await_count == 2

    async def test_global_results_capped_with_full_count(self, aggregator, gateway, subscriptions):
        many = [make_resource(f"vm-{i:03d}") for i in range(75)]
        gateway.list_subscriptions = AsyncMock(return_value=subscriptions[:1])
        gateway.list_resources = AsyncMock(return_value=many)
        session = SearchSession(aggregator, result_limit=50)

        view = await session.search("vm")

        assert len(view.items) == 50
        assert view.total == 75
        assert view.to_dict()["count"] == 50

    async def test_landing_includes_recent_history(self, session, history):
        for name in "abcdef":
            history.record(make_resource(name))
        view = await session.search("")
        assert [e.resource.name for e in view.recent] == ["f", "e", "d", "c", "b"]

    async def test_global_query_filters_subscription_list(self, session, aggregator):
        await aggregator.list_subscriptions()
        view = await session.search("develop")
        assert [s.name for s in view.subscriptions] == ["Development"]


class TestSubscriptionScope:
    async def test_select_fetches_and_searches_locally(self, session, subscriptions, gateway):
        await session.select_subscription(subscriptions[0])
        view = await session.search("prod")

        assert view.mode == MODE_SUBSCRIPTION
        assert [r.name for r in view.items] == ["vm-web", "stprodlogs"]
        assert view.types == ["Microsoft.Compute/virtualMachines", "Microsoft.Storage/storageAccounts"]
        assert view.locations == ["eastus", "westeurope"]
        gateway.query_resource_page.assert_not_awaited()

    async def test_type_filter_in_scope(self, session, subscriptions):
        await session.select_subscription(subscriptions[0])
        view = await session.search("", type_filter="Microsoft.Storage/storageAccounts")
        assert [r.name for r in view.items] == ["stprodlogs"]

    async def test_select_failure_propagates_and_clears_scope(self, session, subscriptions, gateway):
        gateway.list_resources.side_effect = GatewayError("denied")
        with pytest.raises(GatewayError):
            await session.select_subscription(subscriptions[0])
        assert session.resources == []

    async def test_clearing_selection_returns_to_landing(self, session, subscriptions):
        await session.select_subscription(subscriptions[0])
        await session.select_subscription(None)
        view = await session.search("")
        assert session.selected is None
        assert view.mode == MODE_LANDING
        assert view.type_filter == ALL_FILTER

    async def test_favorites_are_flagged(self, session, subscriptions, favorites, prod_resources):
        favorites.add(prod_resources[0])
        await session.select_subscription(subscriptions[0])
        view = await session.search("")
        flags = {item["name"]: item["isFavorite"] for item in view.to_dict()["items"]}
        assert flags == {"vm-web": True, "stprodlogs": False}

    async def test_slower_earlier_selection_does_not_overwrite_newer_scope(
        self, session, subscriptions, gateway, prod_resources, dev_resources,
    ):
        release_prod = asyncio.Event()

        async def held_list(subscription_id, subscription_name):
            if subscription_id == SUB_PROD_ID:
                await release_prod.wait()
                return list(prod_resources)
            return list(dev_resources)

        gateway.list_resources = AsyncMock(side_effect=held_list)

        stale = asyncio.ensure_future(session.select_subscription(subscriptions[0]))
        await asyncio.sleep(0)
        assert session.is_loading

        selected = await session.select_subscription(subscriptions[1])
        release_prod.set()

        assert await stale == []
        assert [r.name for r in selected] == ["vm-dev"]
        assert session.selected.id == SUB_DEV_ID
        assert all(r.subscription_id == SUB_DEV_ID for r in session.resources)
        assert not session.is_loading


class TestGenerations:
    async def test_superseded_search_is_discarded(self, aggregator, gateway, subscriptions, prod_resources):
        release = asyncio.Event()

        async def slow_list(subscription_id, subscription_name):
            await release.wait()
            return list(prod_resources)

        gateway.list_subscriptions = AsyncMock(return_value=subscriptions[:1])
        gateway.list_resources = AsyncMock(side_effect=slow_list)
        session = SearchSession(aggregator)

        stale = asyncio.ensure_future(session.search("vm"))
        await asyncio.sleep(0)
        assert session.is_loading

        fresh = asyncio.ensure_future(session.search("logs"))
        await asyncio.sleep(0)
        release.set()

        assert await stale is None
        view = await fresh
        assert view.generation == session.generation == 2
        assert [r.name for r in view.items] == ["stprodlogs"]
        assert session.latest is view
        # the abandoned wait did not restart the aggregation
        assert gateway.list_resources.await_count == 1

    async def test_generation_increments(self, session):
        await session.search("")
        await session.search("")
        assert session.generation == 2
        assert not session.is_loading


class TestOpenResource:
    async def test_records_history_and_returns_portal_url(self, session, history):
        vm = make_resource("vm-web")
        url = session.open_resource(vm)
        assert url == f"https://portal.azure.com/#@/resource{vm.id}"
        assert history.list()[0].resource.id == vm.id
        assert vm.id.startswith(f"/subscriptions/{SUB_PROD_ID}")
