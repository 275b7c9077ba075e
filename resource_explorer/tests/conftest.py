"""
Pytest configuration and shared fixtures for Resource Explorer tests
"""
from __future__ import annotations

from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest

from resource_explorer.utils.item_store import JsonFileItemStore
from resource_explorer.utils.models import CliStatus, GraphPage, Resource, Subscription

SUB_PROD_ID = "11111111-1111-1111-1111-111111111111"
SUB_DEV_ID = "22222222-2222-2222-2222-222222222222"


def make_resource(
    name: str,
    subscription_id: str = SUB_PROD_ID,
    type: str = "Microsoft.Compute/virtualMachines",
    location: str = "eastus",
    resource_group: str = "rg-app",
    tags=None,
    subscription_name=None,
) -> Resource:
    return Resource(
        id=f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}/providers/{type}/{name}",
        name=name,
        type=type,
        resource_group=resource_group,
        location=location,
        subscription_id=subscription_id,
        subscription_name=subscription_name,
        tags=dict(tags or {}),
    )


@pytest.fixture
def subscriptions() -> List[Subscription]:
    return [
        Subscription(id=SUB_PROD_ID, name="Production", state="Enabled", is_default=True),
        Subscription(id=SUB_DEV_ID, name="Development", state="Enabled", is_default=False),
    ]


@pytest.fixture
def prod_resources() -> List[Resource]:
    return [
        make_resource("vm-web", tags={"env": "prod"}),
        make_resource(
            "stprodlogs",
            type="Microsoft.Storage/storageAccounts",
            location="westeurope",
            resource_group="rg-data",
        ),
    ]


@pytest.fixture
def dev_resources() -> List[Resource]:
    return [
        make_resource("vm-dev", subscription_id=SUB_DEV_ID, tags={"env": "dev"}),
    ]


@pytest.fixture
def gateway(subscriptions, prod_resources, dev_resources):
    """Gateway double whose bulk query is unavailable (empty first page)."""
    by_sub = {SUB_PROD_ID: prod_resources, SUB_DEV_ID: dev_resources}

    async def _list_resources(subscription_id, subscription_name):
        return [
            Resource.from_dict(r.to_dict(), subscription_name=subscription_name)
            for r in by_sub[subscription_id]
        ]

    gw = MagicMock()
    gw.check_availability = AsyncMock(return_value=CliStatus(installed=True, logged_in=True))
    gw.list_subscriptions = AsyncMock(return_value=list(subscriptions))
    gw.list_resources = AsyncMock(side_effect=_list_resources)
    gw.query_resource_page = AsyncMock(return_value=GraphPage(resources=[]))
    gw.set_default_subscription = AsyncMock(return_value=None)
    return gw


@pytest.fixture
def store(tmp_path) -> JsonFileItemStore:
    return JsonFileItemStore(str(tmp_path / "state"))
