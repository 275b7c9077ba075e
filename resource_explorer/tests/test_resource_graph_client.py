"""
Test suite for ResourceGraphQueryClient with a mocked Resource Graph SDK client.
"""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from resource_explorer.utils.errors import GatewayError
from resource_explorer.utils.resource_graph_client import ResourceGraphQueryClient

from .conftest import SUB_DEV_ID, SUB_PROD_ID

pytestmark = [pytest.mark.unit]


@pytest.fixture
def graph_client():
    client = ResourceGraphQueryClient(credential=MagicMock(), page_size=2)
    client._graph_client = MagicMock()
    return client


class TestQueryPage:
    async def test_builds_request_and_parses_rows(self, graph_client):
        response = MagicMock()
        response.data = [{
            "id": f"/subscriptions/{SUB_PROD_ID}/resourceGroups/rg/providers/Microsoft.Sql/servers/sql1",
            "name": "sql1",
            "type": "microsoft.sql/servers",
            "resourceGroup": "rg",
            "location": "eastus",
            "subscriptionId": SUB_PROD_ID,
            "tags": {"env": "prod"},
        }]
        response.skip_token = "next"
        graph_client._graph_client.resources.return_value = response

        page = await graph_client.query_page([SUB_PROD_ID, SUB_DEV_ID])

        request = graph_client._graph_client.resources.call_args.args[0]
        assert request.subscriptions == [SUB_PROD_ID, SUB_DEV_ID]
        assert request.options.top == 2
        assert request.options.result_format == "objectArray"
        assert page.skip_token == "next"
        assert page.resources[0].subscription_id == SUB_PROD_ID
        assert page.resources[0].tags == {"env": "prod"}

    async def test_passes_skip_token(self, graph_client):
        response = MagicMock(data=[], skip_token=None)
        graph_client._graph_client.resources.return_value = response

        page = await graph_client.query_page([SUB_PROD_ID], skip_token="abc")

        request = graph_client._graph_client.resources.call_args.args[0]
        assert request.options.skip_token == "abc"
        assert page.resources == []
        assert page.skip_token is None

    async def test_sdk_error_wrapped(self, graph_client):
        graph_client._graph_client.resources.side_effect = RuntimeError("BadRequest")
        with pytest.raises(GatewayError, match="BadRequest"):
            await graph_client.query_page([SUB_PROD_ID])
