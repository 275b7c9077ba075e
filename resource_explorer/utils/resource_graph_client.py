"""
Azure Resource Graph bulk query.

Issues one KQL query spanning many subscriptions and returns it page by
page. Authentication reuses the Azure CLI login through
``AzureCliCredential`` so no extra credentials are needed.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from azure.identity import AzureCliCredential
from azure.mgmt.resourcegraph import ResourceGraphClient
from azure.mgmt.resourcegraph.models import QueryRequest, QueryRequestOptions

from .config import config
from .errors import GatewayError
from .logger import get_logger
from .models import GraphPage, Resource

logger = get_logger(__name__)

RESOURCES_QUERY = (
    "Resources\n"
    "| project id, name, type, resourceGroup, location, subscriptionId, tags\n"
    "| order by name asc"
)


class ResourceGraphQueryClient:
    """Thin paging wrapper around ``ResourceGraphClient.resources``."""

    def __init__(self, credential=None, page_size: Optional[int] = None):
        self._credential = credential
        self._page_size = page_size or config.explorer.graph_page_size
        self._graph_client: Optional[ResourceGraphClient] = None

    def _get_graph_client(self) -> ResourceGraphClient:
        if self._graph_client is None:
            if self._credential is None:
                self._credential = AzureCliCredential()
            self._graph_client = ResourceGraphClient(self._credential)
        return self._graph_client

    def _build_request(self, subscription_ids: List[str], skip_token: Optional[str]) -> QueryRequest:
        options = QueryRequestOptions(result_format="objectArray", top=self._page_size)
        if skip_token:
            options.skip_token = skip_token
        return QueryRequest(
            subscriptions=subscription_ids,
            query=RESOURCES_QUERY,
            options=options,
        )

    async def query_page(
        self,
        subscription_ids: List[str],
        skip_token: Optional[str] = None,
    ) -> GraphPage:
        """Fetch one page of resources across ``subscription_ids``.

        Raises:
            GatewayError: the graph service rejected or failed the request.
        """
        request = self._build_request(subscription_ids, skip_token)

        try:
            graph_client = self._get_graph_client()
            # Resource Graph SDK calls are synchronous; run in executor
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(None, graph_client.resources, request)
        except Exception as exc:
            raise GatewayError(
                f"Resource Graph query failed: {exc}",
                command=["resourcegraph", "resources"],
                cause=exc,
            ) from exc

        rows: List[Dict[str, Any]] = getattr(response, "data", None) or []
        resources = [Resource.from_dict(row) for row in rows if row.get("id")]
        next_token = getattr(response, "skip_token", None)
        logger.debug(
            "Resource Graph page: %d rows, more=%s", len(resources), bool(next_token),
        )
        return GraphPage(resources=resources, skip_token=next_token)
