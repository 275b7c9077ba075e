"""
Resource Aggregator

Supplies resource collections for one subscription or for every known
subscription. The cross-subscription path tries a single paginated Resource
Graph query first and falls back to fetching subscriptions one at a time.

Key behaviours:
- Bulk query errors, or zero pages for a non-empty subscription set, mean
  "bulk unavailable" and trigger the fallback
- During the fallback a failing subscription contributes no resources; the
  aggregation as a whole does not fail
- Every aggregated resource is annotated with its subscription display name
- The "all resources" result is computed at most once per session through
  ``AggregationCache``
"""
from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from .aggregation_cache import AggregationCache
from .logger import get_logger
from .models import GraphPage, Resource, Subscription

logger = get_logger(__name__)


class FetchStrategy(str, enum.Enum):
    BULK = "bulk"
    FALLBACK = "fallback"
    FAILED = "failed"


@dataclass
class FetchOutcome:
    """Tagged result of one aggregation strategy."""
    strategy: FetchStrategy
    resources: List[Resource] = field(default_factory=list)
    page_count: int = 0
    failed_subscriptions: List[str] = field(default_factory=list)


def bulk_unavailable(page_count: int, subscription_count: int) -> bool:
    """Zero pages for a non-empty subscription set means the bulk path is unusable.

    This cannot tell "no resources anywhere" apart from "graph service not
    provisioned"; both route to the per-subscription fallback.
    """
    return subscription_count > 0 and page_count == 0


def _annotate(resources: List[Resource], names: Dict[str, str]) -> List[Resource]:
    for res in resources:
        name = names.get(res.subscription_id.lower())
        if name is not None:
            res.subscription_name = name
    return resources


class ResourceAggregator:
    """Orchestrates subscription / resource retrieval over a gateway.

    Usage::

        aggregator = ResourceAggregator(get_azure_cli_executor())
        subs = await aggregator.list_subscriptions()
        everything = await aggregator.get_all_resources()
    """

    def __init__(self, gateway: Any, cache: Optional[AggregationCache] = None):
        self._gateway = gateway
        self._cache = cache or AggregationCache()
        self._subscriptions: Optional[List[Subscription]] = None
        self._last_strategy: Optional[FetchStrategy] = None

    @property
    def cache(self) -> AggregationCache:
        return self._cache

    @property
    def subscriptions(self) -> Optional[List[Subscription]]:
        """Last fetched subscription list with locally mirrored default flag."""
        return self._subscriptions

    @property
    def last_strategy(self) -> Optional[FetchStrategy]:
        return self._last_strategy

    # -- single-scope operations --------------------------------------------

    async def list_subscriptions(self) -> List[Subscription]:
        """Fetch subscriptions. Raises GatewayError on transport/auth failure."""
        self._subscriptions = await self._gateway.list_subscriptions()
        return list(self._subscriptions)

    def _subscription_name(self, subscription_id: str) -> str:
        for sub in self._subscriptions or []:
            if sub.id == subscription_id:
                return sub.name
        return subscription_id

    async def list_resources(
        self,
        subscription_id: str,
        subscription_name: Optional[str] = None,
    ) -> List[Resource]:
        """Fetch one subscription's resources; GatewayError propagates, no partial result."""
        name = subscription_name or self._subscription_name(subscription_id)
        resources = await self._gateway.list_resources(subscription_id, name)
        logger.info("Fetched %d resources for subscription %s", len(resources), name)
        return resources

    async def set_default_subscription(self, subscription_id: str) -> List[Subscription]:
        """Issue the default change, then mirror the flag in the local list only."""
        await self._gateway.set_default_subscription(subscription_id)
        if self._subscriptions is not None:
            self._subscriptions = [
                replace(sub, is_default=sub.id == subscription_id)
                for sub in self._subscriptions
            ]
        return list(self._subscriptions or [])

    # -- cross-subscription aggregation -------------------------------------

    async def _fetch_bulk(self, subscriptions: List[Subscription]) -> FetchOutcome:
        ids = [sub.id for sub in subscriptions]
        resources: List[Resource] = []
        page_count = 0
        skip_token: Optional[str] = None

        try:
            while True:
                page: GraphPage = await self._gateway.query_resource_page(ids, skip_token)
                if page.resources:
                    page_count += 1
                    resources.extend(page.resources)
                skip_token = page.skip_token
                if not skip_token:
                    break
        except Exception as exc:
            logger.warning("Bulk resource query failed, falling back: %s", exc)
            return FetchOutcome(FetchStrategy.FAILED)

        if bulk_unavailable(page_count, len(subscriptions)):
            logger.info("Bulk resource query returned no pages, falling back")
            return FetchOutcome(FetchStrategy.FAILED)

        return FetchOutcome(FetchStrategy.BULK, resources=resources, page_count=page_count)

    async def _fetch_fallback(self, subscriptions: List[Subscription]) -> FetchOutcome:
        outcome = FetchOutcome(FetchStrategy.FALLBACK)
        for sub in subscriptions:
            try:
                resources = await self._gateway.list_resources(sub.id, sub.name)
            except Exception as exc:
                logger.warning(
                    "Skipping subscription %s (%s): %s", sub.name, sub.id, exc,
                )
                outcome.failed_subscriptions.append(sub.id)
                continue
            outcome.resources.extend(resources)
        return outcome

    async def aggregate_all(self, subscriptions: List[Subscription]) -> List[Resource]:
        """Every resource across ``subscriptions``; never raises for per-subscription failures."""
        if not subscriptions:
            return []

        start = time.time()
        outcome = await self._fetch_bulk(subscriptions)
        if outcome.strategy is FetchStrategy.FAILED:
            outcome = await self._fetch_fallback(subscriptions)

        self._last_strategy = outcome.strategy
        names = {sub.id.lower(): sub.name for sub in subscriptions}
        resources = _annotate(outcome.resources, names)

        logger.info(
            "Aggregated %d resources from %d subscriptions via %s in %.1fs (%d failed)",
            len(resources), len(subscriptions), outcome.strategy.value,
            time.time() - start, len(outcome.failed_subscriptions),
        )
        return resources

    async def _load_all(self) -> List[Resource]:
        subscriptions = self._subscriptions
        if subscriptions is None:
            subscriptions = await self.list_subscriptions()
        return await self.aggregate_all(subscriptions)

    async def get_all_resources(self) -> List[Resource]:
        """Session-cached ``aggregate_all`` over the known subscriptions."""
        return await self._cache.get_or_load(self._load_all)
