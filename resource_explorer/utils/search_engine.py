"""
Search / filter engine.

Pure functions over a resource collection: literal case-insensitive
substring search across the displayed fields and the rendered tag string,
plus exact-match type and location filters. Input order is preserved.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from .models import Resource, Subscription

ALL_FILTER = "all"


@dataclass
class SearchResult:
    """Matches for one query; ``total`` counts every match even when capped."""
    items: List[Resource] = field(default_factory=list)
    total: int = 0

    @property
    def truncated(self) -> bool:
        return self.total > len(self.items)


def render_tags(tags: Optional[Dict[str, str]]) -> str:
    """``{"env": "prod", "team": "x"}`` -> ``"env: prod, team: x"``."""
    if not tags:
        return ""
    return ", ".join(f"{key}: {value}" for key, value in tags.items())


def searchable_fields(resource: Resource) -> List[str]:
    fields = [
        resource.name,
        resource.resource_group,
        resource.type,
        resource.location,
    ]
    if resource.subscription_name:
        fields.append(resource.subscription_name)
    tags = render_tags(resource.tags)
    if tags:
        fields.append(tags)
    return fields


def matches_text(resource: Resource, text: str) -> bool:
    if not text:
        return True
    needle = text.lower()
    # each field is matched on its own so a hit never spans two fields
    return any(needle in value.lower() for value in searchable_fields(resource))


def matches_filters(
    resource: Resource,
    type_filter: str = ALL_FILTER,
    location_filter: str = ALL_FILTER,
) -> bool:
    if type_filter != ALL_FILTER and resource.type != type_filter:
        return False
    if location_filter != ALL_FILTER and resource.location != location_filter:
        return False
    return True


def filter_resources(
    resources: Iterable[Resource],
    text: str = "",
    type_filter: str = ALL_FILTER,
    location_filter: str = ALL_FILTER,
) -> List[Resource]:
    """Return the resources matching ``text`` AND both filters, in input order."""
    return [
        res
        for res in resources
        if matches_text(res, text) and matches_filters(res, type_filter, location_filter)
    ]


def search(
    resources: Iterable[Resource],
    text: str = "",
    type_filter: str = ALL_FILTER,
    location_filter: str = ALL_FILTER,
    limit: Optional[int] = None,
) -> SearchResult:
    """Filter and optionally cap the matches to the first ``limit``."""
    matches = filter_resources(resources, text, type_filter, location_filter)
    items = matches if limit is None else matches[:limit]
    return SearchResult(items=items, total=len(matches))


def distinct_types(resources: Iterable[Resource]) -> List[str]:
    return sorted({res.type for res in resources})


def distinct_locations(resources: Iterable[Resource]) -> List[str]:
    return sorted({res.location for res in resources})


def filter_subscriptions(subscriptions: Sequence[Subscription], text: str) -> List[Subscription]:
    """Substring match on subscription name or id, used on the landing list."""
    if not text:
        return list(subscriptions)
    needle = text.lower()
    return [
        sub for sub in subscriptions
        if needle in sub.name.lower() or needle in sub.id.lower()
    ]
