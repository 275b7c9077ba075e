"""
Data models shared by the gateway, aggregator, search engine and stores.

All models are read-only value snapshots. ``Resource.id`` is the natural key
for equality, deduplication and favorite / history membership.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import UnauthenticatedError, UnavailableError


@dataclass(frozen=True)
class Subscription:
    """Azure subscription as reported by ``az account list``."""
    id: str
    name: str
    state: str
    is_default: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subscription":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            state=data.get("state", ""),
            is_default=bool(data.get("isDefault", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "state": self.state,
            "isDefault": self.is_default,
        }


@dataclass
class Resource:
    """Azure resource snapshot.

    Field names follow Python conventions; ``from_dict``/``to_dict`` speak
    the camelCase wire format used by the CLI, Resource Graph and the
    persisted history / favorites blobs.
    """
    id: str
    name: str
    type: str
    resource_group: str
    location: str
    subscription_id: str
    subscription_name: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        subscription_id: Optional[str] = None,
        subscription_name: Optional[str] = None,
    ) -> "Resource":
        """Build a resource from a CLI / graph row or a persisted record.

        Explicit ``subscription_id``/``subscription_name`` win over values in
        ``data``; a null ``tags`` value becomes an empty mapping.
        """
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            type=data.get("type") or "",
            resource_group=data.get("resourceGroup") or "",
            location=data.get("location") or "",
            subscription_id=subscription_id or data.get("subscriptionId") or "",
            subscription_name=subscription_name or data.get("subscriptionName"),
            tags=dict(data.get("tags") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "resourceGroup": self.resource_group,
            "location": self.location,
            "subscriptionId": self.subscription_id,
            "tags": dict(self.tags),
        }
        if self.subscription_name is not None:
            payload["subscriptionName"] = self.subscription_name
        return payload

    @property
    def short_type(self) -> str:
        """Last segment of the provider type, e.g. ``virtualMachines``."""
        return self.type.rsplit("/", 1)[-1] if self.type else self.type


@dataclass
class HistoryEntry:
    """One access event; ``accessed_at`` is epoch milliseconds."""
    resource: Resource
    accessed_at: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            resource=Resource.from_dict(data["resource"]),
            accessed_at=int(data["accessedAt"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"resource": self.resource.to_dict(), "accessedAt": self.accessed_at}


@dataclass(frozen=True)
class CliStatus:
    """Result of the CLI availability / login check."""
    installed: bool
    logged_in: bool

    @property
    def ready(self) -> bool:
        return self.installed and self.logged_in

    def raise_for_status(self) -> None:
        """Raise the blocking error matching this status, if any."""
        if not self.installed:
            raise UnavailableError("Azure CLI executable was not found")
        if not self.logged_in:
            raise UnauthenticatedError("`az account show` reported no active session")

    def to_dict(self) -> Dict[str, bool]:
        return {"installed": self.installed, "loggedIn": self.logged_in}


@dataclass
class GraphPage:
    """One page of a Resource Graph query."""
    resources: List[Resource]
    skip_token: Optional[str] = None
