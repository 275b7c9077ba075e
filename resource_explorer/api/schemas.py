"""
Request / response models shared by the API routers
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..utils.models import Resource


class StandardResponse(BaseModel):
    """Uniform API response envelope."""
    success: bool = True
    data: Any = None
    error: Optional[Dict[str, Any]] = None
    message: Optional[str] = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    duration_ms: Optional[float] = None


class ResourcePayload(BaseModel):
    """Resource as sent by clients (camelCase, like the CLI output)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    type: str
    resource_group: str = Field(alias="resourceGroup")
    location: str
    subscription_id: str = Field(alias="subscriptionId")
    subscription_name: Optional[str] = Field(None, alias="subscriptionName")
    tags: Optional[Dict[str, str]] = None

    def to_resource(self) -> Resource:
        return Resource(
            id=self.id,
            name=self.name,
            type=self.type,
            resource_group=self.resource_group,
            location=self.location,
            subscription_id=self.subscription_id,
            subscription_name=self.subscription_name,
            tags=dict(self.tags or {}),
        )


class SelectRequest(BaseModel):
    """Body for changing the browsing scope; null returns to the landing view."""
    subscription_id: Optional[str] = Field(
        None, description="Subscription to browse, or null for all subscriptions",
    )
