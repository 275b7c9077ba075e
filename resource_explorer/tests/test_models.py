"""
Test suite for model parsing and the error taxonomy.
"""
from __future__ import annotations

import pytest

from resource_explorer.utils.errors import (
    GatewayError,
    UnauthenticatedError,
    UnavailableError,
)
from resource_explorer.utils.models import CliStatus, HistoryEntry, Resource, Subscription

pytestmark = [pytest.mark.unit]


class TestResource:
    def test_from_cli_row(self):
        res = Resource.from_dict(
            {
                "id": "/subscriptions/s/resourceGroups/rg/providers/Microsoft.Web/sites/app",
                "name": "app",
                "type": "Microsoft.Web/sites",
                "resourceGroup": "rg",
                "location": "eastus",
                "tags": None,
            },
            subscription_id="s",
            subscription_name="Sub",
        )
        assert res.subscription_id == "s"
        assert res.subscription_name == "Sub"
        assert res.tags == {}
        assert res.short_type == "sites"

    def test_to_dict_omits_missing_subscription_name(self):
        res = Resource("id", "n", "t", "rg", "loc", "s")
        assert "subscriptionName" not in res.to_dict()

    def test_missing_id_raises(self):
        with pytest.raises(KeyError):
            Resource.from_dict({"name": "x"})


class TestHistoryEntry:
    def test_wire_format(self):
        entry = HistoryEntry(Resource("id", "n", "t", "rg", "loc", "s"), accessed_at=42)
        assert entry.to_dict()["accessedAt"] == 42
        assert HistoryEntry.from_dict(entry.to_dict()) == entry


class TestSubscription:
    def test_from_dict(self):
        sub = Subscription.from_dict({"id": "s", "name": "Prod", "state": "Enabled", "isDefault": True})
        assert sub.is_default
        assert sub.to_dict()["isDefault"] is True


class TestCliStatus:
    def test_not_installed_raises_unavailable(self):
        with pytest.raises(UnavailableError):
            CliStatus(installed=False, logged_in=False).raise_for_status()

    def test_not_logged_in_raises_unauthenticated(self):
        with pytest.raises(UnauthenticatedError):
            CliStatus(installed=True, logged_in=False).raise_for_status()

    def test_ready_does_not_raise(self):
        CliStatus(installed=True, logged_in=True).raise_for_status()


class TestErrors:
    def test_gateway_error_payload(self):
        err = GatewayError("failed", command=["az", "account", "list"], returncode=2)
        payload = err.to_dict()
        assert payload["type"] == "GatewayError"
        assert payload["command"] == "az account list"
        assert payload["returncode"] == 2
        assert payload["title"] and payload["hint"]

    def test_title_override(self):
        err = UnavailableError("missing", title="Custom")
        assert err.title == "Custom"
        assert UnavailableError.title != "Custom"
