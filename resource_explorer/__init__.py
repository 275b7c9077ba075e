"""Azure Resource Explorer: browse and search subscriptions and resources via the Azure CLI."""

__version__ = "1.0.0"
