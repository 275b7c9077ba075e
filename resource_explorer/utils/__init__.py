"""
Utility package for the Resource Explorer service
"""
from .logger import setup_logger, get_logger
from .config import config, ConfigManager
from .errors import (
    ResourceExplorerError,
    UnavailableError,
    UnauthenticatedError,
    GatewayError,
    CorruptStateError,
)
from .models import Subscription, Resource, HistoryEntry, CliStatus, GraphPage

__all__ = [
    "setup_logger",
    "get_logger",
    "config",
    "ConfigManager",
    "ResourceExplorerError",
    "UnavailableError",
    "UnauthenticatedError",
    "GatewayError",
    "CorruptStateError",
    "Subscription",
    "Resource",
    "HistoryEntry",
    "CliStatus",
    "GraphPage",
]
