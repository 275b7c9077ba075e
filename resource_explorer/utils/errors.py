"""
Error taxonomy for the Resource Explorer service.

Every surfaced error carries a short ``title`` and an actionable ``hint`` so
the HTTP layer can render a blocking message without knowing the cause.

    ResourceExplorerError
    ├── UnavailableError       Azure CLI not installed / not on PATH
    ├── UnauthenticatedError   CLI present but no login session
    ├── GatewayError           a specific CLI or graph command failed
    └── CorruptStateError      persisted blob unparsable (recovered, never surfaced)
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class ResourceExplorerError(Exception):
    """Base class for all explorer errors."""

    title = "Operation failed"
    hint = ""

    def __init__(
        self,
        message: str = "",
        title: Optional[str] = None,
        hint: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message or self.title)
        self.message = message or self.title
        if title is not None:
            self.title = title
        if hint is not None:
            self.hint = hint
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Serialise for API error payloads."""
        return {
            "type": type(self).__name__,
            "title": self.title,
            "hint": self.hint,
            "message": self.message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class UnavailableError(ResourceExplorerError):
    title = "Azure CLI is not installed"
    hint = "Install it with `brew install azure-cli` or see https://aka.ms/installazurecli"


class UnauthenticatedError(ResourceExplorerError):
    title = "Azure CLI is not logged in"
    hint = "Run `az login` in a terminal"


class GatewayError(ResourceExplorerError):
    title = "Azure command failed"
    hint = "Check your network connection and permissions, then retry"

    def __init__(
        self,
        message: str = "",
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.command = list(command or [])
        self.returncode = returncode

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.command:
            payload["command"] = " ".join(self.command)
        if self.returncode is not None:
            payload["returncode"] = self.returncode
        return payload


class CorruptStateError(ResourceExplorerError):
    title = "Stored data is unreadable"
    hint = "The stored list will be reset"
