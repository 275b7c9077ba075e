"""FastAPI dependencies resolving the process services."""
from __future__ import annotations

from ..utils.services import ExplorerServices, get_services


async def services_dependency() -> ExplorerServices:
    return get_services()


async def ensure_cli_ready(services: ExplorerServices) -> None:
    """Raise UnavailableError / UnauthenticatedError before any data operation."""
    status = await services.gateway.check_availability()
    status.raise_for_status()
