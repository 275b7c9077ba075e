"""Azure CLI gateway.

Runs ``az`` commands with JSON output and converts them into typed records.
This is the only component that touches the external CLI; availability and
login detection live here too.
"""
from __future__ import annotations

import asyncio
import json
import subprocess
from typing import Any, List, Optional

from .config import CliConfig, config
from .errors import GatewayError
from .logger import get_logger
from .models import CliStatus, GraphPage, Resource, Subscription
from .resource_graph_client import ResourceGraphQueryClient

logger = get_logger(__name__)


def build_portal_url(resource_id: str, base_url: Optional[str] = None) -> str:
    """Return the Azure Portal deep link for ``resource_id``."""
    return f"{base_url or config.explorer.portal_base_url}{resource_id}"


class AzureCLIExecutor:
    """Azure CLI executor.

    Usage:
        executor = get_azure_cli_executor()
        subscriptions = await executor.list_subscriptions()
    """

    def __init__(
        self,
        cli_config: Optional[CliConfig] = None,
        graph_client: Optional[ResourceGraphQueryClient] = None,
        graph_enabled: Optional[bool] = None,
    ):
        self._cli = cli_config or config.cli
        self._graph_client = graph_client
        self._graph_enabled = (
            config.explorer.graph_query_enabled if graph_enabled is None else graph_enabled
        )

    # -- process helpers ----------------------------------------------------

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            [self._cli.executable, *args],
            capture_output=True,
            text=True,
            timeout=self._cli.timeout,
            env=self._cli.build_env(),
        )

    async def _run_async(self, args: List[str]) -> subprocess.CompletedProcess:
        # subprocess.run blocks; keep the event loop free while az runs
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._run, args)

    async def execute(self, args: List[str]) -> Any:
        """Run ``az <args> --output json`` and return the parsed output.

        Raises:
            GatewayError: non-zero exit, timeout, missing executable or
                output that is not JSON.
        """
        command = [self._cli.executable, *args, "--output", "json"]
        logger.debug("Executing Azure CLI: %s", " ".join(command))

        try:
            result = await self._run_async([*args, "--output", "json"])
        except subprocess.TimeoutExpired as exc:
            raise GatewayError(
                f"Command timed out after {self._cli.timeout} seconds",
                command=command,
                cause=exc,
            ) from exc
        except OSError as exc:
            raise GatewayError(str(exc), command=command, cause=exc) from exc

        if result.returncode != 0:
            error_msg = result.stderr.strip() or result.stdout.strip() or "Command failed"
            logger.warning("Azure CLI failed: %s", error_msg[:200])
            raise GatewayError(error_msg, command=command, returncode=result.returncode)

        output = result.stdout.strip()
        if not output:
            return None
        try:
            return json.loads(output)
        except json.JSONDecodeError as exc:
            raise GatewayError(
                f"Unexpected non-JSON output: {output[:200]}",
                command=command,
                cause=exc,
            ) from exc

    # -- availability -------------------------------------------------------

    async def check_availability(self) -> CliStatus:
        """Probe the CLI: installed = ``az --version``, logged in = ``az account show``."""
        try:
            version = await self._run_async(["--version"])
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.info("Azure CLI not available: %s", exc)
            return CliStatus(installed=False, logged_in=False)
        if version.returncode != 0:
            return CliStatus(installed=False, logged_in=False)

        try:
            account = await self._run_async(["account", "show"])
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.info("Azure CLI login check failed: %s", exc)
            return CliStatus(installed=True, logged_in=False)
        return CliStatus(installed=True, logged_in=account.returncode == 0)

    # -- directory operations -----------------------------------------------

    async def list_subscriptions(self) -> List[Subscription]:
        output = await self.execute(["account", "list"])
        subscriptions = [Subscription.from_dict(sub) for sub in output or []]
        logger.info("Listed %d subscriptions", len(subscriptions))
        return subscriptions

    async def list_resources(self, subscription_id: str, subscription_name: str) -> List[Resource]:
        output = await self.execute(["resource", "list", "--subscription", subscription_id])
        return [
            Resource.from_dict(
                raw,
                subscription_id=subscription_id,
                subscription_name=subscription_name,
            )
            for raw in output or []
        ]

    async def set_default_subscription(self, subscription_id: str) -> None:
        await self.execute(["account", "set", "--subscription", subscription_id])
        logger.info("Default subscription set to %s", subscription_id)

    async def query_resource_page(
        self,
        subscription_ids: List[str],
        skip_token: Optional[str] = None,
    ) -> GraphPage:
        """One page of the cross-subscription Resource Graph query."""
        if not self._graph_enabled:
            raise GatewayError("Resource Graph query is disabled by configuration")
        if self._graph_client is None:
            self._graph_client = ResourceGraphQueryClient()
        return await self._graph_client.query_page(subscription_ids, skip_token)

    def build_portal_url(self, resource_id: str) -> str:
        return build_portal_url(resource_id)


_executor_instance: Optional[AzureCLIExecutor] = None


def get_azure_cli_executor() -> AzureCLIExecutor:
    """Get the shared Azure CLI executor instance."""
    global _executor_instance
    if _executor_instance is None:
        _executor_instance = AzureCLIExecutor()
        logger.info("Azure CLI executor created")
    return _executor_instance
