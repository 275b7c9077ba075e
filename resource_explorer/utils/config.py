"""
Centralized configuration management for the Resource Explorer service
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class AppConfig:
    """Application configuration"""
    title: str = "Azure Resource Explorer"
    version: str = "1.0.0"
    log_level: str = "INFO"
    debug_mode: bool = False


@dataclass
class CliConfig:
    """Azure CLI invocation settings"""
    executable: str = "az"
    # Prepended to PATH so GUI-launched processes still find Homebrew installs
    extra_path: List[str] = field(default_factory=lambda: [
        "/opt/homebrew/bin",
        "/usr/local/bin",
        "/usr/bin",
        "/bin",
    ])
    timeout: int = 120

    def build_env(self) -> Dict[str, str]:
        """Return a copy of the process environment with the extended PATH."""
        env = dict(os.environ)
        current = env.get("PATH", "")
        env["PATH"] = ":".join(self.extra_path + ([current] if current else []))
        return env


@dataclass
class ExplorerConfig:
    """Search, history and favorites settings"""
    state_dir: str = field(
        default_factory=lambda: str(Path.home() / ".resource-explorer")
    )
    history_key: str = "azure-resource-history"
    favorites_key: str = "azure-resource-favorites"
    history_max_items: int = 50
    recent_history_items: int = 5
    search_result_limit: int = 50
    graph_page_size: int = 1000
    graph_query_enabled: bool = True
    portal_base_url: str = "https://portal.azure.com/#@/resource"


class ConfigManager:
    """Centralized configuration manager"""

    def __init__(self):
        self._app_config: Optional[AppConfig] = None
        self._cli_config: Optional[CliConfig] = None
        self._explorer_config: Optional[ExplorerConfig] = None

    @property
    def app(self) -> AppConfig:
        """Get application configuration"""
        if self._app_config is None:
            self._app_config = AppConfig(
                title=os.getenv("APP_TITLE", "Azure Resource Explorer"),
                version=os.getenv("APP_VERSION", "1.0.0"),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
                debug_mode=os.getenv("DEBUG_MODE", "false").lower() == "true",
            )
        return self._app_config

    @property
    def cli(self) -> CliConfig:
        """Get Azure CLI configuration"""
        if self._cli_config is None:
            cli = CliConfig()

            executable = os.getenv("AZ_CLI_PATH")
            if executable:
                cli.executable = executable

            timeout = os.getenv("AZ_CLI_TIMEOUT")
            if timeout is not None:
                cli.timeout = int(timeout)

            self._cli_config = cli
        return self._cli_config

    @property
    def explorer(self) -> ExplorerConfig:
        """Get explorer configuration"""
        if self._explorer_config is None:
            exp = ExplorerConfig()

            state_dir = os.getenv("RESOURCE_EXPLORER_STATE_DIR")
            if state_dir:
                exp.state_dir = state_dir

            max_items = os.getenv("HISTORY_MAX_ITEMS")
            if max_items is not None:
                exp.history_max_items = int(max_items)

            limit = os.getenv("SEARCH_RESULT_LIMIT")
            if limit is not None:
                exp.search_result_limit = int(limit)

            page_size = os.getenv("GRAPH_PAGE_SIZE")
            if page_size is not None:
                exp.graph_page_size = int(page_size)

            graph_enabled = os.getenv("GRAPH_QUERY_ENABLED")
            if graph_enabled is not None:
                exp.graph_query_enabled = graph_enabled.lower() == "true"

            self._explorer_config = exp
        return self._explorer_config

    def reload(self) -> None:
        """Drop cached sections so the next access re-reads the environment."""
        self._app_config = None
        self._cli_config = None
        self._explorer_config = None

    def get_environment_summary(self) -> Dict[str, Any]:
        """Summarise the effective settings for startup logging."""
        return {
            "az_cli": self.cli.executable,
            "state_dir": self.explorer.state_dir,
            "graph_query": "enabled" if self.explorer.graph_query_enabled else "disabled",
            "history_max_items": self.explorer.history_max_items,
        }


config = ConfigManager()
