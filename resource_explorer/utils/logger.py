"""
Centralized logging configuration for the Resource Explorer service
"""
import logging
import os
import sys
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """Custom formatter to add colors to log messages"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record):
        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def setup_logger(name: str, level: str = "INFO") -> logging.Logger:
    """
    Set up a logger with consistent formatting

    Args:
        name: Logger name (typically __name__)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    # Hosted containers collect stderr, so keep the output plain there
    is_app_service = os.environ.get('WEBSITE_SITE_NAME') is not None
    is_container_app = os.environ.get('CONTAINER_APP_NAME') is not None
    use_plain_formatter = is_app_service or is_container_app

    if use_plain_formatter:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter(
            '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        handler = logging.StreamHandler(sys.stdout)
        formatter = ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    handler.setLevel(numeric_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        root_logger.addHandler(handler)
    else:
        for existing_handler in root_logger.handlers:
            existing_handler.setLevel(numeric_level)
            if use_plain_formatter:
                existing_handler.setFormatter(formatter)
    root_logger.setLevel(numeric_level)

    # Quiet chatty dependency loggers unless explicitly overridden
    noisy_loggers = {
        "azure.core": os.getenv("AZURE_CORE_LOG_LEVEL", "WARNING"),
        "azure.core.pipeline.policies.http_logging_policy": os.getenv("AZURE_HTTP_LOG_LEVEL", "WARNING"),
        "azure.identity": os.getenv("AZURE_IDENTITY_LOG_LEVEL", "WARNING"),
        "httpx": os.getenv("HTTPX_LOG_LEVEL", "WARNING"),
        "urllib3.connectionpool": os.getenv("URLLIB3_LOG_LEVEL", "WARNING"),
    }
    for noisy_name, override_level in noisy_loggers.items():
        logging.getLogger(noisy_name).setLevel(
            getattr(logging, override_level.upper(), logging.WARNING)
        )

    logger.handlers.clear()
    logger.setLevel(numeric_level)
    logger.propagate = True

    for app_logger_name in (
        "resource_explorer.utils.resource_aggregator",
        "resource_explorer.utils.azure_cli_executor",
        "resource_explorer.utils.search_session",
    ):
        logging.getLogger(app_logger_name).setLevel(numeric_level)

    return logger


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get or create a logger instance

    Args:
        name: Logger name
        level: Optional log level override

    Returns:
        Logger instance
    """
    if level:
        return setup_logger(name, level)
    return logging.getLogger(name)
