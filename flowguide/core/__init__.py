"""Core application configuration and utilities.

This package contains core functionality including:
- Configuration management (config.py)
- Logging setup (logging.py)
"""

from flowguide.core.config import Settings, get_settings, settings
from flowguide.core.logging import LogContext, get_logger, setup_logging

__all__ = [
    "LogContext",
    "Settings",
    "get_logger",
    "get_settings",
    "settings",
    "setup_logging",
]
