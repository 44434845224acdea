"""
commit_mcp.config - Logging and settings.
"""

from .logging import configure_logging, get_logger
from .settings import Settings, get_setting, get_settings, set_configuration_directory

__all__ = [
    "Settings",
    "configure_logging",
    "get_logger",
    "get_setting",
    "get_settings",
    "set_configuration_directory",
]
