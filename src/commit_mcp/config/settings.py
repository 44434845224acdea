"""
Settings - Layered configuration manager

Layers (later wins, dictionaries are deep-merged):
1. Built-in defaults (DEFAULT_SETTINGS).
2. User file: $PRJ_CONFIG_HOME/git-commit-mcp/settings.yaml
   (PRJ_CONFIG_HOME defaults to ~/.config).
3. Environment: GIT_COMMIT_MCP_<SECTION>__<KEY>, e.g. GIT_COMMIT_MCP_GIT__TIMEOUT=5.
   Values are parsed as YAML scalars, so "5" becomes 5 and "false" becomes False.

A `--conf DIR` flag on the command line (or set_configuration_directory())
points PRJ_CONFIG_HOME at DIR for this process.

Usage:
    from commit_mcp.config.settings import get_setting
    timeout = get_setting("git.timeout", 60)
"""

from __future__ import annotations

import copy
import os
import sys
import threading
from pathlib import Path
from typing import Any

import yaml

APP_NAME = "git-commit-mcp"
ENV_PREFIX = "GIT_COMMIT_MCP_"

DEFAULT_SETTINGS: dict[str, Any] = {
    "git": {
        "executable": "git",
        "timeout": 60,
        "max_output_bytes": 100 * 1024 * 1024,
        "unified_context": 10,
    },
    "diff": {
        "max_bytes": 200_000,
    },
    "summary": {
        "max_files": 10,
        "max_hunks_per_file": 3,
        "max_bytes": 100_000,
        "max_hunk_chars": 1000,
    },
    "server": {
        "name": APP_NAME,
        "max_concurrency": 4,
    },
    "logging": {
        "level": "INFO",
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursive merge; values in ``override`` replace values in ``base``."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def config_home() -> Path:
    """Resolve PRJ_CONFIG_HOME, falling back to ~/.config."""
    env_home = os.environ.get("PRJ_CONFIG_HOME")
    if env_home:
        return Path(env_home).expanduser()
    return Path.home() / ".config"


def set_configuration_directory(path: str | os.PathLike) -> None:
    """Point PRJ_CONFIG_HOME at ``path`` and drop any loaded settings."""
    os.environ["PRJ_CONFIG_HOME"] = str(Path(path).expanduser())
    Settings().reload()


class Settings:
    """
    Settings singleton with dot-notation access.

    Loading is lazy and thread-safe; call reload() after changing the
    environment or configuration directory.
    """

    _instance: Settings | None = None
    _instance_lock = threading.Lock()
    _loaded: bool = False

    def __new__(cls) -> Settings:
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        # __init__ runs on every Settings() call; keep loaded data
        if not hasattr(self, "_data"):
            self._data: dict[str, Any] = {}

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            with self._instance_lock:
                if not self._loaded:
                    self._load()
                    Settings._loaded = True

    def _parse_cli_conf(self) -> str | None:
        """Extract --conf from sys.argv without interfering with the CLI parser."""
        args = sys.argv
        for i, arg in enumerate(args):
            if arg == "--conf" and i + 1 < len(args):
                return args[i + 1]
            if arg.startswith("--conf="):
                return arg.split("=", 1)[1]
        return None

    def _load(self) -> None:
        cli_conf_dir = self._parse_cli_conf()
        if cli_conf_dir:
            os.environ["PRJ_CONFIG_HOME"] = str(Path(cli_conf_dir).expanduser())

        data = copy.deepcopy(DEFAULT_SETTINGS)

        user_path = self.settings_path
        if user_path.is_file():
            data = _deep_merge(data, self._read_yaml(user_path))

        self._data = _deep_merge(data, self._read_env())

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            # Logging may not be configured yet
            print(f"[{APP_NAME}] Ignoring unreadable settings file {path}: {e}", file=sys.stderr)
            return {}
        if not isinstance(loaded, dict):
            print(f"[{APP_NAME}] Ignoring settings file {path}: not a mapping", file=sys.stderr)
            return {}
        return loaded

    def _read_env(self) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for name, raw in os.environ.items():
            if not name.startswith(ENV_PREFIX):
                continue
            path = [part.lower() for part in name[len(ENV_PREFIX) :].split("__") if part]
            if not path:
                continue
            try:
                value = yaml.safe_load(raw)
            except yaml.YAMLError:
                value = raw
            node = overrides
            for part in path[:-1]:
                node = node.setdefault(part, {})
            node[path[-1]] = value
        return overrides

    @property
    def settings_path(self) -> Path:
        """Location of the user settings file."""
        return config_home() / APP_NAME / "settings.yaml"

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting value using dot notation (e.g. 'git.timeout')."""
        self._ensure_loaded()
        value: Any = self._data
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_int(self, key: str, default: int) -> int:
        """Get an integer setting, falling back to ``default`` on bad values."""
        value = self.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def reload(self) -> None:
        """Force reload settings."""
        with self._instance_lock:
            self._load()
            Settings._loaded = True


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value directly."""
    return Settings().get(key, default)


def get_settings() -> Settings:
    """Get the Settings singleton."""
    return Settings()


__all__ = [
    "APP_NAME",
    "DEFAULT_SETTINGS",
    "Settings",
    "config_home",
    "get_setting",
    "get_settings",
    "set_configuration_directory",
]
