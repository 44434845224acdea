"""
logging.py - Process-wide logging configuration

Structured logging on top of structlog, rendered as one line per event:

    2024-01-21 10:30:45 [INFO    ] commit_mcp.cli: Started git-commit-mcp MCP server repo=/work/app
    2024-01-21 10:30:46 [WARNING ] commit_mcp.git.runner: git command failed error=not a git repository

Everything is written to stderr. stdout is reserved for the stdio transport,
so a stray log line there would corrupt the JSON-RPC stream.

Usage:
    from commit_mcp.config.logging import configure_logging, get_logger
    configure_logging(level="INFO")
    logger = get_logger("commit_mcp.git")
    logger.info("Reading staged diff", cwd=str(repo))
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import Any

import structlog


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    DIM = "\033[2m"
    BOLD = "\033[1m"
    REVERSE = "\033[7m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BRIGHT_BLACK = "\033[90m"


LOG_COLORS = {
    "DEBUG": f"{Colors.BRIGHT_BLACK}{Colors.DIM}",
    "INFO": Colors.GREEN,
    "WARNING": Colors.YELLOW,
    "ERROR": f"{Colors.RED}{Colors.BOLD}",
    "CRITICAL": f"{Colors.RED}{Colors.BOLD}{Colors.REVERSE}",
}

# Keys rendered in the line prefix, never repeated as key=value pairs
_RESERVED_KEYS = ("logger", "logger_name", "event", "level", "timestamp", "_colors")


def format_log(_logger: Any, method_name: str, event_dict: dict[str, Any]) -> str:
    """structlog renderer producing a single colored or plain line."""
    colors = event_dict.pop("_colors", None)
    if colors is None:
        colors = _force_colors

    msg = str(event_dict.get("event", ""))
    if colors:
        return _format_rich(method_name, msg, event_dict)
    return _format_plain(method_name, msg, event_dict)


def _extra_items(data: dict[str, Any]) -> list[tuple[str, Any]]:
    return [(k, v) for k, v in data.items() if k not in _RESERVED_KEYS]


def _format_rich(level: str, msg: str, data: dict[str, Any]) -> str:
    level_upper = level.upper()
    color = LOG_COLORS.get(level_upper, "")
    timestamp = data.get("timestamp") or datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    parts = [
        f"{Colors.BRIGHT_BLACK}{timestamp}{Colors.RESET}",
        f"{color}[{level_upper:<8}]{Colors.RESET}",
    ]
    logger_name = data.get("logger", "") or data.get("logger_name", "")
    if logger_name:
        parts.append(f"{Colors.CYAN}{logger_name}:{Colors.RESET}")
    parts.append(msg)

    for key, value in _extra_items(data):
        parts.append(f"{Colors.MAGENTA}{key}={Colors.RESET}{Colors.GREEN}{value}{Colors.RESET}")

    return " ".join(parts)


def _format_plain(level: str, msg: str, data: dict[str, Any]) -> str:
    timestamp = data.get("timestamp") or datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    parts = [f"{timestamp} [{level.upper():<8}]"]

    logger_name = data.get("logger", "") or data.get("logger_name", "")
    if logger_name:
        parts.append(f"{logger_name}:")
    parts.append(msg)

    extra = _extra_items(data)
    if extra:
        parts.append(" ".join(f"{k}={v}" for k, v in extra))

    return " ".join(parts)


class SubprocessLogFilter(logging.Filter):
    """Drop raw Popen debug chatter emitted by third-party libraries."""

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        return "Popen(['git'" not in msg and "subprocess.Popen" not in msg


class _SafeStreamHandler(logging.StreamHandler):
    """StreamHandler that ignores writes to a stream closed during shutdown."""

    def emit(self, record: logging.LogRecord) -> None:
        stream = self.stream
        if stream is not None and getattr(stream, "closed", False):
            return
        super().emit(record)


def _quiet_third_party(level: int) -> None:
    noisy = [
        ("mcp", logging.WARNING if level > logging.DEBUG else logging.INFO),
        ("mcp.server.lowlevel.server", logging.WARNING),
        ("uvicorn", logging.WARNING),
        ("uvicorn.access", logging.WARNING),
        ("sse_starlette", logging.WARNING),
        ("httpx", logging.WARNING),
    ]
    for logger_name, log_lvl in noisy:
        logging.getLogger(logger_name).setLevel(log_lvl)


_configured = False
_force_colors = False
_level = logging.INFO


def configure_logging(
    level: str = "INFO",
    colors: bool | None = None,
    verbose: bool = False,
    force: bool = False,
) -> None:
    """Configure stdlib logging and structlog.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        colors: Enable ANSI colors. If None, auto-detect from stderr TTY.
        verbose: Shortcut for DEBUG level.
        force: Reconfigure even if logging was already configured.
    """
    global _configured, _force_colors, _level

    if _configured and not force:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)
    if verbose:
        log_level = logging.DEBUG
    _level = log_level

    if colors is None:
        colors = sys.stderr.isatty()
    _force_colors = colors

    root_logger = logging.getLogger()
    root_logger.handlers = []

    handler = _SafeStreamHandler(sys.stderr)
    handler.addFilter(SubprocessLogFilter())
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            format_log,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    _quiet_third_party(log_level)
    _configured = True


def get_logger(name: str = "commit_mcp") -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to ``name``."""
    return structlog.get_logger(name)


def is_verbose() -> bool:
    return _level <= logging.DEBUG


__all__ = [
    "Colors",
    "configure_logging",
    "format_log",
    "get_logger",
    "is_verbose",
]
