"""
reader.py - Staged diff and staged file list

Both readers go through run_git_command() and never raise. An empty diff
means either "nothing staged" (error is None) or "git failed" (error set);
callers tell the two apart by the error field only.
"""

from __future__ import annotations

from pathlib import Path

from commit_mcp.api.types import ChangedFilesResult, DiffResult
from commit_mcp.config.logging import get_logger
from commit_mcp.config.settings import get_settings

from .runner import run_git_command

logger = get_logger("commit_mcp.git.reader")

DEFAULT_DIFF_MAX_BYTES = 200_000
DEFAULT_UNIFIED_CONTEXT = 10


def staged_diff_args(unified_context: int = DEFAULT_UNIFIED_CONTEXT) -> list[str]:
    return ["diff", "--cached", f"--unified={unified_context}"]


def truncate_utf8(text: str, max_bytes: int) -> tuple[str, bool]:
    """
    Cut ``text`` to at most ``max_bytes`` UTF-8 bytes.

    The cut lands on the last character boundary at or before ``max_bytes``,
    so the result is always valid text. For ASCII input the result is exactly
    ``max_bytes`` long; a split multi-byte character is dropped whole.

    Returns:
        (text, truncated) where truncated is True iff anything was removed.
    """
    max_bytes = max(0, max_bytes)
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text, False

    cut = max_bytes
    # Back off over continuation bytes (0b10xxxxxx) to a lead byte
    while cut > 0 and (encoded[cut] & 0xC0) == 0x80:
        cut -= 1
    return encoded[:cut].decode("utf-8"), True


def read_staged_diff(max_bytes: int = DEFAULT_DIFF_MAX_BYTES, cwd: str | Path | None = None) -> DiffResult:
    """
    Read ``git diff --cached`` with a wide context window.

    Args:
        max_bytes: UTF-8 byte budget for the returned diff.
        cwd: Repository directory.
    """
    unified = get_settings().get_int("git.unified_context", DEFAULT_UNIFIED_CONTEXT)
    res = run_git_command(staged_diff_args(unified), cwd)

    diff = res.stdout
    if not diff:
        if res.error:
            logger.info("Staged diff unavailable", error=res.error)
        return DiffResult(diff="", truncated=False, error=res.error)

    diff, truncated = truncate_utf8(diff, max_bytes)
    if truncated:
        logger.debug("Staged diff truncated", max_bytes=max_bytes)

    return DiffResult(diff=diff, truncated=truncated, error=None)


def read_changed_files(cwd: str | Path | None = None) -> ChangedFilesResult:
    """List staged paths; blank lines are dropped, order and duplicates are kept."""
    res = run_git_command(["diff", "--cached", "--name-only"], cwd)
    files = [line.strip() for line in res.stdout.split("\n")]
    return ChangedFilesResult(files=[f for f in files if f], error=res.error)


__all__ = [
    "read_changed_files",
    "read_staged_diff",
    "staged_diff_args",
    "truncate_utf8",
]
