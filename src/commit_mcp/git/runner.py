"""
runner.py - Run the git binary and capture its output

run_git_command() is total: every failure mode (non-zero exit, missing
binary, bad working directory, timeout, oversized output) comes back as a
CommandResult with ``error`` set and empty stdout. Nothing is raised.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path

from commit_mcp.api.types import CommandResult
from commit_mcp.config.logging import get_logger
from commit_mcp.config.settings import get_settings

logger = get_logger("commit_mcp.git.runner")

DEFAULT_TIMEOUT = 60
DEFAULT_MAX_OUTPUT_BYTES = 100 * 1024 * 1024


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


def _setting_timeout(value: object) -> float | None:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT


def run_git_command(
    args: Sequence[str],
    cwd: str | Path | None = None,
    *,
    executable: str | None = None,
    timeout: float | None = None,
    max_output_bytes: int | None = None,
) -> CommandResult:
    """
    Execute one git command synchronously.

    Args:
        args: Arguments after the executable, e.g. ["diff", "--cached"].
        cwd: Working directory; None means the current process directory.
        executable: Git binary; defaults to the ``git.executable`` setting.
        timeout: Seconds before the process is killed; defaults to ``git.timeout``.
            0 disables the timeout.
        max_output_bytes: stdout ceiling; defaults to ``git.max_output_bytes``.

    Returns:
        CommandResult with stdout on success, or ``error`` on failure.
    """
    settings = get_settings()
    if executable is None:
        executable = settings.get("git.executable", "git") or "git"
    if timeout is None:
        timeout = _setting_timeout(settings.get("git.timeout", DEFAULT_TIMEOUT))
    if max_output_bytes is None:
        max_output_bytes = settings.get_int("git.max_output_bytes", DEFAULT_MAX_OUTPUT_BYTES)

    cmd = [executable, *args]
    command_line = " ".join(cmd)

    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            timeout=timeout or None,
            check=False,
        )
    except subprocess.TimeoutExpired:
        error = f"{command_line} timed out after {timeout:g} seconds"
        logger.warning("git command timed out", cmd=command_line, cwd=str(cwd or "."))
        return CommandResult.failure(error)
    except OSError as e:
        # Missing binary or working directory
        logger.warning("git command could not start", cmd=command_line, error=str(e))
        return CommandResult.failure(str(e))

    stdout = _decode(proc.stdout)
    stderr = _decode(proc.stderr)
    logger.debug("git command finished", cmd=command_line, cwd=str(cwd or "."), returncode=proc.returncode)

    if proc.returncode != 0:
        error = stderr.strip() or f"git exited with status {proc.returncode}"
        logger.warning("git command failed", cmd=command_line, returncode=proc.returncode, error=error)
        return CommandResult.failure(error, stderr=stderr, returncode=proc.returncode)

    if max_output_bytes and len(proc.stdout) > max_output_bytes:
        error = f"git output exceeded {max_output_bytes} bytes"
        logger.warning("git output too large", cmd=command_line, size=len(proc.stdout))
        return CommandResult.failure(error, stderr=stderr, returncode=proc.returncode)

    return CommandResult(stdout=stdout, stderr=stderr, returncode=proc.returncode)


__all__ = ["run_git_command"]
