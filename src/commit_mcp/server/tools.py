"""
tools.py - MCP tools over the staging area

Tools:
- get-staged-diff: staged unified diff, byte-bounded
- get-changed-files: staged file paths
- get-diff-summary: bounded per-file hunk digest

Tool parameters keep the camelCase names clients send (maxBytes, maxFiles,
maxHunksPerFile). Every tool returns its result model; FastMCP emits it as
structured content plus a JSON text block. Handlers never raise: unexpected
exceptions are logged and returned in the ``error`` field.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, Any, TypeVar

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from commit_mcp.api.types import ChangedFilesResult, DiffResult, DiffSummaryResult
from commit_mcp.config.logging import get_logger
from commit_mcp.config.settings import get_settings
from commit_mcp.git.reader import read_changed_files, read_staged_diff
from commit_mcp.git.summary import get_diff_summary

logger = get_logger("commit_mcp.server.tools")

T = TypeVar("T")

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)


class GitToolRunner:
    """
    Runs blocking git queries off the event loop.

    A semaphore bounds how many git processes the server spawns at once.
    """

    def __init__(self, repo: Path, max_concurrency: int = 4):
        self.repo = repo
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def run(self, name: str, func: Callable[..., T], fallback: Callable[[str], T], **kwargs: Any) -> T:
        async with self._semaphore:
            try:
                return await asyncio.to_thread(func, cwd=self.repo, **kwargs)
            except Exception as e:
                logger.exception("Tool failed", tool=name)
                return fallback(str(e) or type(e).__name__)


def register_git_tools(mcp: FastMCP, repo: Path, max_concurrency: int | None = None) -> GitToolRunner:
    """Register the staging-area tools on ``mcp`` for the repository at ``repo``."""
    settings = get_settings()
    if max_concurrency is None:
        max_concurrency = settings.get_int("server.max_concurrency", 4)
    runner = GitToolRunner(repo, max_concurrency)

    diff_max_bytes = settings.get_int("diff.max_bytes", 200_000)
    summary_max_files = settings.get_int("summary.max_files", 10)
    summary_max_hunks = settings.get_int("summary.max_hunks_per_file", 3)
    summary_max_bytes = settings.get_int("summary.max_bytes", 100_000)
    summary_hunk_chars = settings.get_int("summary.max_hunk_chars", 1000)

    @mcp.tool(name="get-staged-diff", annotations=READ_ONLY)
    async def get_staged_diff(
        maxBytes: Annotated[int, Field(description="UTF-8 byte budget for the diff")] = diff_max_bytes,
    ) -> DiffResult:
        """Get the staged diff (git diff --cached, 10 lines of context), truncated to maxBytes."""
        return await runner.run(
            "get-staged-diff",
            read_staged_diff,
            lambda err: DiffResult(diff="", truncated=False, error=err),
            max_bytes=maxBytes,
        )

    @mcp.tool(name="get-changed-files", annotations=READ_ONLY)
    async def get_changed_files() -> ChangedFilesResult:
        """List the paths of all staged files."""
        return await runner.run(
            "get-changed-files",
            read_changed_files,
            lambda err: ChangedFilesResult(files=[], error=err),
        )

    @mcp.tool(name="get-diff-summary", annotations=READ_ONLY)
    async def diff_summary(
        maxFiles: Annotated[int, Field(description="Maximum number of files to include")] = summary_max_files,
        maxHunksPerFile: Annotated[int, Field(description="Maximum hunks per file")] = summary_max_hunks,
        maxBytes: Annotated[int, Field(description="UTF-8 byte budget for the diff read")] = summary_max_bytes,
    ) -> DiffSummaryResult:
        """Summarize staged changes as the first hunks of each changed file."""
        return await runner.run(
            "get-diff-summary",
            get_diff_summary,
            lambda err: DiffSummaryResult(files=[], truncated=False, error=err),
            max_files=maxFiles,
            max_hunks_per_file=maxHunksPerFile,
            max_bytes=maxBytes,
            max_hunk_chars=summary_hunk_chars,
        )

    logger.debug("Registered git tools", repo=str(repo), max_concurrency=max_concurrency)
    return runner


__all__ = ["GitToolRunner", "READ_ONLY", "register_git_tools"]
