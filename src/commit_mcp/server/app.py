"""
app.py - FastMCP server bound to one repository

The repository directory is resolved once here and threaded explicitly
through every tool call; nothing below this layer reads the process cwd.
"""

from __future__ import annotations

from pathlib import Path

from mcp.server.fastmcp import FastMCP

from commit_mcp.config.logging import configure_logging, get_logger, is_verbose
from commit_mcp.config.settings import get_settings

from .tools import register_git_tools

logger = get_logger("commit_mcp.server.app")

SERVER_NAME = "git-commit-mcp"

INSTRUCTIONS = """\
Read-only access to the git staging area of one repository.

- get-staged-diff: the staged unified diff (10 lines of context), cut to maxBytes
- get-changed-files: paths of all staged files
- get-diff-summary: first hunks of each staged file, bounded by maxFiles/maxHunksPerFile

Nothing is ever staged, committed or modified. Errors are reported in the
`error` field of each result.
"""


def resolve_repo(repo: str | Path | None = None) -> Path:
    """Resolve the repository directory; None means the current directory."""
    return Path(repo).expanduser().resolve() if repo else Path.cwd()


def create_server(
    repo: str | Path | None = None,
    *,
    name: str | None = None,
    host: str = "127.0.0.1",
    port: int = 8000,
    max_concurrency: int | None = None,
) -> FastMCP:
    """
    Build a FastMCP server exposing the staging-area tools.

    Args:
        repo: Repository directory the tools read from.
        name: Server name announced to clients.
        host: Bind host (SSE transport only).
        port: Bind port (SSE transport only).
        max_concurrency: Maximum concurrent git processes.
    """
    # Our handlers first; FastMCP's basicConfig is a no-op once the root logger has one
    configure_logging(level=str(get_settings().get("logging.level", "INFO")))

    repo_path = resolve_repo(repo)
    server_name = name or get_settings().get("server.name", SERVER_NAME) or SERVER_NAME

    mcp = FastMCP(server_name, instructions=INSTRUCTIONS, host=host, port=port, debug=is_verbose())
    register_git_tools(mcp, repo_path, max_concurrency=max_concurrency)

    logger.info("MCP server created", name=server_name, repo=str(repo_path))
    return mcp


__all__ = ["INSTRUCTIONS", "SERVER_NAME", "create_server", "resolve_repo"]
