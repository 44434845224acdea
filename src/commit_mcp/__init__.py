"""
commit_mcp - Read-only MCP server for the git staging area

Exposes the staged diff, the staged file list and a compact diff summary as
MCP tools, so an agent can inspect pending commit changes without running git.

Modules:
    api: Result value objects (pydantic, orjson)
    config: Logging (structlog) and layered settings
    git: Command runner, diff reader, diff summarizer
    server: FastMCP server and tool registration
    cli: Typer entry point
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
