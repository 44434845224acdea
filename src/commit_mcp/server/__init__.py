"""
commit_mcp.server - MCP surface

Modules:
    app: create_server() - FastMCP instance bound to one repository
    tools: register_git_tools() - get-staged-diff, get-changed-files, get-diff-summary
"""

from .app import create_server, resolve_repo
from .tools import GitToolRunner, register_git_tools

__all__ = ["GitToolRunner", "create_server", "register_git_tools", "resolve_repo"]
