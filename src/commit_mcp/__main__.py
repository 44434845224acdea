"""Allow ``python -m commit_mcp``."""

from commit_mcp.cli import entry_point

entry_point()
