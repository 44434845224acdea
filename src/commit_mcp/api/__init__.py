"""
commit_mcp.api - Value objects exchanged between layers and with MCP clients.
"""

from .types import (
    ChangedFilesResult,
    CommandResult,
    DiffResult,
    DiffSummaryResult,
    FileHunkSummary,
    OrjsonModel,
)

__all__ = [
    "ChangedFilesResult",
    "CommandResult",
    "DiffResult",
    "DiffSummaryResult",
    "FileHunkSummary",
    "OrjsonModel",
]
