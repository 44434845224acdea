"""
commit_mcp.git - Read-only queries over the git staging area.

Modules:
    runner: run_git_command() - one git process per call, never raises
    reader: read_staged_diff(), read_changed_files()
    summary: summarize_diff(), get_diff_summary()
"""

from .reader import read_changed_files, read_staged_diff, truncate_utf8
from .runner import run_git_command
from .summary import get_diff_summary, summarize_diff

__all__ = [
    "get_diff_summary",
    "read_changed_files",
    "read_staged_diff",
    "run_git_command",
    "summarize_diff",
    "truncate_utf8",
]
