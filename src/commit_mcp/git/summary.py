"""
summary.py - Compact per-file digest of a unified diff

The digest is deliberately lossy: at most ``max_files`` files, at most
``max_hunks_per_file`` hunks per file, each hunk capped at
``max_hunk_chars`` characters. Files past the cap are dropped silently.

    diff --git a/app.py b/app.py        <- new section, path "app.py"
    index 3b18e51..a9c3f2d 100644       <- file header, discarded
    --- a/app.py
    +++ b/app.py
    @@ -1,4 +1,5 @@                     <- hunk 1
    ...
    @@ -40,6 +41,8 @@                   <- hunk 2
"""

from __future__ import annotations

import re
from pathlib import Path

from commit_mcp.api.types import DiffSummaryResult, FileHunkSummary
from commit_mcp.config.logging import get_logger

from .reader import read_staged_diff

logger = get_logger("commit_mcp.git.summary")

DEFAULT_MAX_FILES = 10
DEFAULT_MAX_HUNKS_PER_FILE = 3
DEFAULT_SUMMARY_MAX_BYTES = 100_000
MAX_HUNK_CHARS = 1000
HUNK_MARKER = "@@"
TRUNCATION_SUFFIX = "\n... [hunk truncated]"

_FILE_SPLIT_RE = re.compile(r"^(?=diff --git )", re.MULTILINE)
_HUNK_SPLIT_RE = re.compile(r"^(?=@@)", re.MULTILINE)
_HEADER_RE = re.compile(r"^diff --git a/(.+?) b/(.+)$")


def split_file_sections(diff_text: str) -> list[str]:
    """Split diff text at every ``diff --git`` line; leading noise is dropped."""
    return [part for part in _FILE_SPLIT_RE.split(diff_text) if part.startswith("diff --git ")]


def section_path(section: str) -> str | None:
    """Post-image path from the section header, or None for unexpected headers."""
    header = section.split("\n", 1)[0].rstrip("\r")
    match = _HEADER_RE.match(header)
    if match is None:
        return None
    return match.group(2)


def split_hunks(section: str) -> list[str]:
    """Hunks of one file section; the file header before the first ``@@`` is discarded."""
    return _HUNK_SPLIT_RE.split(section)[1:]


def normalize_hunk(hunk: str, max_chars: int = MAX_HUNK_CHARS) -> str:
    """Strip, guarantee the ``@@`` prefix and cap the length of one hunk."""
    text = hunk.strip()
    if not text.startswith(HUNK_MARKER):
        text = f"{HUNK_MARKER} {text}"
    if len(text) > max_chars:
        text = text[:max_chars] + TRUNCATION_SUFFIX
    return text


def summarize_diff(
    diff_text: str,
    max_files: int = DEFAULT_MAX_FILES,
    max_hunks_per_file: int = DEFAULT_MAX_HUNKS_PER_FILE,
    max_hunk_chars: int = MAX_HUNK_CHARS,
) -> list[FileHunkSummary]:
    """
    Parse unified diff text into bounded per-file hunk excerpts.

    Args:
        diff_text: Output of ``git diff``.
        max_files: Maximum number of file entries.
        max_hunks_per_file: Maximum hunks kept per file, in diff order.
        max_hunk_chars: Character cap per hunk before the truncation suffix.

    Returns:
        FileHunkSummary list in diff order.
    """
    max_hunks_per_file = max(0, max_hunks_per_file)
    files: list[FileHunkSummary] = []

    for section in split_file_sections(diff_text):
        if len(files) >= max_files:
            break

        path = section_path(section)
        if path is None:
            logger.debug("Skipping diff section with unexpected header", header=section[:80])
            continue

        hunks = [normalize_hunk(h, max_hunk_chars) for h in split_hunks(section)[:max_hunks_per_file]]
        files.append(FileHunkSummary(path=path, hunks=hunks))

    return files


def get_diff_summary(
    max_files: int = DEFAULT_MAX_FILES,
    max_hunks_per_file: int = DEFAULT_MAX_HUNKS_PER_FILE,
    max_bytes: int = DEFAULT_SUMMARY_MAX_BYTES,
    cwd: str | Path | None = None,
    max_hunk_chars: int = MAX_HUNK_CHARS,
) -> DiffSummaryResult:
    """
    Summarize the staged diff of the repository at ``cwd``.

    ``truncated`` is carried over from the diff read; parsing errors are
    reported in ``error`` with an empty file list.
    """
    fetched = read_staged_diff(max_bytes=max_bytes, cwd=cwd)
    if not fetched.diff:
        return DiffSummaryResult(files=[], truncated=fetched.truncated, error=fetched.error)

    try:
        files = summarize_diff(
            fetched.diff,
            max_files=max_files,
            max_hunks_per_file=max_hunks_per_file,
            max_hunk_chars=max_hunk_chars,
        )
    except Exception as e:
        logger.exception("Failed to summarize staged diff")
        return DiffSummaryResult(files=[], truncated=False, error=str(e) or type(e).__name__)

    return DiffSummaryResult(files=files, truncated=fetched.truncated, error=None)


__all__ = [
    "HUNK_MARKER",
    "MAX_HUNK_CHARS",
    "TRUNCATION_SUFFIX",
    "get_diff_summary",
    "normalize_hunk",
    "section_path",
    "split_file_sections",
    "split_hunks",
    "summarize_diff",
]
