"""
Result types shared by the git layer and the MCP tools.

All models are frozen pydantic models backed by orjson. Each one is a
transient value object: produced by one call, handed to the caller, discarded.
Field names are the JSON keys seen by MCP clients.
"""

from __future__ import annotations

import orjson
from pydantic import BaseModel, ConfigDict, Field


class OrjsonModel(BaseModel):
    """Base model with orjson serialization helpers."""

    model_config = ConfigDict(frozen=True)

    def model_dump_json_bytes(self, *, option: int | None = None, **kwargs) -> bytes:
        """Dump to JSON bytes using orjson; ``option`` takes orjson OPT_* flags."""
        return orjson.dumps(self.model_dump(mode="json", **kwargs), option=option)

    def model_dump_json_str(self, *, option: int | None = None, **kwargs) -> str:
        """Dump to JSON string using orjson."""
        return self.model_dump_json_bytes(option=option, **kwargs).decode()


class CommandResult(OrjsonModel):
    """
    Outcome of one git invocation.

    ``error`` is the failure variant: None on success, non-empty text on
    failure. A failed command never carries stdout.
    """

    stdout: str = ""
    stderr: str = ""
    returncode: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str, *, stderr: str = "", returncode: int | None = None) -> CommandResult:
        return cls(stdout="", stderr=stderr, returncode=returncode, error=error or "git command failed")


class DiffResult(OrjsonModel):
    """Staged diff text, possibly cut to a byte budget."""

    diff: str | None = Field(default="", description="Unified diff of staged changes")
    truncated: bool = Field(default=False, description="True when the diff exceeded maxBytes and was cut")
    error: str | None = Field(default=None, description="Error text when git could not be run")


class ChangedFilesResult(OrjsonModel):
    """Staged file paths in git's output order."""

    files: list[str] = Field(default_factory=list, description="Staged file paths")
    error: str | None = Field(default=None, description="Error text when git could not be run")


class FileHunkSummary(OrjsonModel):
    """Leading hunks of one file in the staged diff."""

    path: str = Field(..., description="Post-image (b/) path of the file")
    hunks: list[str] = Field(default_factory=list, description="Hunk excerpts, each starting with @@")


class DiffSummaryResult(OrjsonModel):
    """Bounded per-file digest of the staged diff."""

    files: list[FileHunkSummary] = Field(default_factory=list)
    truncated: bool = Field(default=False, description="Propagated from the underlying diff read")
    error: str | None = Field(default=None)


__all__ = [
    "ChangedFilesResult",
    "CommandResult",
    "DiffResult",
    "DiffSummaryResult",
    "FileHunkSummary",
    "OrjsonModel",
]
