"""Unit tests for commit_mcp.api.types."""

from __future__ import annotations

import orjson
import pytest
from pydantic import ValidationError

from commit_mcp.api.types import (
    ChangedFilesResult,
    CommandResult,
    DiffResult,
    DiffSummaryResult,
    FileHunkSummary,
)


class TestCommandResult:
    def test_success_variant(self):
        result = CommandResult(stdout="out", returncode=0)
        assert result.ok
        assert result.error is None

    def test_failure_variant_has_no_stdout(self):
        result = CommandResult.failure("boom", stderr="boom\n", returncode=1)
        assert not result.ok
        assert result.stdout == ""
        assert result.stderr == "boom\n"

    def test_failure_never_has_empty_error(self):
        assert CommandResult.failure("").error == "git command failed"

    def test_frozen(self):
        result = CommandResult(stdout="x")
        with pytest.raises(ValidationError):
            result.stdout = "y"


class TestJsonShapes:
    """The JSON keys are the contract seen by MCP clients."""

    def test_diff_result(self):
        data = orjson.loads(DiffResult(diff="d", truncated=True).model_dump_json_bytes())
        assert data == {"diff": "d", "truncated": True, "error": None}

    def test_changed_files_result(self):
        data = orjson.loads(ChangedFilesResult(files=["a", "b"]).model_dump_json_str())
        assert data == {"files": ["a", "b"], "error": None}

    def test_diff_summary_result(self):
        result = DiffSummaryResult(
            files=[FileHunkSummary(path="a.py", hunks=["@@ -1 +1 @@\n-a\n+b"])],
            truncated=False,
        )
        data = orjson.loads(result.model_dump_json_bytes())
        assert data == {
            "files": [{"path": "a.py", "hunks": ["@@ -1 +1 @@\n-a\n+b"]}],
            "truncated": False,
            "error": None,
        }

    def test_defaults_are_empty(self):
        assert DiffResult().model_dump() == {"diff": "", "truncated": False, "error": None}
        assert DiffSummaryResult().model_dump() == {"files": [], "truncated": False, "error": None}

    def test_orjson_option_is_passed_through(self):
        text = ChangedFilesResult(files=["a"]).model_dump_json_str(option=orjson.OPT_INDENT_2)
        assert text.startswith("{\n  ")
        assert orjson.loads(text) == {"files": ["a"], "error": None}
