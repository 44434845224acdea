"""Unit tests for commit_mcp.git.reader (runner stubbed)."""

from __future__ import annotations

import pytest

from commit_mcp.api.types import CommandResult
from commit_mcp.git import reader
from commit_mcp.git.reader import read_changed_files, read_staged_diff, truncate_utf8


@pytest.fixture
def fake_runner(monkeypatch):
    """Replace run_git_command in the reader; records calls."""

    class FakeRunner:
        def __init__(self):
            self.result = CommandResult(stdout="")
            self.calls: list[tuple[list[str], object]] = []

        def __call__(self, args, cwd=None, **kwargs):
            self.calls.append((list(args), cwd))
            return self.result

    fake = FakeRunner()
    monkeypatch.setattr(reader, "run_git_command", fake)
    return fake


class TestTruncateUtf8:
    """Tests for byte-budget truncation."""

    def test_under_limit_unchanged(self):
        assert truncate_utf8("hello", 10) == ("hello", False)

    def test_at_limit_unchanged(self):
        assert truncate_utf8("hello", 5) == ("hello", False)

    def test_ascii_cut_is_exact(self):
        text, truncated = truncate_utf8("a" * 100, 42)
        assert truncated is True
        assert len(text.encode("utf-8")) == 42

    def test_multibyte_is_measured_in_bytes(self):
        # 3 characters, 9 bytes
        text, truncated = truncate_utf8("日本語", 6)
        assert truncated is True
        assert text == "日本"

    def test_multibyte_cut_lands_on_boundary(self):
        # Budget of 7 bytes falls inside the third character
        text, truncated = truncate_utf8("日本語", 7)
        assert truncated is True
        assert text == "日本"
        assert len(text.encode("utf-8")) <= 7

    @pytest.mark.parametrize("budget", range(0, 20))
    def test_result_is_valid_and_within_budget(self, budget):
        source = "a€b😀c日d"
        text, truncated = truncate_utf8(source, budget)
        encoded = text.encode("utf-8")
        assert len(encoded) <= budget or not truncated
        assert source.startswith(text)
        if truncated:
            assert budget - len(encoded) <= 3

    def test_negative_budget_treated_as_zero(self):
        assert truncate_utf8("abc", -5) == ("", True)


class TestReadStagedDiff:
    """Tests for read_staged_diff."""

    def test_uses_cached_diff_with_wide_context(self, fake_runner, tmp_path):
        read_staged_diff(cwd=tmp_path)
        assert fake_runner.calls == [(["diff", "--cached", "--unified=10"], tmp_path)]

    def test_context_width_from_settings(self, fake_runner, monkeypatch):
        monkeypatch.setenv("GIT_COMMIT_MCP_GIT__UNIFIED_CONTEXT", "3")
        from commit_mcp.config.settings import Settings

        Settings().reload()
        read_staged_diff()
        assert fake_runner.calls[0][0] == ["diff", "--cached", "--unified=3"]

    def test_no_staged_changes(self, fake_runner):
        result = read_staged_diff()
        assert result.diff == ""
        assert result.truncated is False
        assert result.error is None

    def test_runner_failure_reported(self, fake_runner):
        fake_runner.result = CommandResult.failure("fatal: not a git repository", returncode=128)
        result = read_staged_diff()
        assert result.diff == ""
        assert result.truncated is False
        assert result.error == "fatal: not a git repository"

    def test_under_limit_returned_unchanged(self, fake_runner):
        fake_runner.result = CommandResult(stdout="diff --git a/x b/x\n+1\n", returncode=0)
        result = read_staged_diff(max_bytes=1000)
        assert result.diff == "diff --git a/x b/x\n+1\n"
        assert result.truncated is False
        assert result.error is None

    def test_over_limit_truncated(self, fake_runner):
        fake_runner.result = CommandResult(stdout="x" * 500, returncode=0)
        result = read_staged_diff(max_bytes=100)
        assert result.truncated is True
        assert len(result.diff.encode("utf-8")) == 100

    def test_idempotent(self, fake_runner):
        fake_runner.result = CommandResult(stdout="y" * 300, returncode=0)
        first = read_staged_diff(max_bytes=120)
        second = read_staged_diff(max_bytes=120)
        assert first == second


class TestReadChangedFiles:
    """Tests for read_changed_files."""

    def test_uses_name_only(self, fake_runner, tmp_path):
        read_changed_files(cwd=tmp_path)
        assert fake_runner.calls == [(["diff", "--cached", "--name-only"], tmp_path)]

    def test_drops_blank_entries_and_trims(self, fake_runner):
        fake_runner.result = CommandResult(stdout="a.py\n  b/c.py \n\n\nd.txt\n", returncode=0)
        result = read_changed_files()
        assert result.files == ["a.py", "b/c.py", "d.txt"]
        assert result.error is None

    def test_keeps_order_and_duplicates(self, fake_runner):
        fake_runner.result = CommandResult(stdout="z.py\na.py\nz.py\n", returncode=0)
        assert read_changed_files().files == ["z.py", "a.py", "z.py"]

    def test_empty_output(self, fake_runner):
        result = read_changed_files()
        assert result.files == []
        assert result.error is None

    def test_failure(self, fake_runner):
        fake_runner.result = CommandResult.failure("git: command not found")
        result = read_changed_files()
        assert result.files == []
        assert result.error == "git: command not found"
