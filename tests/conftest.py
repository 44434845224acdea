"""Shared fixtures: throwaway git repositories and isolated settings."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

from commit_mcp.config.settings import ENV_PREFIX, Settings


def git(repo: Path, *args: str) -> str:
    """Run git in ``repo`` and return stdout; fail the test on error."""
    result = subprocess.run(["git", *args], cwd=repo, capture_output=True, text=True, check=True)
    return result.stdout


def write_and_stage(repo: Path, relpath: str, content: str) -> None:
    path = repo / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    git(repo, "add", relpath)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path_factory, monkeypatch):
    """Point settings at an empty config home and drop env overrides."""
    conf_home = tmp_path_factory.mktemp("config-home")
    monkeypatch.setenv("PRJ_CONFIG_HOME", str(conf_home))
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
    Settings().reload()
    yield conf_home
    # Force a lazy reload once monkeypatch restores the environment
    Settings._loaded = False


@pytest.fixture
def outside_repo(tmp_path, monkeypatch) -> Path:
    """A directory git will not treat as part of any repository."""
    path = tmp_path / "not-a-repo"
    path.mkdir()
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    return path


@pytest.fixture
def temp_git_repo(tmp_path) -> Path:
    """Create a temporary git repository with one commit."""
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "config", "user.email", "test@example.com")
    git(repo, "config", "user.name", "Test User")
    git(repo, "config", "commit.gpgsign", "false")
    git(repo, "config", "core.autocrlf", "false")
    (repo / "README.md").write_text("# Test Repo\n", encoding="utf-8")
    git(repo, "add", ".")
    git(repo, "commit", "-q", "-m", "Initial commit")
    return repo


@pytest.fixture
def staged_repo(temp_git_repo) -> Path:
    """Repository with one tracked file modified by a five-line change, staged."""
    path = "src/app.py"
    original = "".join(f"line {i}\n" for i in range(1, 41))
    write_and_stage(temp_git_repo, path, original)
    git(temp_git_repo, "commit", "-q", "-m", "Add app")

    lines = original.splitlines(keepends=True)
    for i in range(10, 15):
        lines[i] = f"changed {i}\n"
    write_and_stage(temp_git_repo, path, "".join(lines))
    return temp_git_repo


@pytest.fixture
def run_git():
    """The ``git(repo, *args)`` helper, for tests that build their own history."""
    return git


@pytest.fixture
def stage_file():
    """The ``write_and_stage(repo, relpath, content)`` helper."""
    return write_and_stage
