"""
git-commit-mcp CLI Entry Point

Commands:
    serve    Run the MCP server (stdio by default)
    diff     Print the staged diff result as JSON
    files    Print the staged file list as JSON
    summary  Print the staged diff summary as JSON
    version  Print version information

This is the outermost boundary: the only place that falls back to the
process working directory when --repo is not given.
"""

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path
from typing import Optional

import orjson
import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from commit_mcp import __version__
from commit_mcp.api.types import OrjsonModel
from commit_mcp.config.logging import configure_logging, get_logger, is_verbose
from commit_mcp.config.settings import get_settings, set_configuration_directory

app = typer.Typer(
    name="git-commit-mcp",
    help="Read-only MCP server for the git staging area",
    no_args_is_help=True,
    add_completion=False,
)

stderr_console = Console(stderr=True)


class TransportMode(str, Enum):
    stdio = "stdio"  # Claude Desktop and most MCP clients
    sse = "sse"


RepoOption = typer.Option(
    None,
    "--repo",
    "-r",
    help="Repository directory (defaults to the current directory)",
    file_okay=False,
    resolve_path=True,
)

ConfOption = typer.Option(
    None,
    "--conf",
    help="Configuration home; settings are read from <conf>/git-commit-mcp/settings.yaml",
)

VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


def _bootstrap(conf: Optional[Path], verbose: bool) -> None:
    if conf is not None:
        set_configuration_directory(conf)
    level = "DEBUG" if verbose else str(get_settings().get("logging.level", "INFO"))
    configure_logging(level=level, verbose=verbose, force=True)


@app.callback()
def main(
    conf: Optional[Path] = ConfOption,
    verbose: bool = VerboseOption,
):
    """Bootstrap configuration and logging before any command runs."""
    _bootstrap(conf, verbose)


def _banner(repo: Path, transport: TransportMode) -> Panel:
    content = Text()
    content.append("git-commit-mcp", "bold green")
    content.append(f"  v{__version__}\n\n", "dim")
    content.append(f"repo: {repo}\n", "")
    content.append(f"transport: {transport.value}", "dim")
    return Panel(content, title="[bold green]MCP Server[/]", subtitle="Read-only", border_style="green")


def _echo_result(result: OrjsonModel) -> None:
    typer.echo(result.model_dump_json_str(option=orjson.OPT_INDENT_2))
    if getattr(result, "error", None):
        raise typer.Exit(code=1)


@app.command()
def serve(
    repo: Optional[Path] = RepoOption,
    transport: TransportMode = typer.Option(
        TransportMode.stdio,
        "--transport",
        "-t",
        help="Transport mode (stdio for desktop clients, sse for HTTP clients)",
    ),
    host: str = typer.Option("127.0.0.1", "--host", help="Host to bind to (SSE only)"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on (SSE only)"),
    verbose: bool = VerboseOption,
    conf: Optional[Path] = ConfOption,
):
    """Start the MCP server."""
    if verbose or conf is not None:
        _bootstrap(conf, verbose or is_verbose())

    from commit_mcp.server.app import create_server, resolve_repo

    logger = get_logger("commit_mcp.cli")
    repo_path = resolve_repo(repo)

    try:
        server = create_server(repo_path, host=host, port=port)
        stderr_console.print(_banner(repo_path, transport))
        logger.info("Started git-commit-mcp MCP server", repo=str(repo_path), transport=transport.value)
        server.run(transport=transport.value)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except Exception as e:
        logger.error("Error starting MCP server", error=str(e), exc_info=True)
        raise typer.Exit(code=1)


@app.command()
def diff(
    repo: Optional[Path] = RepoOption,
    max_bytes: Optional[int] = typer.Option(None, "--max-bytes", help="UTF-8 byte budget"),
):
    """Print the staged diff as JSON."""
    from commit_mcp.git.reader import read_staged_diff
    from commit_mcp.server.app import resolve_repo

    if max_bytes is None:
        max_bytes = get_settings().get_int("diff.max_bytes", 200_000)
    _echo_result(read_staged_diff(max_bytes=max_bytes, cwd=resolve_repo(repo)))


@app.command()
def files(repo: Optional[Path] = RepoOption):
    """Print the staged file list as JSON."""
    from commit_mcp.git.reader import read_changed_files
    from commit_mcp.server.app import resolve_repo

    _echo_result(read_changed_files(cwd=resolve_repo(repo)))


@app.command()
def summary(
    repo: Optional[Path] = RepoOption,
    max_files: Optional[int] = typer.Option(None, "--max-files"),
    max_hunks: Optional[int] = typer.Option(None, "--max-hunks-per-file"),
    max_bytes: Optional[int] = typer.Option(None, "--max-bytes"),
):
    """Print the staged diff summary as JSON."""
    from commit_mcp.git.summary import get_diff_summary
    from commit_mcp.server.app import resolve_repo

    settings = get_settings()
    _echo_result(
        get_diff_summary(
            max_files=max_files if max_files is not None else settings.get_int("summary.max_files", 10),
            max_hunks_per_file=(
                max_hunks if max_hunks is not None else settings.get_int("summary.max_hunks_per_file", 3)
            ),
            max_bytes=max_bytes if max_bytes is not None else settings.get_int("summary.max_bytes", 100_000),
            cwd=resolve_repo(repo),
            max_hunk_chars=settings.get_int("summary.max_hunk_chars", 1000),
        )
    )


@app.command()
def version():
    """Display version information."""
    from commit_mcp.git.runner import run_git_command

    git_version = run_git_command(["--version"])
    python_version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

    typer.echo(f"git-commit-mcp: {__version__}")
    typer.echo(f"Python:         {python_version}")
    typer.echo(f"Git:            {git_version.stdout.strip() if git_version.ok else 'unavailable'}")
    typer.echo(f"Settings file:  {get_settings().settings_path}")


def entry_point() -> None:
    app()


if __name__ == "__main__":
    entry_point()
