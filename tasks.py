"""Invoke tasks for SongSheet application management."""

import sys
from pathlib import Path

from invoke import task
from invoke.context import Context


@task
def start(ctx: Context, host: str = "", port: int = 0, reload: bool = False) -> None:
    """Start the SongSheet FastAPI server.

    Args:
        ctx: Invoke context
        host: Host to bind to (default: [server] host from config)
        port: Port to bind to (default: [server] port from config)
        reload: Enable auto-reload for development
    """
    cmd = "uv run songsheet-server"
    if host:
        cmd += f" --host {host}"
    if port:
        cmd += f" --port {port}"
    if reload:
        cmd += " --reload"

    try:
        ctx.run(cmd, pty=True)
    except KeyboardInterrupt:
        print("\nServer stopped")
        sys.exit(0)


@task
def test(ctx: Context, verbose: bool = False, coverage: bool = False) -> None:
    """Run the test suite.

    Args:
        ctx: Invoke context
        verbose: Enable verbose output
        coverage: Run with coverage report
    """
    cmd = "uv run pytest"
    if verbose:
        cmd += " -v"
    if coverage:
        cmd += " --cov=songsheet --cov-report=term-missing"
    ctx.run(cmd, pty=True)


@task
def games(ctx: Context) -> None:
    """List the games known to the importer."""
    ctx.run("uv run songsheet-import games")


@task
def clean(ctx: Context, all: bool = False) -> None:
    """Clean up temporary files.

    Args:
        ctx: Invoke context
        all: Also remove stored spreadsheet structures
    """
    import shutil

    # Clean Python cache
    for pattern in ["__pycache__", "*.pyc", "*.pyo", ".pytest_cache"]:
        ctx.run(f"find . -name '{pattern}' -exec rm -rf {{}} + 2>/dev/null || true", warn=True)

    # Clean build artifacts
    for path in ["build", "dist", "*.egg-info", ".eggs"]:
        ctx.run(f"rm -rf {path} 2>/dev/null || true", warn=True)

    if all:
        structures = Path("data/structures")
        if structures.exists():
            print("Removing stored structures...")
            shutil.rmtree(structures)

    print("Cleanup complete")
