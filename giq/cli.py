from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional

import typer

from . import commands as flows
from .app import App
from .errors import GiqError
from .logging_utils import configure_logging
from .ui import error
from .utils.git import Git

LOG = logging.getLogger(__name__)

ENHANCED_COMMANDS = {"commit", "status", "setup"}
HELP_ALIASES = {"help", "--help", "-h"}

app = typer.Typer(
    add_completion=False,
    help="giq - Quick Git operations enhanced with AI",
    rich_markup_mode=None,
)


def _report(operation: str, exc: Exception) -> None:
    error(f"Error executing 'git {operation}': {exc}")


@app.callback()
def _root(ctx: typer.Context) -> None:
    """Anything that is not a giq command is passed straight to git."""
    if ctx.obj is not None:
        return
    try:
        # setup must still run when the existing file is unreadable
        ctx.obj = App.create(load_config=ctx.invoked_subcommand != "setup")
    except GiqError as exc:
        _report(ctx.invoked_subcommand or "", exc)
        raise typer.Exit(code=1)


def _run(ctx: typer.Context, operation: str, flow: Callable[[App], int]) -> None:
    try:
        code = flow(ctx.obj)
    except GiqError as exc:
        _report(operation, exc)
        raise typer.Exit(code=1)
    if code:
        raise typer.Exit(code=code)


@app.command()
def commit(
    ctx: typer.Context,
    message: Optional[str] = typer.Option(
        None, "-m", "--message", help="Commit message (overrides AI suggestions)"
    ),
):
    """Create a commit with an AI-generated message from staged changes."""
    _run(ctx, "commit", lambda a: flows.commit(a, message))


@app.command()
def status(ctx: typer.Context):
    """Show working tree status with AI insights."""
    _run(ctx, "status", flows.status)


@app.command()
def setup(ctx: typer.Context):
    """Interactive setup for the AI provider."""
    _run(ctx, "setup", flows.setup)


def delegate(args: List[str], git: Optional[Git] = None) -> int:
    """Run git with ``args`` untouched and return its exit status."""
    try:
        git = git or Git.locate()
        return git.run(*args)
    except GiqError as exc:
        _report(" ".join(args), exc)
        return 1


def main(argv: Optional[List[str]] = None) -> None:
    configure_logging()
    args = list(sys.argv[1:] if argv is None else argv)
    first = args[0] if args else None

    if first in HELP_ALIASES:
        sys.exit(delegate(["--help"]))
    if first not in ENHANCED_COMMANDS:
        LOG.debug("Delegating to git: %s", args)
        sys.exit(delegate(args))
    app(args=args, prog_name="giq")
