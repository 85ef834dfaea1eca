from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .app import App
from .config import save_config
from .errors import ConfigurationError, GiqError, UserCancelled, ValidationError
from .generator import COMMIT_MAX_TOKENS, COMMIT_SUGGESTIONS, generate_status_insight
from .prompts import commit_prompt
from .selection import select
from .ui import banner, console, print_block, print_staged_files, saved_panel, setup_help_panel, tip, warning
from .wizard import run_wizard

LOG = logging.getLogger(__name__)

CUSTOM_MESSAGE = "Write custom message"
FALLBACK_TITLE = "AI provider is not configured. Please choose an option:"
FALLBACK_OPTIONS = ("Write custom commit message", "Setup AI configuration")
SELECT_TITLE = "Select a commit message:"


def _read_custom_message(app: App) -> str:
    message = app.terminal.read_line("\nEnter your commit message: ").strip()
    if not message:
        raise ValidationError("empty commit message")
    return message


def run_setup(app: App) -> Path:
    """Run the credential wizard and persist the result. Returns the file written."""
    banner("[b]giq setup[/b]")
    cfg = run_wizard(app.terminal)
    return save_config(cfg, app.setup_path)


def _handle_unconfigured(app: App) -> int:
    choice = select(app.terminal, FALLBACK_TITLE, FALLBACK_OPTIONS)
    if choice is None:
        setup_help_panel()
        raise UserCancelled("no option selected")
    if choice == 0:
        return app.git.commit(_read_custom_message(app))
    try:
        path = run_setup(app)
    except GiqError as exc:
        raise GiqError(f"setup failed: {exc}") from exc
    saved_panel(path)
    # The commit itself is not retried; the user runs it again with the new config.
    raise GiqError("setup completed, please try committing again")


def commit(app: App, message: Optional[str] = None) -> int:
    """Commit staged changes, picking the message from AI suggestions unless given."""
    if message:
        return app.git.commit(message)

    files = app.git.staged_files()
    diff = app.git.staged_diff()
    if not files.strip() or not diff.strip():
        raise ValidationError("no staged changes detected")
    print_staged_files(files)

    prompt = commit_prompt(files, diff)
    try:
        with console.status("Generating commit messages…", spinner="dots"):
            suggestions = app.generate(app.config, prompt, COMMIT_SUGGESTIONS, COMMIT_MAX_TOKENS)
    except ConfigurationError as exc:
        LOG.info("AI provider not configured: %s", exc)
        return _handle_unconfigured(app)

    options = [*suggestions, CUSTOM_MESSAGE]
    choice = select(app.terminal, SELECT_TITLE, options)
    if choice is None:
        raise UserCancelled("no commit message selected")
    if choice == len(suggestions):
        chosen = _read_custom_message(app)
    else:
        chosen = suggestions[choice]
    return app.git.commit(chosen)


def status(app: App) -> int:
    """Show git status plus a one-line AI summary of the staged changes."""
    if not app.git.in_repository():
        return app.git.run("status")

    print_block("Git status:", app.git.status())

    diff = app.git.staged_diff()
    if not diff.strip():
        console.print("\nNo staged changes to analyze for AI insights.")
        return 0

    try:
        with console.status("Analyzing staged changes…", spinner="dots"):
            insight = generate_status_insight(app.config, diff, app.generate)
    except GiqError as exc:
        LOG.info("AI insights unavailable: %s", exc)
        warning(f"\n[Warning: Could not generate AI insights: {exc}]")
        if isinstance(exc, ConfigurationError):
            tip("Run 'giq setup' to configure an AI provider.")
        return 0
    console.print()
    print_block("AI insights:", insight)
    return 0


def setup(app: App) -> int:
    path = run_setup(app)
    saved_panel(path)
    return 0
