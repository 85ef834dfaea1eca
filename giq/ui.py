from __future__ import annotations

from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.text import Text


console = Console()
err_console = Console(stderr=True)


def banner(title: str) -> None:
    # Print a simple title line without box borders
    t = Text.from_markup(title)
    t.stylize("magenta")
    console.print(t)


def tip(text: str) -> None:
    console.print(Text(f"💡 {text}", style="italic dim"))


def warning(text: str) -> None:
    console.print(Text(text, style="yellow"))


def error(text: str) -> None:
    err_console.print(Text(text, style="red"))


def print_block(title: str, body: str) -> None:
    """Print a heading followed by verbatim text (git output, AI insights)."""
    console.print(Text(title, style="bold"))
    console.print(Text(body))


def print_staged_files(files: str) -> None:
    print_block("Staged files:", files.strip())
    console.print("----------", style="dim")


def saved_panel(path: Path) -> None:
    body = f"Configuration saved to {path}\nRun 'giq commit' to get AI commit message suggestions."
    console.print(Panel(Text(body), title="giq setup", border_style="green", box=box.ROUNDED))


def setup_help_panel() -> None:
    lines = [
        "• Run 'giq setup' to choose a provider and enter credentials",
        "• Or export GIQ_AI_KEY=sk-... (OpenAI) for the current session",
        "• Azure OpenAI: GIQ_AI_PROVIDER=azure_openai plus GIQ_AZURE_ENDPOINT, GIQ_AZURE_DEPLOYMENT_ID, "
        "GIQ_AZURE_API_KEY and GIQ_AZURE_API_VERSION",
    ]
    console.print(Panel(Text("\n".join(lines)), title="AI Setup", border_style="yellow", box=box.ROUNDED))
