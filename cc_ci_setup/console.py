"""Console output for cc-ci-setup: banner, step headings, prompts."""

from __future__ import annotations

from rich.console import Console
from rich.syntax import Syntax
from rich.theme import Theme

from cc_ci_setup.models import CI_FILE, DOCS_URL

theme = Theme(
    {
        "info": "blue",
        "success": "green",
        "warning": "yellow",
        "error": "red",
        "debug": "dim",
        "accent": "cyan",
        "step": "bold",
    }
)

console = Console(theme=theme, highlight=False)
err_console = Console(theme=theme, highlight=False, stderr=True)

RULE = "━" * 34


def print_header() -> None:
    console.print()
    console.print("[bold cyan]🚀 Claude Code CI Setup[/bold cyan]")
    console.print(f"[dim]{RULE}[/dim]")


def step(num: int, total: int, desc: str) -> None:
    """Print a numbered step heading, e.g. ``[2/4] Updating CI/CD configuration...``."""
    console.print()
    console.print(f"\\[{num}/{total}] {desc}", style="step")


def show_yaml(text: str) -> None:
    console.print(Syntax(text.rstrip("\n"), "yaml", background_color="default"))


def confirm(prompt: str) -> bool:
    """Ask a yes/no question; anything but an explicit yes is a no, including closed stdin."""
    try:
        answer = console.input(f"  {prompt} [dim]\\[y/N][/dim] ")
    except EOFError:
        console.print()
        return False
    return answer.strip().lower() in ("y", "yes")


def print_completion() -> None:
    console.print()
    console.print(f"[dim]{RULE}[/dim]")
    console.print()
    console.print("[bold green]Setup complete![/bold green]")
    console.print()
    console.print("[bold]Next steps:[/bold]")
    console.print("  1. Review and commit the changes:")
    console.print(f'     [dim]git add {CI_FILE} && git commit -m "Add Claude Code CI"[/dim]')
    console.print()
    console.print("  2. Push to trigger the pipeline:")
    console.print("     [dim]git push[/dim]")
    console.print()
    console.print("  3. Mention [accent]@claude[/accent] in an MR or issue to interact with Claude")
    console.print()
    console.print(f"[dim]Documentation: {DOCS_URL}[/dim]")
    console.print()
