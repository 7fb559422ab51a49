"""
UI Theme - Terminal colors, banner and message helpers.

All wizard output goes through the shared rich console.
"""

from contextlib import contextmanager

from rich.console import Console
from rich.panel import Panel
from rich.text import Text


console = Console()


class Theme:
    """OpenClaw terminal colors."""

    # Brand colors
    ACCENT = "cyan"
    MUTED = "grey58"
    EMPHASIS = "bold"

    # Status colors
    SUCCESS = "green"
    ERROR = "red"
    WARNING = "yellow"
    INFO = "blue"


LOGO = r"""
  ___  ___ ___ _  _  ___ _      ___      __
 / _ \| _ \ __| \| |/ __| |    /_\ \    / /
| (_) |  _/ _|| .` | (__| |__ / _ \ \/\/ /
 \___/|_| |___|_|\_|\___|____/_/ \_\_/\_/
"""


def print_logo(clear: bool = True) -> None:
    """Clear the screen and print the banner."""
    if clear:
        console.clear()
    console.print(Text(LOGO, style=Theme.ACCENT))
    console.print("  End-to-End Setup Wizard", style=Theme.MUTED)
    console.print("  " + "─" * 34 + "\n", style=Theme.MUTED)


def print_box(content: str, title: str = "") -> None:
    """Print content in a rounded panel."""
    console.print(Panel(content, title=title or None, padding=(1, 2), expand=False))


def print_heading(text: str) -> None:
    console.print(f"\n{text}\n", style=Theme.EMPHASIS)


def show_success(message: str) -> None:
    console.print(f"✓ {message}", style=Theme.SUCCESS)


def show_warning(message: str) -> None:
    console.print(f"⚠️  {message}", style=Theme.WARNING)


def show_error(message: str) -> None:
    console.print(f"✗ {message}", style=Theme.ERROR)


def show_info(message: str) -> None:
    console.print(message, style=Theme.MUTED)


@contextmanager
def spinner(text: str):
    """Show a status spinner while the block runs."""
    with console.status(text):
        yield
