"""
Prompts - Terminal input for the setup wizard.

TerminalPrompter is the wizard's only source of user input. Ctrl+C at any
prompt raises click.Abort, which the wizard turns into save-and-exit.
"""

from typing import Any, Optional, Sequence

import click
from rich.markup import escape

from utils import MIN_PASSWORD_LENGTH
from .theme import Theme, console, show_error, show_warning


Choice = tuple[str, Any]  # (label, value)


def parse_selection(text: str, count: int) -> list[int]:
    """
    Parse "1,3, 5" into zero-based indices.

    Raises:
        ValueError: If an entry is not a number in 1..count
    """
    indices = []
    for part in text.replace(" ", ",").split(","):
        if not part:
            continue
        number = int(part)
        if not 1 <= number <= count:
            raise ValueError(f"{number} is not between 1 and {count}")
        if number - 1 not in indices:
            indices.append(number - 1)
    return indices


class TerminalPrompter:
    """Collects answers on the terminal with click prompts."""

    def confirm(self, message: str, default: bool = True) -> bool:
        return click.confirm(message, default=default)

    def text(self, message: str, default: Optional[str] = None) -> str:
        value = click.prompt(message, default=default if default is not None else "",
                             show_default=bool(default))
        return value.strip()

    def select(self, message: str, choices: Sequence[Choice], default: Any = None) -> Any:
        """Numbered single-choice menu."""
        console.print(f"\n{message}", style=Theme.EMPHASIS)
        default_index = 1
        for i, (label, value) in enumerate(choices, start=1):
            console.print(f"  [{Theme.ACCENT}]{i}.[/] {escape(label)}")
            if value == default:
                default_index = i

        number = click.prompt("Choose", type=click.IntRange(1, len(choices)),
                              default=default_index)
        return choices[number - 1][1]

    def checkbox(self, message: str, choices: Sequence[Choice],
                 checked: Sequence[Any] = ()) -> list[Any]:
        """Numbered multi-choice menu; answer with comma-separated numbers."""
        console.print(f"\n{message}", style=Theme.EMPHASIS)
        preselected = []
        for i, (label, value) in enumerate(choices, start=1):
            mark = "x" if value in checked else " "
            if value in checked:
                preselected.append(str(i))
            console.print(f"  [{Theme.ACCENT}]{i}.[/] \\[{mark}] {escape(label)}")

        while True:
            answer = click.prompt("Numbers (comma-separated)",
                                  default=",".join(preselected), show_default=True)
            try:
                return [choices[i][1] for i in parse_selection(answer, len(choices))]
            except ValueError as e:
                show_error(f"Invalid selection: {e}")

    def password(self, message: str) -> str:
        """Single hidden entry (unlocking an existing wallet)."""
        return click.prompt(message, hide_input=True)

    def new_password(self) -> str:
        """Hidden entry with length check and confirmation."""
        while True:
            password = click.prompt("Create a password to encrypt your wallet key",
                                    hide_input=True)
            if len(password) < MIN_PASSWORD_LENGTH:
                show_error(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
                continue
            confirm = click.prompt("Confirm password", hide_input=True)
            if confirm != password:
                show_error("Passwords do not match")
                continue
            return password

    def secret(self, kind: str) -> str:
        """Raw private key (hidden) or seed phrase text."""
        if kind == "privateKey":
            return click.prompt("Enter your private key (base58 or hex)", hide_input=True).strip()
        if kind == "mnemonic":
            return click.prompt("Enter your 12 or 24-word seed phrase").strip()
        raise ValueError(f"Unknown secret kind: {kind}")

    def show_mnemonic(self, phrase: str) -> None:
        """Show a new seed phrase once, then clear it from the screen."""
        words = phrase.split()
        console.print("\n🔐 Your new wallet seed phrase (WRITE THIS DOWN):\n", style=Theme.WARNING)
        for row in range(0, len(words), 4):
            cells = [f"{i + 1:>2}. {words[i]:<10}" for i in range(row, min(row + 4, len(words)))]
            console.print("   " + "  ".join(cells), style=Theme.EMPHASIS, highlight=False)
        console.print("\n⚠️  Never share your seed phrase with anyone!\n", style=Theme.ERROR)

        while not click.confirm("I have written down my seed phrase", default=False):
            show_warning("Without the seed phrase a forgotten password cannot be recovered.")
        console.clear()
