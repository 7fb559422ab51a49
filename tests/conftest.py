"""Shared test fixtures for OpenClaw Setup tests.

This module provides common fixtures used across all test modules:
- An isolated OPENCLAW_HOME per test
- A scripted prompter that stands in for the terminal
- Well-known seed phrases and keys

Usage:
    def test_something(app_home, prompter):
        # app_home is a fresh directory, prompter answers from a script
        ...
"""

from pathlib import Path
from typing import Any, Optional

import pytest

from models import ConfigStore
from ui import SetupFlags, WizardContext


# ─────────────────────────────────────────────────────────────────────────────
# Known Values
# ─────────────────────────────────────────────────────────────────────────────

# BIP-39 test vector: all-zero entropy
ABANDON_PHRASE = " ".join(["abandon"] * 11 + ["about"])

# Base58 of 32 zero bytes (the Solana system program address)
ZERO_PUBLIC_KEY = "11111111111111111111111111111111"

PASSWORD = "correct-password"


# ─────────────────────────────────────────────────────────────────────────────
# Directory Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def app_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point OPENCLAW_HOME at a temporary directory for every test.

    Returns:
        Path to the temporary application directory
    """
    home = tmp_path / "openclaw"
    home.mkdir()
    monkeypatch.setenv("OPENCLAW_HOME", str(home))
    return home


# ─────────────────────────────────────────────────────────────────────────────
# Prompter Fixtures
# ─────────────────────────────────────────────────────────────────────────────


class FakePrompter:
    """Answers prompts from a script instead of the terminal.

    Answers are consumed in order regardless of which prompt asks; once the
    script runs out every prompt returns its default.
    """

    def __init__(self, answers: Optional[list[Any]] = None, password: str = PASSWORD):
        self.answers = list(answers or [])
        self.password_value = password
        self.asked: list[str] = []
        self.password_calls = 0
        self.shown_mnemonics: list[str] = []

    def _next(self, message: str, default: Any) -> Any:
        self.asked.append(message)
        if self.answers:
            return self.answers.pop(0)
        return default

    def confirm(self, message: str, default: bool = True) -> bool:
        return self._next(message, default)

    def text(self, message: str, default: Optional[str] = None) -> str:
        return self._next(message, default or "")

    def select(self, message: str, choices, default: Any = None) -> Any:
        return self._next(message, default if default is not None else choices[0][1])

    def checkbox(self, message: str, choices, checked=()) -> list[Any]:
        return self._next(message, list(checked))

    def password(self, message: str) -> str:
        return self._next(message, self.password_value)

    def new_password(self) -> str:
        self.password_calls += 1
        return self.password_value

    def secret(self, kind: str) -> str:
        return self._next(kind, "")

    def show_mnemonic(self, phrase: str) -> None:
        self.shown_mnemonics.append(phrase)


@pytest.fixture
def prompter() -> FakePrompter:
    return FakePrompter()


@pytest.fixture
def make_context(app_home: Path):
    """Build a WizardContext rooted in app_home for a given prompter.

    Returns:
        Factory taking (prompter, flags=None)
    """

    def _make(prompter: FakePrompter, flags: Optional[SetupFlags] = None) -> WizardContext:
        return WizardContext(
            app_dir=app_home,
            config_store=ConfigStore(app_home / "config.json"),
            wallet_dir=app_home / "wallets",
            skills_dir=app_home / "skills",
            prompter=prompter,
            flags=flags or SetupFlags(),
        )

    return _make
