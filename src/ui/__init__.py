"""
UI package - Terminal user interface for the setup wizard.

Contains:
- Theme: Terminal colors, banner and message helpers
- TerminalPrompter: click-based prompts
- Wizard: The ordered setup steps and runners
"""

from .theme import Theme, console, show_success, show_warning, show_error, show_info
from .prompts import TerminalPrompter, parse_selection
from .wizard import (
    SetupFlags,
    WizardContext,
    wizard_steps,
    run_wizard,
    quick_setup,
)

__all__ = [
    # Theme
    "Theme",
    "console",
    "show_success",
    "show_warning",
    "show_error",
    "show_info",
    # Prompts
    "TerminalPrompter",
    "parse_selection",
    # Wizard
    "SetupFlags",
    "WizardContext",
    "wizard_steps",
    "run_wizard",
    "quick_setup",
]
