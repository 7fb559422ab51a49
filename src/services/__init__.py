"""
Services package - Backend services for OpenClaw Setup.

Contains:
- configure_logging: Console and daily file logging
- check_crypto_backend: Startup capability check
- Installer helpers: dependency checks, CLI install, shell profile
"""

from .logging import configure_logging, RedactSecretsFilter, redact
from .backend import check_crypto_backend
from .installer import (
    DEPENDENCIES,
    INSTALL_METHODS,
    check_dependencies,
    missing_required,
    install_cli,
    cli_available,
    update_shell_profile,
)

__all__ = [
    "configure_logging",
    "RedactSecretsFilter",
    "redact",
    "check_crypto_backend",
    "DEPENDENCIES",
    "INSTALL_METHODS",
    "check_dependencies",
    "missing_required",
    "install_cli",
    "cli_available",
    "update_shell_profile",
]
