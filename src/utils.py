"""
Shared utility functions for OpenClaw Setup.

Contains path helpers, file permission handling and atomic JSON writes
used across packages.
"""

import json
import os
from pathlib import Path


APP_NAME = "openclaw-setup"
APP_VERSION = "1.0.0"

# Overrides the per-user data directory (used by tests and CI)
APP_DIR_ENV = "OPENCLAW_HOME"

# Secure file permissions (Unix only)
SECURE_FILE_MODE = 0o600  # Owner read/write only

# Wallet passwords shorter than this are rejected
MIN_PASSWORD_LENGTH = 8


def get_app_dir() -> Path:
    """Get the per-user application directory (~/.openclaw)."""
    override = os.environ.get(APP_DIR_ENV)
    if override:
        app_dir = Path(override).expanduser()
    else:
        app_dir = Path.home() / ".openclaw"

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_config_path() -> Path:
    """Get path to the setup configuration file."""
    return get_app_dir() / "config.json"


def get_wallet_dir() -> Path:
    """Get the wallet storage directory."""
    return get_app_dir() / "wallets"


def get_skills_dir() -> Path:
    """Get the directory holding installed skill manifests."""
    return get_app_dir() / "skills"


def get_logs_dir() -> Path:
    """Get the logs directory."""
    logs_dir = get_app_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def set_secure_permissions(filepath: Path) -> None:
    """
    Set restrictive file permissions on Unix systems.

    Sets file to mode 0600 (owner read/write only) to protect wallet and
    configuration data. No-op on Windows (NTFS uses ACLs, not Unix permissions).
    """
    if os.name == 'posix':
        try:
            os.chmod(filepath, SECURE_FILE_MODE)
        except OSError:
            # Best effort - don't fail save operation if chmod fails
            pass


def write_json_atomic(filepath: str | Path, data, secure: bool = True) -> None:
    """
    Write JSON to a file in a single atomic replace.

    The data is written to a sibling temp file first, so readers only ever
    see the old content or the complete new content.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    temp_path = filepath.with_suffix(filepath.suffix + '.tmp')
    mode = SECURE_FILE_MODE if secure else 0o666
    fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
            f.write('\n')
        if secure:
            # mode is only applied on create; a stale temp file keeps its own
            set_secure_permissions(temp_path)
        temp_path.replace(filepath)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
