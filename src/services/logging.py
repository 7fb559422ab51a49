"""
Logging - Application logging configuration and disk persistence.

Provides:
- Python logging configuration with console and daily file output
- Log persistence to daily files: setup-YYYY-MM-DD.log
- Automatic cleanup of old log files
- Redaction of anything that looks like a secret key or seed phrase
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional
import logging
import re

from utils import get_logs_dir


LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DEFAULT_RETENTION_DAYS = 14

# 64-byte secret keys: 128 hex chars or ~88 base58 chars
_HEX_SECRET_RE = re.compile(r'\b(?:0x)?[0-9a-fA-F]{64,}\b')
_BASE58_SECRET_RE = re.compile(r'\b[1-9A-HJ-NP-Za-km-z]{64,}\b')
# Twelve or more lowercase words in a row
_PHRASE_RE = re.compile(r'\b[a-z]{3,8}(?: [a-z]{3,8}){11,}\b')

REDACTED = '[REDACTED]'


def redact(text: str) -> str:
    """Mask secret-looking substrings in a log message."""
    text = _HEX_SECRET_RE.sub(REDACTED, text)
    text = _BASE58_SECRET_RE.sub(REDACTED, text)
    return _PHRASE_RE.sub(REDACTED, text)


class RedactSecretsFilter(logging.Filter):
    """Rewrites log records so secrets never reach a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


def configure_logging(verbose: bool = False, log_to_file: bool = True,
                      retention_days: int = DEFAULT_RETENTION_DAYS) -> None:
    """
    Configure Python logging for the setup wizard.

    The console only shows warnings (debug with verbose) so prompts stay
    readable; the daily log file records everything.

    Args:
        verbose: Show debug output on the console
        log_to_file: Also write to today's log file
        retention_days: Delete log files older than this
    """
    root_logger = logging.getLogger()

    # Only configure if not already configured
    if root_logger.handlers:
        return

    root_logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')
    redactor = RedactSecretsFilter()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(redactor)
    root_logger.addHandler(console_handler)

    if log_to_file:
        cleanup_old_logs(retention_days)
        file_handler = logging.FileHandler(get_log_file_path(), encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        file_handler.addFilter(redactor)
        root_logger.addHandler(file_handler)


def get_log_file_path(date: Optional[datetime] = None) -> Path:
    """Get the log file path for a specific date (defaults to today)."""
    if date is None:
        date = datetime.now()
    filename = f"setup-{date.strftime('%Y-%m-%d')}.log"
    return get_logs_dir() / filename


def cleanup_old_logs(retention_days: int) -> int:
    """
    Delete log files older than retention_days.

    Args:
        retention_days: Delete files older than this (0 = delete all)

    Returns:
        Number of files deleted
    """
    if retention_days < 0:
        return 0

    logs_dir = get_logs_dir()
    cutoff_date = datetime.now() - timedelta(days=retention_days)
    deleted_count = 0

    for file_path in logs_dir.glob("setup-*.log"):
        # Parse date from filename
        try:
            date_str = file_path.stem.replace("setup-", "")
            file_date = datetime.strptime(date_str, "%Y-%m-%d")

            if file_date < cutoff_date:
                file_path.unlink()
                deleted_count += 1
        except (ValueError, OSError):
            # Skip files that don't match expected format
            pass

    return deleted_count
