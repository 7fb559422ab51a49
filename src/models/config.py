"""
Setup Config - the single configuration record for a wizard run.

SetupConfig is passed into each wizard step and a new value is returned;
ConfigStore persists it to config.json.
"""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

from utils import APP_VERSION, write_json_atomic

logger = logging.getLogger(__name__)


# JSON key -> attribute
_FIELDS = {
    "version": "version",
    "installed": "installed",
    "installMethod": "install_method",
    "wallet": "wallet",
    "skills": "skills",
    "preferences": "preferences",
    "onboardingComplete": "onboarding_complete",
}


@dataclass
class SetupConfig:
    """Configuration persisted in config.json."""
    version: str = APP_VERSION
    installed: bool = False
    install_method: Optional[str] = None
    wallet: Optional[dict] = None          # KeystoreEntry.summary() + keystore path
    skills: list[str] = field(default_factory=list)
    preferences: dict[str, Any] = field(default_factory=dict)
    onboarding_complete: bool = False
    extra: dict[str, Any] = field(default_factory=dict)  # Unknown keys, kept on save

    def to_dict(self) -> dict:
        data = dict(self.extra)
        for key, attr in _FIELDS.items():
            value = getattr(self, attr)
            if attr == "install_method" and value is None:
                continue
            data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SetupConfig":
        """Merge stored values over the defaults."""
        kwargs = {}
        extra = {}
        for key, value in data.items():
            if key in _FIELDS:
                kwargs[_FIELDS[key]] = value
            else:
                extra[key] = value

        config = cls(**kwargs)
        config.extra = extra
        if not isinstance(config.skills, list):
            config.skills = []
        if not isinstance(config.preferences, dict):
            config.preferences = {}
        return config

    def with_preferences(self, **updates) -> "SetupConfig":
        """Copy with preferences merged."""
        return replace(self, preferences={**self.preferences, **updates})


class ConfigStore:
    """Loads and saves the setup config file."""

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)

    def exists(self) -> bool:
        return self.config_path.exists()

    def load(self) -> SetupConfig:
        """Load config, falling back to defaults if missing or unreadable."""
        if not self.config_path.exists():
            return SetupConfig()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("config root is not an object")
            return SetupConfig.from_dict(data)
        except (json.JSONDecodeError, ValueError, TypeError) as e:
            logger.warning(f"Could not load existing config: {e}")
            return SetupConfig()

    def save(self, config: SetupConfig) -> None:
        """Save config to disk."""
        write_json_atomic(self.config_path, config.to_dict(), secure=True)
        logger.debug("Saved config to %s", self.config_path)
