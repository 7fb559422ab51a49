"""
Models package - Data models for OpenClaw Setup.

Contains:
- SetupConfig: The configuration record threaded through the wizard
- ConfigStore: JSON persistence for config.json
- Skill, SkillManifest: Capability catalog and manifests
"""

from .config import SetupConfig, ConfigStore
from .skills import (
    Skill,
    SkillManifest,
    SKILL_CATALOG,
    OPENSKILLS_REGISTRY,
    QUICK_SETUP_SKILLS,
    available_skills,
    default_selection,
    with_required,
    install_skills,
)

__all__ = [
    "SetupConfig",
    "ConfigStore",
    "Skill",
    "SkillManifest",
    "SKILL_CATALOG",
    "OPENSKILLS_REGISTRY",
    "QUICK_SETUP_SKILLS",
    "available_skills",
    "default_selection",
    "with_required",
    "install_skills",
]
