"""
Skills - catalog of optional capability modules and their manifests.

Installing a skill stamps skills/<name>/manifest.json; the OpenClaw CLI
reads the manifests at runtime.
"""

import logging
import shutil
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from utils import write_json_atomic

logger = logging.getLogger(__name__)


SKILL_VERSION = "1.0.0"
OPENSKILLS_REGISTRY = "openskills-registry"
QUICK_SETUP_SKILLS = ["solana-agent-kit", "web-search"]


@dataclass
class Skill:
    """An installable capability module."""
    name: str
    description: str
    category: str
    source: str
    required: bool = False


@dataclass
class SkillManifest:
    """Contents of a skill's manifest.json."""
    name: str
    version: str
    category: str
    source: str
    installed_at: str
    config: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["installedAt"] = d.pop("installed_at")
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "SkillManifest":
        return cls(
            name=data["name"],
            version=data.get("version", SKILL_VERSION),
            category=data.get("category", "general"),
            source=data.get("source", "local"),
            installed_at=data.get("installedAt", ""),
            config=data.get("config", {}),
        )


SKILL_CATALOG = [
    Skill("solana-agent-kit", "Core Solana blockchain interactions", "blockchain", "built-in", required=True),
    Skill("web-search", "Exa/Web search capabilities", "web", "built-in"),
    Skill("code-analysis", "Code understanding and refactoring", "development", "built-in"),
    Skill("twitter", "Twitter/X integration for social features", "social", "built-in"),
    Skill("image-generation", "AI image generation with Gemini", "ai", "built-in"),
    Skill("github", "GitHub repository operations", "development", "built-in"),
    Skill("sentient-logger", "Advanced logging and monitoring", "utility", "built-in"),
    # sendaifun plugins
    Skill("solana-agent-kit-plugin-defi", "DeFi (Jupiter, Drift, Adrena, Flash) trading capabilities", "trading", "sendaifun"),
    Skill("solana-agent-kit-plugin-nft", "NFT Management (Metaplex, Tensor, 3Land)", "nft", "sendaifun"),
    Skill("solana-agent-kit-plugin-token", "Advanced Token Operations (Swaps, Limit Orders)", "trading", "sendaifun"),
    Skill("solana-agent-kit-plugin-blinks", "Solana Actions & Blinks integration", "utility", "sendaifun"),
    # Curated community skills
    Skill("solana-trader-pro", "Advanced trading analysis & execution (Community)", "trading", "community"),
    Skill("nft-sniper", "Monitor and snipe NFT collections (Community)", "nft", "community"),
    Skill("dao-governance", "Automate DAO proposal analysis & voting (Community)", "governance", "community"),
]


def openskills_available() -> bool:
    """Check if the OpenSkills CLI is on PATH."""
    return shutil.which("openskills") is not None


def available_skills(include_openskills: Optional[bool] = None) -> list[Skill]:
    """The catalog, plus the OpenSkills registry entry when it is installed."""
    skills = list(SKILL_CATALOG)
    if include_openskills is None:
        include_openskills = openskills_available()
    if include_openskills:
        skills.append(Skill(
            OPENSKILLS_REGISTRY,
            "Access 100+ community skills via OpenSkills",
            "ecosystem",
            "openskills",
        ))
    return skills


def default_selection(skills: list[Skill], installed: list[str]) -> list[str]:
    """Names pre-checked in the selection menu."""
    return [s.name for s in skills if s.required or s.name in installed]


def with_required(selected: list[str], skills: list[Skill]) -> list[str]:
    """Add required skills the user unticked, keeping catalog order."""
    chosen = set(selected) | {s.name for s in skills if s.required}
    return [s.name for s in skills if s.name in chosen]


def install_skills(skills_dir: Path, selected: list[str],
                   catalog: Optional[list[Skill]] = None) -> list[SkillManifest]:
    """
    Write a manifest for each selected skill.

    The OpenSkills registry entry is a runtime, not a skill, and gets no
    manifest.
    """
    catalog = catalog if catalog is not None else available_skills()
    by_name = {s.name: s for s in catalog}
    installed_at = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    manifests = []
    for name in selected:
        if name == OPENSKILLS_REGISTRY:
            continue

        skill = by_name.get(name)
        manifest = SkillManifest(
            name=name,
            version=SKILL_VERSION,
            category=skill.category if skill else "general",
            source=skill.source if skill else "local",
            installed_at=installed_at,
        )
        write_json_atomic(skills_dir / name / "manifest.json", manifest.to_dict(), secure=False)
        manifests.append(manifest)

    logger.info("Installed %d skill manifest(s)", len(manifests))
    return manifests
