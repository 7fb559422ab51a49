"""
Installer - System dependency checks and OpenClaw CLI installation.

Provides:
- Version checks for node, npm, git and cargo
- CLI installation via npm / yarn / pnpm or a cargo source build
- Shell profile PATH update for source installs
"""

import logging
import os
import re
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from exceptions import InstallError

logger = logging.getLogger(__name__)


MIN_NODE_MAJOR = 18

CLI_PACKAGE = "@openclaw/cli"
CLI_BINARY = "openclaw"
SOURCE_REPO = "https://github.com/openclaw/openclaw.git"

INSTALL_COMMANDS = {
    "npm": ["npm", "install", "-g", CLI_PACKAGE],
    "yarn": ["yarn", "global", "add", CLI_PACKAGE],
    "pnpm": ["pnpm", "add", "-g", CLI_PACKAGE],
}
INSTALL_METHODS = ("npm", "yarn", "pnpm", "source")

PROFILE_MARKER = "# OpenClaw CLI"


# ============================================
# Dependency Checks
# ============================================

@dataclass
class Dependency:
    """A system tool the setup checks for."""
    name: str
    version_args: tuple[str, ...]
    required: bool
    min_major: Optional[int] = None


@dataclass
class DependencyStatus:
    """Result of checking one dependency."""
    dependency: Dependency
    installed: bool
    version: str = ""
    too_old: bool = False

    @property
    def ok(self) -> bool:
        return self.installed and not self.too_old


DEPENDENCIES = [
    Dependency("node", ("--version",), required=True, min_major=MIN_NODE_MAJOR),
    Dependency("npm", ("--version",), required=True),
    Dependency("git", ("--version",), required=False),
    Dependency("cargo", ("--version",), required=False),
]


def parse_major_version(version: str) -> Optional[int]:
    """Extract the major version from output like 'v20.11.1' or 'git version 2.43.0'."""
    match = re.search(r'(\d+)\.\d+', version)
    if match:
        return int(match.group(1))
    return None


def check_dependency(dep: Dependency) -> DependencyStatus:
    """Run the tool's version command and report what was found."""
    if shutil.which(dep.name) is None:
        return DependencyStatus(dep, installed=False)

    try:
        result = subprocess.run(
            [dep.name, *dep.version_args],
            capture_output=True, text=True, timeout=30, check=True,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Version check for %s failed: %s", dep.name, e)
        return DependencyStatus(dep, installed=False)

    version = result.stdout.strip() or result.stderr.strip()
    too_old = False
    if dep.min_major is not None:
        major = parse_major_version(version)
        too_old = major is None or major < dep.min_major

    return DependencyStatus(dep, installed=True, version=version, too_old=too_old)


def check_dependencies(deps: Optional[list[Dependency]] = None) -> list[DependencyStatus]:
    """Check every dependency in order."""
    return [check_dependency(dep) for dep in (deps or DEPENDENCIES)]


def missing_required(statuses: list[DependencyStatus]) -> list[str]:
    """Names of required dependencies that are missing or too old."""
    return [s.dependency.name for s in statuses if s.dependency.required and not s.ok]


# ============================================
# Installation
# ============================================

def run_command(args: list[str], cwd: Optional[Path] = None) -> str:
    """
    Run a command, returning its stdout.

    Raises:
        InstallError: If the command is missing or exits non-zero
    """
    logger.debug("Running: %s", " ".join(args))
    try:
        result = subprocess.run(
            args, cwd=cwd, capture_output=True, text=True, check=True,
        )
    except FileNotFoundError as e:
        raise InstallError(f"Command not found: {args[0]}") from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip().splitlines()
        suffix = f": {detail[-1]}" if detail else ""
        raise InstallError(f"Command failed with code {e.returncode}{suffix}") from e
    return result.stdout


def install_cli(method: str, app_dir: Path) -> Optional[Path]:
    """
    Install the OpenClaw CLI.

    Args:
        method: One of INSTALL_METHODS
        app_dir: Setup directory; source builds copy the binary here

    Returns:
        Path to the built binary for source installs, else None
    """
    if method in INSTALL_COMMANDS:
        run_command(INSTALL_COMMANDS[method])
        logger.info("Installed %s via %s", CLI_PACKAGE, method)
        return None

    if method != "source":
        raise ValueError(f"Unknown install method: {method}")

    app_dir.mkdir(parents=True, exist_ok=True)
    build_dir = Path(tempfile.mkdtemp(prefix="openclaw-build-"))
    try:
        checkout = build_dir / "openclaw"
        run_command(["git", "clone", "--depth", "1", SOURCE_REPO, str(checkout)])
        run_command(["cargo", "build", "--release"], cwd=checkout)
        binary = checkout / "target" / "release" / CLI_BINARY
        if not binary.exists():
            raise InstallError(f"Build finished but {binary.name} was not produced")
        target = app_dir / CLI_BINARY
        shutil.copy2(binary, target)
    finally:
        shutil.rmtree(build_dir, ignore_errors=True)

    logger.info("Built %s from source into %s", CLI_BINARY, target)
    return target


def cli_available() -> bool:
    """Check if the openclaw CLI is on PATH."""
    return shutil.which(CLI_BINARY) is not None


# ============================================
# Shell Profile
# ============================================

def detect_shell_profile(shell: Optional[str] = None, home: Optional[Path] = None) -> Path:
    """Pick the rc file for the user's login shell."""
    shell = shell if shell is not None else os.environ.get("SHELL", "")
    home = home or Path.home()

    if shell.endswith("/zsh"):
        return home / ".zshrc"
    if shell.endswith("/bash"):
        bashrc = home / ".bashrc"
        return bashrc if bashrc.exists() else home / ".bash_profile"
    if shell.endswith("/fish"):
        return home / ".config" / "fish" / "config.fish"
    return home / ".profile"


def path_export_line(bin_dir: Path, profile: Path) -> str:
    if profile.name == "config.fish":
        return f'set -gx PATH "{bin_dir}" $PATH'
    return f'export PATH="{bin_dir}:$PATH"'


def update_shell_profile(bin_dir: Path, profile: Optional[Path] = None) -> Optional[Path]:
    """
    Append bin_dir to PATH in the shell profile.

    Returns:
        The updated profile, or None if it already mentioned bin_dir
    """
    profile = profile or detect_shell_profile()
    existing = profile.read_text(encoding='utf-8') if profile.exists() else ""
    if str(bin_dir) in existing:
        return None

    profile.parent.mkdir(parents=True, exist_ok=True)
    with open(profile, 'a', encoding='utf-8') as f:
        f.write(f"\n{PROFILE_MARKER}\n{path_export_line(bin_dir, profile)}\n")

    logger.info("Added %s to PATH in %s", bin_dir, profile)
    return profile
