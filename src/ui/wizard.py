"""
Setup Wizard - the ordered setup steps.

Each step takes the current SetupConfig and returns the next one; a step
saves the config itself once the user has confirmed its changes. Wallet
modules are imported only after the crypto backend check passes.
"""

import getpass
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Optional

import click
from rich.markup import escape

from exceptions import (
    DependencyError,
    InstallError,
    KeystoreError,
    MissingDependency,
    EntropySourceFailure,
    SetupCancelled,
    USER_CORRECTABLE_ERRORS,
    WrongPasswordOrCorrupted,
)
from models import (
    ConfigStore,
    SetupConfig,
    QUICK_SETUP_SKILLS,
    OPENSKILLS_REGISTRY,
    available_skills,
    default_selection,
    install_skills,
    with_required,
)
from networks import DEFAULT_NETWORK, get_network, network_choices
from services import (
    check_crypto_backend,
    check_dependencies,
    cli_available,
    install_cli,
    missing_required,
    update_shell_profile,
)
from services.installer import run_command
from utils import (
    APP_VERSION,
    get_app_dir,
    get_config_path,
    get_skills_dir,
    get_wallet_dir,
)
from .prompts import TerminalPrompter
from .theme import (
    Theme,
    console,
    print_box,
    print_heading,
    print_logo,
    show_error,
    show_info,
    show_success,
    show_warning,
    spinner,
)

logger = logging.getLogger(__name__)


EXPERIENCE_MODES = [
    ("🌱 Beginner - I'm new to AI agents and Solana", "beginner"),
    ("🚀 Intermediate - Some experience with Web3/AI", "intermediate"),
    ("⚡ Advanced - Power user, give me all options", "advanced"),
]

LOG_LEVELS = [("debug", "debug"), ("info", "info"), ("warning", "warning"), ("error", "error")]

QUICKSTART_SCRIPT = """#!/bin/bash
# OpenClaw Quick Start Script
echo "🚀 Starting OpenClaw..."
openclaw agent start --interactive
"""


@dataclass
class SetupFlags:
    """Command-line switches that gate wizard steps."""
    quick: bool = False
    skip_install: bool = False
    skip_onboarding: bool = False
    skip_wallet: bool = False
    verbose: bool = False


@dataclass
class WizardContext:
    """Paths, flags and the input source for one wizard run."""
    app_dir: Path
    config_store: ConfigStore
    wallet_dir: Path
    skills_dir: Path
    prompter: object = field(default_factory=TerminalPrompter)
    flags: SetupFlags = field(default_factory=SetupFlags)

    @classmethod
    def default(cls, flags: Optional[SetupFlags] = None, prompter=None) -> "WizardContext":
        return cls(
            app_dir=get_app_dir(),
            config_store=ConfigStore(get_config_path()),
            wallet_dir=get_wallet_dir(),
            skills_dir=get_skills_dir(),
            prompter=prompter or TerminalPrompter(),
            flags=flags or SetupFlags(),
        )


Step = Callable[[WizardContext, SetupConfig], SetupConfig]


def _default_user_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "user"


# ============================================
# Steps
# ============================================

def step_welcome(ctx: WizardContext, config: SetupConfig) -> SetupConfig:
    print_logo()
    print_box(
        "[bold]Welcome to OpenClaw Setup![/]\n\n"
        "This wizard will help you:\n"
        "  [cyan]•[/] Install OpenClaw CLI\n"
        "  [cyan]•[/] Configure your environment\n"
        "  [cyan]•[/] Set up AI skills\n"
        "  [cyan]•[/] Configure Solana wallet\n\n"
        "[grey58]Press Ctrl+C at any prompt to save your progress and exit[/]",
        "🚀 Getting Started",
    )
    if not ctx.prompter.confirm("Ready to begin", default=True):
        raise SetupCancelled("Setup cancelled. Run again anytime with: openclaw-setup")
    return config


def step_check_dependencies(ctx: WizardContext, config: SetupConfig) -> SetupConfig:
    print_logo()
    print_heading("📋 Checking System Requirements")

    with spinner("Checking dependencies..."):
        statuses = check_dependencies()

    for status in statuses:
        dep = status.dependency
        kind = "required" if dep.required else "optional"
        if status.ok:
            show_success(f"{dep.name} [grey58]{escape(status.version)}[/]")
        elif status.too_old:
            show_error(f"{dep.name} {escape(status.version)} is too old "
                       f"(need {dep.min_major}+) ({kind})")
        elif dep.required:
            show_error(f"{dep.name} not found ({kind})")
        else:
            show_warning(f"{dep.name} not found ({kind})")

    missing = missing_required(statuses)
    if missing:
        raise DependencyError(missing)

    show_success("All required dependencies available!")
    ctx.prompter.confirm("Continue to installation", default=True)
    return config


def step_install(ctx: WizardContext, config: SetupConfig) -> SetupConfig:
    if config.installed:
        print_logo()
        print_box(
            "[green]✓ OpenClaw is already installed[/]\n\n"
            f"Version: [cyan]{config.version}[/]\n"
            f"Location: [grey58]{ctx.app_dir}[/]",
            "📦 Installation",
        )
        if not ctx.prompter.confirm("Would you like to reinstall or update", default=False):
            show_info("Skipping installation step")
            return config

    print_logo()
    print_heading("📦 Installing OpenClaw")

    method = ctx.prompter.select("Choose installation method", [
        ("npm (recommended)", "npm"),
        ("yarn", "yarn"),
        ("pnpm", "pnpm"),
        ("From source (cargo build)", "source"),
        ("Skip installation", "skip"),
    ], default="npm")

    if method == "skip":
        show_warning("Skipping installation")
        return config

    try:
        with spinner("Installing OpenClaw..."):
            install_cli(method, ctx.app_dir)
    except InstallError as e:
        logger.warning("Installation via %s failed: %s", method, e)
        show_error(f"Installation failed: {e}")
        show_warning("You can retry this step later")
    else:
        config = replace(config, installed=True, install_method=method)
        ctx.config_store.save(config)
        show_success(f"OpenClaw installed at: {ctx.app_dir}")

    ctx.prompter.confirm("Continue", default=True)
    return config


def step_onboarding(ctx: WizardContext, config: SetupConfig) -> SetupConfig:
    prefs = config.preferences
    if config.onboarding_complete:
        print_logo()
        print_box(
            "[green]✓ Onboarding already complete[/]\n\n"
            f"User: [cyan]{escape(str(prefs.get('userName') or 'Anonymous'))}[/]\n"
            f"Mode: [cyan]{escape(str(prefs.get('mode') or 'Standard'))}[/]",
            "👤 Onboarding",
        )
        if not ctx.prompter.confirm("Would you like to reconfigure", default=False):
            show_info("Skipping onboarding")
            return config

    print_logo()
    print_heading("👤 User Onboarding")

    prompter = ctx.prompter
    answers = {
        "userName": prompter.text("What should we call you",
                                  default=prefs.get("userName") or _default_user_name()),
        "mode": prompter.select("Select your experience level", EXPERIENCE_MODES,
                                default=prefs.get("mode") or "intermediate"),
        "telemetry": prompter.confirm("Help improve OpenClaw by sharing anonymous usage data",
                                      default=prefs.get("telemetry") is not False),
        "newsletter": prompter.confirm("Stay updated with OpenClaw news and features",
                                       default=bool(prefs.get("newsletter", False))),
    }

    config = replace(config.with_preferences(**answers), onboarding_complete=True)
    ctx.config_store.save(config)

    show_success("Onboarding complete!")
    print_box(
        f"Welcome, [cyan]{escape(answers['userName'])}[/]!\n\n"
        f"Experience Level: [yellow]{answers['mode']}[/]\n"
        f"Telemetry: {'[green]Enabled[/]' if answers['telemetry'] else '[grey58]Disabled[/]'}\n"
        f"Newsletter: {'[green]Subscribed[/]' if answers['newsletter'] else '[grey58]Not subscribed[/]'}",
        "🎉 Profile Created",
    )
    prompter.confirm("Continue to skills setup", default=True)
    return config


def step_skills(ctx: WizardContext, config: SetupConfig) -> SetupConfig:
    print_logo()
    print_heading("🛠️  Skills Configuration")

    catalog = available_skills()
    has_registry = any(s.name == OPENSKILLS_REGISTRY for s in catalog)
    if has_registry:
        console.print("ℹ️  OpenSkills detected! You can access hundreds of community skills.\n",
                      style=Theme.INFO)

    if config.skills:
        console.print("Currently installed skills:\n", style=Theme.ACCENT)
        for name in config.skills:
            console.print(f"  [green]✓[/] {escape(name)}")
        console.print()

    if not ctx.prompter.confirm("Would you like to set up or modify skills", default=True):
        show_info("Skipping skills setup")
        return config

    selected = ctx.prompter.checkbox(
        "Select skills to install",
        [(f"{s.name} - {s.description}", s.name) for s in catalog],
        checked=default_selection(catalog, config.skills),
    )
    selected = with_required(selected, catalog)

    try:
        with spinner("Installing skills..."):
            install_skills(ctx.skills_dir, selected, catalog)
    except OSError as e:
        logger.warning("Skill installation failed: %s", e)
        show_error(f"Skills installation failed: {e}")
    else:
        config = replace(config, skills=selected)
        ctx.config_store.save(config)
        show_success("Skills installed successfully!")
        for name in selected:
            console.print(f"  [cyan]•[/] {escape(name)}")

        if OPENSKILLS_REGISTRY in selected:
            console.print('\n💡 You can now use "openskills install <skill>" to add more capabilities!',
                          style=Theme.INFO)

    ctx.prompter.confirm("Continue to wallet setup", default=True)
    return config


def _change_wallet_password(ctx: WizardContext, store) -> None:
    """Decrypt with the current password, then re-encrypt with a new one."""
    while True:
        current = ctx.prompter.password("Current wallet password")
        try:
            store.unlock(current)
            break
        except WrongPasswordOrCorrupted:
            show_error("Incorrect password or corrupted keystore.")
            if not ctx.prompter.confirm("Try again", default=True):
                show_info("Reset the wallet from your seed phrase if the password is lost.")
                return

    new_password = ctx.prompter.new_password()
    with spinner("Re-encrypting wallet..."):
        store.change_password(current, new_password)
    show_success("Wallet password changed")


def _build_record(ctx: WizardContext, action: str, network: str):
    """
    Ask for the input the chosen path needs and build the wallet record.

    Re-asks on user-correctable errors; returns None if the user gives up.
    """
    from wallet import (
        CreateWallet,
        ImportPrivateKey,
        ImportSeedPhrase,
        ConnectHardware,
        build_wallet,
    )

    prompter = ctx.prompter
    while True:
        if action == "create":
            intent = CreateWallet()
        elif action == "import-key":
            intent = ImportPrivateKey(prompter.secret("privateKey"))
        elif action == "import-seed":
            intent = ImportSeedPhrase(prompter.secret("mnemonic"))
        elif action == "hardware":
            show_warning("Hardware wallet signing is not supported yet.")
            show_info("Enter the public key of your Ledger/Trezor account:")
            intent = ConnectHardware(prompter.text("Hardware wallet public key"))
        else:
            raise ValueError(f"Unknown wallet action: {action}")

        try:
            return build_wallet(intent, network)
        except USER_CORRECTABLE_ERRORS as e:
            show_error(str(e))
            if not prompter.confirm("Try again", default=True):
                return None


def step_wallet(ctx: WizardContext, config: SetupConfig) -> SetupConfig:
    print_logo()
    print_heading("💰 Solana Wallet Setup")

    backend_error = check_crypto_backend()
    if backend_error is not None:
        show_error(escape(str(backend_error)))
        show_warning("You can configure the wallet later")
        return config

    from wallet import WalletStore, provision_wallet

    prompter = ctx.prompter
    store = WalletStore(ctx.wallet_dir)
    existing = config.wallet

    if existing:
        print_box(
            "[green]✓ Wallet already configured[/]\n\n"
            f"Public Key: [cyan]{existing.get('publicKey')}[/]\n"
            f"Network: [cyan]{existing.get('network') or DEFAULT_NETWORK}[/]\n"
            f"Created: [grey58]{existing.get('createdAt') or 'Unknown'}[/]",
            "🔐 Existing Wallet",
        )
        manage = prompter.select("What would you like to do", [
            ("Keep current wallet", "keep"),
            ("Change wallet password", "change-password"),
            ("Create new wallet (WARNING: replaces existing)", "create"),
            ("Import existing wallet (replaces existing)", "import"),
            ("Connect hardware wallet (replaces existing)", "hardware"),
        ], default="keep")

        if manage == "keep":
            show_info("Keeping existing wallet")
            return config
        if manage == "change-password":
            try:
                _change_wallet_password(ctx, store)
            except (FileNotFoundError, KeystoreError) as e:
                show_error(f"Cannot change password: {e}")
            return config
        if manage == "import":
            action = prompter.select("Import from", [
                ("📥 Private key", "import-key"),
                ("📝 Seed phrase", "import-seed"),
            ], default="import-seed")
        else:
            action = manage
    else:
        print_box(
            "[yellow]⚠️  No wallet configured[/]\n\n"
            "OpenClaw requires a Solana wallet for blockchain operations.\n\n"
            "Options:\n"
            "  [cyan]•[/] Create a new wallet\n"
            "  [cyan]•[/] Import existing wallet (private key/seed)\n"
            "  [cyan]•[/] Connect hardware wallet\n\n"
            "[grey58]You can skip this step, but blockchain features won't work.[/]",
            "💳 Wallet Required",
        )
        action = prompter.select("Choose wallet setup method", [
            ("🆕 Create new wallet", "create"),
            ("📥 Import from private key", "import-key"),
            ("📝 Import from seed phrase", "import-seed"),
            ("🔌 Connect Ledger/Trezor", "hardware"),
            ("⏭️  Skip for now", "skip"),
        ], default="create")

        if action == "skip":
            show_warning("Skipping wallet setup. Blockchain features disabled.")
            return config

    network = prompter.select("Select Solana network", network_choices(),
                              default=(existing or {}).get("network") or DEFAULT_NETWORK)

    try:
        record = _build_record(ctx, action, network)
        if record is None:
            show_warning("You can configure the wallet later")
            return config

        saved = []

        def persist(entry):
            # keystore and config must name the same wallet before the phrase is shown
            store.save(entry)
            saved.append(replace(config, wallet={**entry.summary(), "keystore": str(store.wallet_path)}))
            ctx.config_store.save(saved[0])

        if record.has_secret:
            console.print("\n🔐 Securing your wallet\n", style=Theme.WARNING)
        entry = provision_wallet(
            record,
            collect_password=prompter.new_password,
            persist=persist,
            show_mnemonic=prompter.show_mnemonic,
        )
    except (MissingDependency, EntropySourceFailure) as e:
        logger.error("Wallet setup aborted: %s", e)
        show_error(f"Wallet setup failed: {e}")
        show_warning("You can configure the wallet later")
        return config

    config = saved[0]
    show_success("Wallet configured successfully!")
    print_box(
        "[bold]Wallet Details[/]\n\n"
        f"Public Key: [cyan]{entry.public_key}[/]\n"
        f"Network: [cyan]{entry.network}[/]\n"
        f"Type: [cyan]{entry.wallet_type}[/]\n"
        f"Explorer: [grey58]{get_network(entry.network).explorer_url}[/]",
        "🔐 Wallet Ready",
    )
    prompter.confirm("Continue", default=True)
    return config


def step_final_configuration(ctx: WizardContext, config: SetupConfig) -> SetupConfig:
    print_logo()
    print_heading("⚙️  Final Configuration")

    prompter = ctx.prompter
    if prompter.confirm("Would you like to configure advanced settings", default=False):
        prefs = config.preferences
        advanced = {
            "rpcEndpoint": prompter.text("Custom RPC endpoint (leave empty for default)",
                                         default=prefs.get("rpcEndpoint") or ""),
            "logLevel": prompter.select("Log level", LOG_LEVELS,
                                        default=prefs.get("logLevel") or "info"),
            "autoUpdate": prompter.confirm("Automatically check for updates",
                                           default=prefs.get("autoUpdate") is not False),
        }
        config = config.with_preferences(**advanced)
        ctx.config_store.save(config)

    show_success("Configuration complete!")
    return config


def write_quickstart(app_dir: Path) -> Path:
    """Write the executable quickstart.sh helper."""
    path = app_dir / "quickstart.sh"
    path.write_text(QUICKSTART_SCRIPT, encoding="utf-8")
    os.chmod(path, 0o755)
    return path


def _mark(ok: bool) -> str:
    return "[green]✓[/]" if ok else "[red]✗[/]"


def step_summary(ctx: WizardContext, config: SetupConfig) -> SetupConfig:
    print_logo()
    print_heading("🎉 Setup Complete!")

    print_box(
        "[bold]Installation Status:[/]\n"
        f"  {_mark(config.installed)} OpenClaw CLI\n"
        f"  {_mark(config.onboarding_complete)} User Profile\n"
        f"  {_mark(bool(config.skills))} Skills ({len(config.skills)} installed)\n"
        f"  {_mark(bool(config.wallet))} Solana Wallet\n\n"
        "[bold]Configuration Location:[/]\n"
        f"  [grey58]{ctx.app_dir}[/]\n\n"
        "[bold]Next Steps:[/]\n"
        "  [cyan]1.[/] Run [yellow]openclaw --help[/] to see available commands\n"
        "  [cyan]2.[/] Try [yellow]openclaw agent start[/] to launch your first agent\n"
        "  [cyan]3.[/] Visit [cyan]https://docs.openclaw.io[/] for documentation",
        "🚀 OpenClaw Ready!",
    )

    quickstart = write_quickstart(ctx.app_dir)
    show_info(f"Quick start script created: {quickstart}")

    if ctx.prompter.confirm("Launch OpenClaw now", default=False):
        if cli_available():
            try:
                version = run_command(["openclaw", "--version"]).strip()
                show_success(f"OpenClaw is ready to use! {escape(version)}")
            except InstallError as e:
                show_error(f"OpenClaw did not start: {e}")
        else:
            show_warning("OpenClaw CLI not found in PATH")
            if ctx.prompter.confirm(f"Add {ctx.app_dir} to PATH in your shell profile", default=True):
                profile = update_shell_profile(ctx.app_dir)
                if profile:
                    show_success(f"Updated {profile}. Run: source {profile}")
                else:
                    show_info("Your shell profile already includes OpenClaw")
            else:
                show_info(f'Add this to your shell profile:\n  export PATH="{ctx.app_dir}:$PATH"')

    console.print("\n👋 Thank you for installing OpenClaw!\n", style=Theme.SUCCESS)
    return config


# ============================================
# Runners
# ============================================

def wizard_steps(flags: SetupFlags) -> list[Step]:
    """The steps to run for the given flags, in order."""
    steps: list[Step] = []
    if not flags.skip_install:
        steps += [step_welcome, step_check_dependencies, step_install]
    if not flags.skip_onboarding:
        steps.append(step_onboarding)
    steps.append(step_skills)
    if not flags.skip_wallet:
        steps.append(step_wallet)
    steps += [step_final_configuration, step_summary]
    return steps


def _save_progress(ctx: WizardContext, config: SetupConfig) -> None:
    try:
        ctx.config_store.save(config)
    except OSError as e:
        logger.error("Could not save progress: %s", e)


def run_wizard(ctx: WizardContext) -> SetupConfig:
    """
    Run every enabled step, threading the config through them.

    The config is saved whenever a finished step changed it. A step saves
    its own confirmed changes, so on Ctrl+C the file already holds the
    last confirmed state and click.Abort is re-raised without writing the
    older in-memory config over it.
    """
    config = ctx.config_store.load()
    checkpoint = config
    for step in wizard_steps(ctx.flags):
        if config != checkpoint:
            _save_progress(ctx, config)
            checkpoint = config
        logger.debug("Running step %s", step.__name__)
        try:
            config = step(ctx, config)
        except (click.Abort, KeyboardInterrupt):
            logger.info("Setup interrupted during %s", step.__name__)
            raise click.Abort()
    if config != checkpoint:
        _save_progress(ctx, config)
    return config


def quick_setup(ctx: WizardContext) -> SetupConfig:
    """Initialise directories and a default config without prompts."""
    print_logo()
    console.print("🚀 Quick Setup Mode\n", style=Theme.SUCCESS)

    config = ctx.config_store.load()
    for directory in (ctx.app_dir, ctx.wallet_dir, ctx.skills_dir):
        directory.mkdir(parents=True, exist_ok=True)

    install_skills(ctx.skills_dir, QUICK_SETUP_SKILLS, available_skills(include_openskills=False))
    config = replace(
        config.with_preferences(
            userName=_default_user_name(),
            mode="intermediate",
            telemetry=True,
        ),
        installed=True,
        onboarding_complete=True,
        skills=list(QUICK_SETUP_SKILLS),
        version=APP_VERSION,
    )
    ctx.config_store.save(config)

    show_success("Configuration initialized")
    show_success("Default skills configured")
    show_warning("Run without --quick flag to set up wallet")
    return config
