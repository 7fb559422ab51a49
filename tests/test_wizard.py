"""Tests for the setup wizard steps, driven by a scripted prompter."""

import json
import os
import stat
from dataclasses import replace

import click
import pytest
from click.testing import CliRunner

import app
from exceptions import DependencyError, InstallError, MissingDependency, SetupCancelled
from models import SetupConfig, available_skills
from services.installer import DEPENDENCIES, DependencyStatus
from ui import SetupFlags, quick_setup, run_wizard, wizard, wizard_steps
from ui.wizard import (
    step_check_dependencies,
    step_install,
    step_onboarding,
    step_skills,
    step_summary,
    step_wallet,
    step_welcome,
)
from wallet import ImportSeedPhrase, WalletStore, build_wallet, secure_wallet
from wallet.lifecycle import keypair_from_phrase
from tests.conftest import ABANDON_PHRASE, PASSWORD, ZERO_PUBLIC_KEY, FakePrompter


BAD_PHRASE = " ".join(["abandon"] * 12)


def _saved_config(ctx) -> dict:
    return json.loads(ctx.config_store.config_path.read_text())


class MnemonicAbortPrompter(FakePrompter):
    """Presses Ctrl+C while the new mnemonic is on screen."""

    def show_mnemonic(self, phrase: str) -> None:
        super().show_mnemonic(phrase)
        raise click.Abort()


# ─────────────────────────────────────────────────────────────────────────────
# Step Order
# ─────────────────────────────────────────────────────────────────────────────


class TestWizardSteps:
    """Tests for flag-driven step selection."""

    def test_full_run(self) -> None:
        assert wizard_steps(SetupFlags()) == [
            step_welcome,
            step_check_dependencies,
            step_install,
            step_onboarding,
            step_skills,
            step_wallet,
            wizard.step_final_configuration,
            step_summary,
        ]

    def test_skip_flags(self) -> None:
        steps = wizard_steps(SetupFlags(skip_install=True, skip_onboarding=True, skip_wallet=True))
        assert steps == [step_skills, wizard.step_final_configuration, step_summary]


# ─────────────────────────────────────────────────────────────────────────────
# Early Steps
# ─────────────────────────────────────────────────────────────────────────────


class TestEarlySteps:
    """Tests for welcome, dependency and install steps."""

    def test_welcome_declined(self, make_context) -> None:
        ctx = make_context(FakePrompter([False]))
        with pytest.raises(SetupCancelled):
            step_welcome(ctx, SetupConfig())

    def test_missing_required_dependency(self, make_context, monkeypatch) -> None:
        statuses = [DependencyStatus(dep, installed=dep.name != "node", version="1.0")
                    for dep in DEPENDENCIES]
        monkeypatch.setattr(wizard, "check_dependencies", lambda: statuses)
        with pytest.raises(DependencyError) as exc_info:
            step_check_dependencies(make_context(FakePrompter()), SetupConfig())
        assert exc_info.value.missing == ["node"]

    def test_dependencies_ok(self, make_context, monkeypatch) -> None:
        statuses = [DependencyStatus(dep, installed=True, version="v20.0.0") for dep in DEPENDENCIES]
        monkeypatch.setattr(wizard, "check_dependencies", lambda: statuses)
        config = SetupConfig()
        assert step_check_dependencies(make_context(FakePrompter()), config) is config

    def test_install_success(self, make_context, monkeypatch) -> None:
        calls = []
        monkeypatch.setattr(wizard, "install_cli", lambda method, app_dir: calls.append(method))
        ctx = make_context(FakePrompter(["pnpm"]))

        config = step_install(ctx, SetupConfig())

        assert calls == ["pnpm"]
        assert config.installed
        assert _saved_config(ctx)["installMethod"] == "pnpm"

    def test_install_failure_keeps_config(self, make_context, monkeypatch) -> None:
        def fail(method, app_dir):
            raise InstallError("Command failed with code 1")

        monkeypatch.setattr(wizard, "install_cli", fail)
        ctx = make_context(FakePrompter(["npm"]))

        config = step_install(ctx, SetupConfig())

        assert not config.installed
        assert not ctx.config_store.exists()

    def test_already_installed_skips(self, make_context, monkeypatch) -> None:
        monkeypatch.setattr(wizard, "install_cli", lambda *a: pytest.fail("should not install"))
        config = SetupConfig(installed=True)
        assert step_install(make_context(FakePrompter([False])), config) is config


# ─────────────────────────────────────────────────────────────────────────────
# Profile and Skills
# ─────────────────────────────────────────────────────────────────────────────


class TestProfileAndSkills:
    """Tests for onboarding and skills steps."""

    def test_onboarding(self, make_context) -> None:
        ctx = make_context(FakePrompter(["sam", "advanced", False, True]))
        config = step_onboarding(ctx, SetupConfig(preferences={"logLevel": "debug"}))

        assert config.onboarding_complete
        assert config.preferences == {
            "logLevel": "debug",
            "userName": "sam",
            "mode": "advanced",
            "telemetry": False,
            "newsletter": True,
        }
        assert _saved_config(ctx)["onboardingComplete"] is True

    def test_skills_adds_required(self, make_context, monkeypatch) -> None:
        catalog = available_skills(include_openskills=False)
        monkeypatch.setattr(wizard, "available_skills", lambda: catalog)
        ctx = make_context(FakePrompter([True, ["web-search"]]))

        config = step_skills(ctx, SetupConfig())

        assert config.skills == ["solana-agent-kit", "web-search"]
        assert (ctx.skills_dir / "solana-agent-kit" / "manifest.json").exists()
        assert (ctx.skills_dir / "web-search" / "manifest.json").exists()

    def test_skills_declined(self, make_context) -> None:
        config = SetupConfig(skills=["github"])
        assert step_skills(make_context(FakePrompter([False])), config) is config


# ─────────────────────────────────────────────────────────────────────────────
# Wallet Step
# ─────────────────────────────────────────────────────────────────────────────


class TestWalletStep:
    """Tests for wallet provisioning through the wizard."""

    def test_create(self, make_context) -> None:
        prompter = FakePrompter(["create", "devnet"])
        ctx = make_context(prompter)

        config = step_wallet(ctx, SetupConfig())

        store = WalletStore(ctx.wallet_dir)
        entry = store.load()
        assert prompter.password_calls == 1
        assert len(prompter.shown_mnemonics) == 1
        assert config.wallet["publicKey"] == entry.public_key
        assert config.wallet["network"] == "devnet"
        assert config.wallet["keystore"] == str(store.wallet_path)

        saved = _saved_config(ctx)
        assert "encryptedKey" not in saved["wallet"]
        assert prompter.shown_mnemonics[0] not in json.dumps(saved)

    def test_import_seed_retries_bad_phrase(self, make_context) -> None:
        prompter = FakePrompter(["import-seed", "testnet", BAD_PHRASE, True, ABANDON_PHRASE])
        ctx = make_context(prompter)

        config = step_wallet(ctx, SetupConfig())

        assert config.wallet["type"] == "imported"
        assert config.wallet["network"] == "testnet"
        assert WalletStore(ctx.wallet_dir).unlock(PASSWORD) == keypair_from_phrase(ABANDON_PHRASE)
        assert prompter.shown_mnemonics == []

    def test_import_key_gives_up(self, make_context) -> None:
        prompter = FakePrompter(["import-key", "devnet", "not a key!", False])
        ctx = make_context(prompter)
        config = SetupConfig()

        assert step_wallet(ctx, config) is config
        assert prompter.password_calls == 0
        assert not WalletStore(ctx.wallet_dir).exists()

    def test_hardware(self, make_context) -> None:
        prompter = FakePrompter(["hardware", "mainnet-beta", ZERO_PUBLIC_KEY])
        ctx = make_context(prompter)

        config = step_wallet(ctx, SetupConfig())

        assert prompter.password_calls == 0
        assert config.wallet["type"] == "hardware"
        assert config.wallet["network"] == "mainnet-beta"
        assert WalletStore(ctx.wallet_dir).load().encrypted_key is None

    def test_skip(self, make_context) -> None:
        config = SetupConfig()
        assert step_wallet(make_context(FakePrompter(["skip"])), config) is config

    def test_interrupt_at_mnemonic_keeps_config_in_step(self, make_context, monkeypatch) -> None:
        prompter = MnemonicAbortPrompter(["create", "devnet"])
        ctx = make_context(prompter)
        monkeypatch.setattr(wizard, "wizard_steps", lambda flags: [step_wallet])

        with pytest.raises(click.Abort):
            run_wizard(ctx)

        entry = WalletStore(ctx.wallet_dir).load()
        saved = _saved_config(ctx)["wallet"]
        assert saved["publicKey"] == entry.public_key
        assert saved["network"] == "devnet"
        assert prompter.password_calls == 1

    def test_backend_missing(self, make_context, monkeypatch) -> None:
        monkeypatch.setattr(wizard, "check_crypto_backend", lambda: MissingDependency(["PyNaCl"]))
        prompter = FakePrompter(["create", "devnet"])
        config = SetupConfig()

        assert step_wallet(make_context(prompter), config) is config
        assert prompter.asked == []


@pytest.fixture
def existing_wallet(make_context):
    """A context whose config and keystore already hold a wallet."""

    def _make(prompter: FakePrompter):
        ctx = make_context(prompter)
        store = WalletStore(ctx.wallet_dir)
        entry = secure_wallet(build_wallet(ImportSeedPhrase(ABANDON_PHRASE)), PASSWORD)
        store.save(entry)
        config = SetupConfig(wallet={**entry.summary(), "keystore": str(store.wallet_path)})
        return ctx, store, config

    return _make


class TestExistingWallet:
    """Tests for managing an already configured wallet."""

    def test_keep(self, existing_wallet) -> None:
        ctx, store, config = existing_wallet(FakePrompter(["keep"]))
        before = store.wallet_path.read_text()
        assert step_wallet(ctx, config) is config
        assert store.wallet_path.read_text() == before

    def test_change_password(self, existing_wallet) -> None:
        prompter = FakePrompter(["change-password", PASSWORD], password="new-password-123")
        ctx, store, config = existing_wallet(prompter)

        assert step_wallet(ctx, config) is config
        assert store.unlock("new-password-123") == keypair_from_phrase(ABANDON_PHRASE)

    def test_change_password_wrong_then_give_up(self, existing_wallet) -> None:
        prompter = FakePrompter(["change-password", "wrong-password", False])
        ctx, store, config = existing_wallet(prompter)

        step_wallet(ctx, config)

        assert prompter.password_calls == 0
        assert store.unlock(PASSWORD)

    def test_replace_with_hardware(self, existing_wallet) -> None:
        prompter = FakePrompter(["hardware", "devnet", ZERO_PUBLIC_KEY])
        ctx, store, config = existing_wallet(prompter)

        config = step_wallet(ctx, config)

        assert config.wallet["publicKey"] == ZERO_PUBLIC_KEY
        assert store.load().is_hardware

    def test_interrupt_at_mnemonic_after_replacing(self, existing_wallet, monkeypatch) -> None:
        prompter = MnemonicAbortPrompter(["create", "devnet"])
        ctx, store, config = existing_wallet(prompter)
        ctx.config_store.save(config)
        monkeypatch.setattr(wizard, "wizard_steps", lambda flags: [step_wallet])

        with pytest.raises(click.Abort):
            run_wizard(ctx)

        new_key = store.load().public_key
        assert new_key != config.wallet["publicKey"]
        assert _saved_config(ctx)["wallet"]["publicKey"] == new_key


# ─────────────────────────────────────────────────────────────────────────────
# Summary and Runners
# ─────────────────────────────────────────────────────────────────────────────


class TestSummaryAndRunners:
    """Tests for the summary step and the wizard runners."""

    def test_summary_writes_quickstart(self, make_context) -> None:
        ctx = make_context(FakePrompter([False]))
        step_summary(ctx, SetupConfig())

        script = ctx.app_dir / "quickstart.sh"
        assert "openclaw agent start" in script.read_text()
        if os.name == "posix":
            assert stat.S_IMODE(script.stat().st_mode) == 0o755

    def test_summary_updates_profile_when_cli_missing(self, make_context, monkeypatch,
                                                      tmp_path) -> None:
        updated = []
        monkeypatch.setattr(wizard, "cli_available", lambda: False)
        monkeypatch.setattr(wizard, "update_shell_profile",
                            lambda bin_dir: updated.append(bin_dir) or tmp_path / ".zshrc")
        ctx = make_context(FakePrompter([True, True]))

        step_summary(ctx, SetupConfig())

        assert updated == [ctx.app_dir]

    def test_interrupt_saves_progress(self, make_context, monkeypatch) -> None:
        def install(ctx, config):
            return replace(config, installed=True)

        def interrupted(ctx, config):
            raise click.Abort()

        monkeypatch.setattr(wizard, "wizard_steps", lambda flags: [install, interrupted])
        ctx = make_context(FakePrompter())

        with pytest.raises(click.Abort):
            run_wizard(ctx)

        assert _saved_config(ctx)["installed"] is True

    def test_run_wizard_threads_config(self, make_context, monkeypatch) -> None:
        def first(ctx, config):
            return replace(config, installed=True)

        def second(ctx, config):
            assert config.installed
            return replace(config, skills=["web-search"])

        monkeypatch.setattr(wizard, "wizard_steps", lambda flags: [first, second])
        config = run_wizard(make_context(FakePrompter()))
        assert config.installed
        assert config.skills == ["web-search"]

    def test_quick_setup(self, make_context) -> None:
        ctx = make_context(FakePrompter())
        config = quick_setup(ctx)

        assert config.installed
        assert config.onboarding_complete
        assert config.skills == ["solana-agent-kit", "web-search"]
        assert config.wallet is None
        assert (ctx.skills_dir / "web-search" / "manifest.json").exists()
        assert _saved_config(ctx)["preferences"]["mode"] == "intermediate"


# ─────────────────────────────────────────────────────────────────────────────
# Command Line
# ─────────────────────────────────────────────────────────────────────────────


class TestCommandLine:
    """Tests for the openclaw-setup command."""

    def test_version(self) -> None:
        result = CliRunner().invoke(app.main, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == "openclaw-setup 1.0.0"

    def test_help(self) -> None:
        result = CliRunner().invoke(app.main, ["-h"])
        assert result.exit_code == 0
        assert "--skip-wallet" in result.output

    def test_quick(self, app_home) -> None:
        result = CliRunner().invoke(app.main, ["--quick"])
        assert result.exit_code == 0
        assert json.loads((app_home / "config.json").read_text())["installed"] is True

    def test_missing_dependency_exits_1(self, monkeypatch) -> None:
        def fail(ctx):
            raise DependencyError(["node"])

        monkeypatch.setattr(app, "run_wizard", fail)
        result = CliRunner().invoke(app.main, [])
        assert result.exit_code == 1

    def test_interrupt_exits_0(self, monkeypatch) -> None:
        def interrupted(ctx):
            raise click.Abort()

        monkeypatch.setattr(app, "run_wizard", interrupted)
        result = CliRunner().invoke(app.main, [])
        assert result.exit_code == 0
        assert "Progress has been saved" in result.output

    def test_backend_warning_at_startup(self, monkeypatch) -> None:
        monkeypatch.setattr(app, "check_crypto_backend", lambda: MissingDependency(["PyNaCl"]))
        monkeypatch.setattr(app, "run_wizard", lambda ctx: None)

        result = CliRunner().invoke(app.main, [])
        assert result.exit_code == 0
        assert "Wallet setup will be unavailable" in result.output

        result = CliRunner().invoke(app.main, ["--skip-wallet"])
        assert "Wallet setup will be unavailable" not in result.output
