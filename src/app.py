"""
OpenClaw Setup - End-to-end setup wizard.

Installs the OpenClaw CLI, creates the user profile, installs skills and
provisions the Solana wallet.

Entry point for the application.
"""

import logging
import sys

import click
from rich.markup import escape

from exceptions import DependencyError, SetupCancelled
from services import check_crypto_backend, configure_logging
from ui import (
    SetupFlags,
    WizardContext,
    run_wizard,
    quick_setup,
    show_error,
    show_info,
    show_warning,
)
from utils import APP_NAME, APP_VERSION

logger = logging.getLogger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(APP_VERSION, "-v", "--version", prog_name=APP_NAME,
                      message="%(prog)s %(version)s")
@click.option("--quick", is_flag=True, help="Quick setup with defaults (no wallet)")
@click.option("--skip-install", is_flag=True, help="Skip the installation steps")
@click.option("--skip-onboarding", is_flag=True, help="Skip user onboarding")
@click.option("--skip-wallet", is_flag=True, help="Skip wallet configuration")
@click.option("--verbose", is_flag=True, help="Show debug output")
def main(quick, skip_install, skip_onboarding, skip_wallet, verbose):
    """Set up OpenClaw, its skills and a Solana wallet."""
    # Configure logging before anything else
    configure_logging(verbose=verbose)

    flags = SetupFlags(
        quick=quick,
        skip_install=skip_install,
        skip_onboarding=skip_onboarding,
        skip_wallet=skip_wallet,
        verbose=verbose,
    )
    logger.info("Starting %s %s with %s", APP_NAME, APP_VERSION, flags)

    backend_error = check_crypto_backend()
    if backend_error is not None and not (flags.quick or flags.skip_wallet):
        show_warning(f"Wallet setup will be unavailable. {escape(str(backend_error))}")

    ctx = WizardContext.default(flags)

    try:
        if flags.quick:
            quick_setup(ctx)
        else:
            run_wizard(ctx)
    except SetupCancelled as e:
        show_info(str(e))
        sys.exit(0)
    except DependencyError as e:
        logger.error("%s", e)
        show_error(str(e))
        show_info("Install the missing dependencies and run setup again.")
        sys.exit(1)
    except click.Abort:
        show_info("\n\nSetup interrupted. Progress has been saved.")
        sys.exit(0)


if __name__ == "__main__":
    main()
