"""The cursor-installer command: flag parsing, logging setup and exit codes."""

import logging
from pathlib import Path

import click

from cursor_installer.cli.output import render_run_result, render_status, user_error
from cursor_installer.core.config import load_config
from cursor_installer.core.context import InstallerContext, create_context
from cursor_installer.core.errors import InstallerError
from cursor_installer.core.orchestrator import run_actions
from cursor_installer.core.status import StatusReport
from cursor_installer.core.types import Action

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(*, quiet: bool, debug: bool) -> None:
    """Route log records to stderr; quiet keeps warnings and errors only."""
    if debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, force=True)


def collect_actions(
    *,
    install_all: bool,
    fetch: bool,
    configure: bool,
    desktop: bool,
    cli_only: bool,
    status: bool,
    remove: bool,
    remove_purge: bool,
) -> frozenset[Action]:
    """Map CLI flags onto the set of requested actions."""
    actions: set[Action] = set()
    if install_all or fetch:
        actions.add(Action.FETCH)
    if install_all or configure or desktop:
        actions.add(Action.CONFIGURE_DESKTOP)
    if install_all or configure or cli_only:
        actions.add(Action.CONFIGURE_CLI)
    if status:
        actions.add(Action.STATUS)
    if remove or remove_purge:
        actions.add(Action.REMOVE)
    if remove_purge:
        actions.add(Action.PURGE)
    return frozenset(actions)


def _build_context(config_path: Path | None, *, show_progress: bool) -> InstallerContext:
    try:
        config = load_config(config_path, home=Path.home())
    except (FileNotFoundError, ValueError) as e:
        user_error(str(e))
        raise SystemExit(1) from None
    return create_context(config, show_progress=show_progress)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="cursor-installer")
@click.option(
    "-a", "--all", "install_all", is_flag=True, help="All-in-one Cursor installation (Recommended)"
)
@click.option("-f", "--fetch", is_flag=True, help="Only fetch latest Cursor AppImage")
@click.option("-c", "--configure", is_flag=True, help="Configure desktop launcher and CLI")
@click.option("--desktop", is_flag=True, help="Configure desktop launchers only")
@click.option("--cli", "cli_only", is_flag=True, help="Configure the CLI command only")
@click.option("-s", "--status", is_flag=True, help="Check Cursor installation status")
@click.option(
    "-r",
    "--remove",
    is_flag=True,
    help="Uninstall Cursor (remove icon, desktop launcher, and CLI command)",
)
@click.option(
    "-p", "--remove-purge", is_flag=True, help="Uninstall Cursor and purge all AppImages"
)
@click.option("-q", "--quiet", is_flag=True, help="Show only errors and warnings")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Read settings from this TOML file instead of the default location",
)
@click.pass_context
def cli(
    ctx: click.Context,
    install_all: bool,
    fetch: bool,
    configure: bool,
    desktop: bool,
    cli_only: bool,
    status: bool,
    remove: bool,
    remove_purge: bool,
    quiet: bool,
    debug: bool,
    config_path: Path | None,
) -> None:
    """A command-line installer for the Cursor AppImage on Debian/Ubuntu based
    Linux distributions.

    Examples:

    \b
      # Download, install and integrate the latest release
      cursor-installer --all

    \b
      # See whether launchers and the CLI command are up to date
      cursor-installer --status
    """
    actions = collect_actions(
        install_all=install_all,
        fetch=fetch,
        configure=configure,
        desktop=desktop,
        cli_only=cli_only,
        status=status,
        remove=remove,
        remove_purge=remove_purge,
    )
    if not actions:
        click.echo(ctx.get_help())
        return

    configure_logging(quiet=quiet, debug=debug)

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = _build_context(config_path, show_progress=not quiet)
    installer_ctx: InstallerContext = ctx.obj

    try:
        outcome = run_actions(installer_ctx, actions)
    except (InstallerError, OSError) as e:
        user_error(str(e))
        raise SystemExit(1) from None

    if isinstance(outcome, StatusReport):
        render_status(outcome)
        if not outcome.installed:
            raise SystemExit(1)
        return

    render_run_result(outcome)
