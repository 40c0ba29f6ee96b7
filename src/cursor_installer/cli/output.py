"""User-facing rendering of run results and status reports."""

import click

from cursor_installer.core.status import IntegrationCheck, IntegrationState, StatusReport
from cursor_installer.core.types import LocalArtifact, RunResult

PROG_NAME = "cursor-installer"


def user_error(message: str) -> None:
    """Print a single-line fatal diagnostic to stderr."""
    click.echo(click.style("Error: ", fg="red") + message, err=True)


def format_size(size_bytes: int) -> str:
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def _format_check(check: IntegrationCheck, *, show_location: bool) -> str:
    present = "No" if check.state == IntegrationState.NEEDS_CONFIGURATION else "Yes"
    if present == "Yes" and show_location:
        present = f"Yes ({check.location})"
    color = "green" if check.state == IntegrationState.VALID else "yellow"
    return f"  {check.name}: {present} " + click.style(f"[{check.state.value}]", fg=color)


def render_status(report: StatusReport) -> None:
    """Print the installation status report to stdout."""
    if not isinstance(report.artifact, LocalArtifact):
        click.echo("Cursor is not installed.")
        click.echo(f"Run '{PROG_NAME} --all' to install Cursor.")
        return

    artifact = report.artifact
    click.echo(f"Cursor is installed at {artifact.path}")
    version = artifact.version if artifact.version_known else f"{artifact.version} (unknown)"
    click.echo(f"  Version: {version}")
    click.echo(f"  Size: {format_size(artifact.size_bytes)}")
    click.echo(f"  Hash: {artifact.fingerprint}")

    if report.launcher is not None:
        click.echo(_format_check(report.launcher, show_location=False))
    if report.cli is not None:
        click.echo(_format_check(report.cli, show_location=True))

    if report.needs_configuration:
        click.echo("")
        click.echo(
            f"Some configuration needs to be updated. Run '{PROG_NAME} --configure' to fix."
        )


def render_run_result(result: RunResult) -> None:
    """Summarize a completed run; details were already logged."""
    if not result.warnings:
        return
    count = len(result.warnings)
    click.echo(
        click.style(f"⚠️  Completed with {count} warning(s):", fg="yellow", bold=True), err=True
    )
    for warning in result.warnings:
        click.echo(click.style(f"   [{warning.step}] {warning.message}", dim=True), err=True)
