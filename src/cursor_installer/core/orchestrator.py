"""One-pass sequencing of requested installer actions.

Order of evaluation:
  environment check -> status (exclusive) -> removal (exclusive)
  -> fetch -> configuration precondition -> icon, launchers, CLI shim

Hard failures raise InstallerError (or OSError for artifact I/O) and end the
run. Best-effort steps contribute StepWarning values to the RunResult.
"""

import logging
import stat
from collections.abc import Set
from fnmatch import fnmatchcase

from cursor_installer.core.config import InstallerConfig
from cursor_installer.core.context import InstallerContext
from cursor_installer.core.errors import (
    DependencyInstallError,
    MissingArtifactError,
    UnsupportedEnvironmentError,
)
from cursor_installer.core.integration import (
    refresh_icon,
    remove_artifacts,
    remove_cli_shim,
    remove_icon,
    remove_launchers,
    write_cli_shim,
    write_launchers,
)
from cursor_installer.core.local_artifact import describe_local, locate_local
from cursor_installer.core.reconcile import needs_download
from cursor_installer.core.remote import UNKNOWN_FINGERPRINT, resolve_remote
from cursor_installer.core.status import StatusReport, build_status_report
from cursor_installer.core.types import (
    CONFIGURE_ACTIONS,
    Action,
    ArtifactNotFound,
    LocalArtifact,
    RemoteArtifact,
    RunResult,
    StepWarning,
)
from cursor_installer.core.versioning import describe_version_change
from cursor_installer.gateway.system.abc import System

logger = logging.getLogger(__name__)

PACKAGE_MANAGER = "apt"


def ensure_supported_environment(system: System) -> None:
    """Require an APT-based host.

    Raises:
        UnsupportedEnvironmentError: If apt is not available
    """
    logger.info("Checking system compatibility...")
    os_name = system.os_name()
    if system.which(PACKAGE_MANAGER) is None:
        raise UnsupportedEnvironmentError(
            f"This installer requires the APT package manager. Detected: {os_name}."
        )
    logger.info("Detected %s with APT package manager. System is compatible.", os_name)


def ensure_dependencies(system: System, packages: tuple[str, ...]) -> None:
    """Install any required system packages that are missing.

    Raises:
        DependencyInstallError: If the package manager fails
    """
    logger.info("Checking dependencies...")
    missing = [p for p in packages if not system.is_package_installed(p)]
    if missing:
        logger.warning("Installing missing dependencies: %s", " ".join(missing))
        try:
            system.install_packages(missing)
        except RuntimeError as e:
            raise DependencyInstallError(str(e)) from e
    logger.info("All dependencies are installed.")


def _verify_download(artifact: LocalArtifact, remote: RemoteArtifact) -> list[StepWarning]:
    warnings: list[StepWarning] = []
    if remote.fingerprint != UNKNOWN_FINGERPRINT and artifact.fingerprint != remote.fingerprint:
        message = (
            f"Downloaded file fingerprint {artifact.fingerprint} does not match "
            f"the server's {remote.fingerprint}"
        )
        logger.warning(message)
        warnings.append(StepWarning(step="verify", message=message))
    if remote.size_bytes and artifact.size_bytes != remote.size_bytes:
        message = f"Downloaded {artifact.size_bytes} bytes, server announced {remote.size_bytes}"
        logger.warning(message)
        warnings.append(StepWarning(step="verify", message=message))
    return warnings


def storage_filename(config: InstallerConfig, remote: RemoteArtifact) -> str:
    """File name the artifact is stored under.

    The remote name is kept when the locator's pattern matches it. Otherwise
    the file is renamed to "<prefix>-<version><suffix>" so later runs find it.
    """
    if fnmatchcase(remote.name, config.artifact_pattern):
        return remote.name
    if remote.version_known:
        return f"{config.artifact_prefix}-{remote.version}{config.artifact_suffix}"
    return f"{config.artifact_prefix}{config.artifact_suffix}"


def download_artifact(
    ctx: InstallerContext, remote: RemoteArtifact
) -> tuple[LocalArtifact, list[StepWarning]]:
    """Stream the remote artifact into storage and mark it executable.

    Raises:
        NetworkError: If the transfer fails
        OSError: If the file cannot be written or made executable
    """
    storage_dir = ctx.config.storage_dir
    storage_dir.mkdir(parents=True, exist_ok=True)
    destination = storage_dir / storage_filename(ctx.config, remote)

    logger.info("Downloading AppImage to %s", destination)
    ctx.http.download(remote.download_url, destination, show_progress=ctx.show_progress)
    logger.info("Download completed successfully")

    logger.info("Adjusting permissions for the AppImage...")
    mode = destination.stat().st_mode
    destination.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    artifact = describe_local(destination)
    return artifact, _verify_download(artifact, remote)


def fetch(ctx: InstallerContext) -> tuple[LocalArtifact, bool, list[StepWarning]]:
    """Bring local storage up to date with the newest remote build.

    Returns:
        The current local artifact, whether bytes were downloaded, and warnings

    Raises:
        DependencyInstallError, NetworkError, ProtocolError: From the steps involved
        OSError: If storage or the artifact cannot be read or written
    """
    ensure_dependencies(ctx.system, ctx.config.required_packages)
    remote = resolve_remote(
        ctx.http, api_url=ctx.config.api_url, timeout=ctx.config.metadata_timeout
    )
    local = locate_local(ctx.config.storage_dir, pattern=ctx.config.artifact_pattern)

    download_required = needs_download(local, remote)
    if isinstance(local, LocalArtifact) and not download_required:
        logger.info("Latest version already downloaded. No need to download again.")
        return local, False, []

    if isinstance(local, LocalArtifact):
        change = describe_version_change(local.version, remote.version)
        logger.info("Updating %s -> %s (%s)", local.version, remote.version, change)
    logger.info("Starting the download of the latest version...")
    artifact, warnings = download_artifact(ctx, remote)
    return artifact, True, warnings


def configure(
    ctx: InstallerContext, artifact: LocalArtifact, actions: Set[Action]
) -> list[StepWarning]:
    """Point the requested integrations at artifact. Best-effort throughout."""
    warnings: list[StepWarning] = []

    icon_warning = refresh_icon(ctx.http, ctx.config)
    if icon_warning is not None:
        warnings.append(icon_warning)

    if Action.CONFIGURE_DESKTOP in actions:
        launcher_warnings = write_launchers(ctx.system, ctx.config, artifact)
        if any(w.step == "launcher" for w in launcher_warnings):
            logger.error("Launcher setup is incomplete")
        warnings.extend(launcher_warnings)

    if Action.CONFIGURE_CLI in actions:
        cli_warning = write_cli_shim(ctx.system, ctx.config, artifact)
        if cli_warning is not None:
            warnings.append(cli_warning)

    return warnings


def uninstall(ctx: InstallerContext, *, purge: bool) -> RunResult:
    """Remove icon, launchers and CLI shim; with purge, also every artifact.

    Components that are already absent are skipped without error.
    """
    logger.info("Uninstalling Cursor...")
    warnings: list[StepWarning] = []

    icon_warning = remove_icon(ctx.config)
    if icon_warning is not None:
        warnings.append(icon_warning)
    warnings.extend(remove_launchers(ctx.config))
    cli_warning = remove_cli_shim(ctx.system, ctx.config)
    if cli_warning is not None:
        warnings.append(cli_warning)
    if purge:
        warnings.extend(remove_artifacts(ctx.config))

    logger.info("Cursor has been uninstalled successfully!")
    return RunResult(artifact=None, downloaded=False, warnings=tuple(warnings))


def run_actions(ctx: InstallerContext, actions: Set[Action]) -> RunResult | StatusReport:
    """Execute one pass over the requested actions.

    Args:
        ctx: Installer context
        actions: Requested actions; STATUS wins over everything else, then
            REMOVE/PURGE

    Returns:
        StatusReport when STATUS was requested, RunResult otherwise

    Raises:
        InstallerError: On any fatal step
        OSError: If the artifact cannot be read or written
    """
    ensure_supported_environment(ctx.system)

    if Action.STATUS in actions:
        return build_status_report(ctx.config)

    if Action.REMOVE in actions or Action.PURGE in actions:
        return uninstall(ctx, purge=Action.PURGE in actions)

    artifact: LocalArtifact | None = None
    downloaded = False
    warnings: list[StepWarning] = []

    if Action.FETCH in actions:
        artifact, downloaded, fetch_warnings = fetch(ctx)
        warnings.extend(fetch_warnings)

    requested_configuration = CONFIGURE_ACTIONS & actions
    if requested_configuration:
        if artifact is None:
            located = locate_local(ctx.config.storage_dir, pattern=ctx.config.artifact_pattern)
            if isinstance(located, ArtifactNotFound):
                raise MissingArtifactError(
                    "No local Cursor AppImage found. Use --fetch to download."
                )
            artifact = located
        warnings.extend(configure(ctx, artifact, requested_configuration))

    logger.info("Cursor setup completed successfully!")
    return RunResult(artifact=artifact, downloaded=downloaded, warnings=tuple(warnings))
