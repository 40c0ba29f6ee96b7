"""Desktop and command-line integration: icon, launchers and CLI shim.

Every function here is best-effort. Failures are returned as StepWarning
values so the orchestrator can report them and keep going; nothing raises
for an individual file.
"""

import logging
from pathlib import Path

from cursor_installer.core.config import InstallerConfig
from cursor_installer.core.desktop_entry import render_cli_shim, render_launcher
from cursor_installer.core.errors import NetworkError
from cursor_installer.core.types import LocalArtifact, StepWarning
from cursor_installer.gateway.http.abc import HttpClient
from cursor_installer.gateway.system.abc import System

logger = logging.getLogger(__name__)


def _warn(step: str, message: str) -> StepWarning:
    logger.warning(message)
    return StepWarning(step=step, message=message)


def refresh_icon(http: HttpClient, config: InstallerConfig) -> StepWarning | None:
    """Download the application icon, replacing any existing copy."""
    logger.info("Downloading Cursor logo...")
    try:
        config.icon_dir.mkdir(parents=True, exist_ok=True)
        http.download(config.icon_url, config.icon_path, show_progress=False)
    except (NetworkError, OSError) as e:
        return _warn("icon", f"Failed to download the logo: {e}")
    logger.info("Logo successfully downloaded to: %s", config.icon_path)
    return None


def write_launchers(
    system: System, config: InstallerConfig, artifact: LocalArtifact
) -> list[StepWarning]:
    """Write both desktop launchers pointing at the artifact.

    Both locations are attempted even if the first fails. Warnings with step
    "launcher" mean a launcher file could not be written; permission and trust
    warnings leave the file in place.
    """
    logger.info("Creating launchers for Cursor...")
    content = render_launcher(artifact.path, config.icon_path)
    can_trust = system.which("gio") is not None
    warnings: list[StepWarning] = []

    for launcher_path in config.desktop_files:
        try:
            launcher_path.parent.mkdir(parents=True, exist_ok=True)
            launcher_path.write_text(content, encoding="utf-8")
        except OSError as e:
            warnings.append(_warn("launcher", f"Failed to write launcher {launcher_path}: {e}"))
            continue

        try:
            launcher_path.chmod(0o755)
            logger.info("Launcher set as executable: %s", launcher_path)
        except OSError as e:
            warnings.append(
                _warn("launcher-permissions", f"Failed to set permissions for {launcher_path}: {e}")
            )

        if can_trust:
            try:
                system.mark_trusted(launcher_path)
                logger.info("Launcher marked as trusted: %s", launcher_path)
            except RuntimeError as e:
                warnings.append(
                    _warn("launcher-trust", f"Failed to mark {launcher_path} as trusted: {e}")
                )

    if not any(w.step == "launcher" for w in warnings):
        logger.info("Launchers setup completed")
    return warnings


def write_cli_shim(
    system: System, config: InstallerConfig, artifact: LocalArtifact
) -> StepWarning | None:
    """Install the CLI shim that forwards to the artifact."""
    logger.info("Adding the 'cursor' command to your system...")
    path = config.cli_command_path
    try:
        system.write_privileged_file(path, render_cli_shim(artifact.path))
    except (RuntimeError, OSError) as e:
        return _warn("cli", f"Failed to create CLI command {path}: {e}")
    logger.info("CLI command 'cursor' successfully installed.")
    return None


def _remove_user_file(step: str, path: Path, label: str) -> StepWarning | None:
    if not path.exists():
        logger.info("%s not found: %s. Skipping.", label, path)
        return None
    try:
        path.unlink()
    except OSError as e:
        return _warn(step, f"Failed to remove {label.lower()} {path}: {e}")
    logger.info("%s removed: %s", label, path)
    return None


def remove_icon(config: InstallerConfig) -> StepWarning | None:
    logger.info("Removing Cursor icon...")
    return _remove_user_file("icon", config.icon_path, "Icon file")


def remove_launchers(config: InstallerConfig) -> list[StepWarning]:
    logger.info("Removing desktop files...")
    warnings = [
        _remove_user_file("launcher", path, "Desktop file") for path in config.desktop_files
    ]
    return [w for w in warnings if w is not None]


def remove_cli_shim(system: System, config: InstallerConfig) -> StepWarning | None:
    logger.info("Removing 'cursor' command...")
    path = config.cli_command_path
    if not path.exists():
        logger.info("CLI command not found. Skipping.")
        return None
    try:
        system.remove_privileged_file(path)
    except (RuntimeError, OSError) as e:
        return _warn("cli", f"Failed to remove CLI command {path}: {e}")
    logger.info("CLI command removed successfully.")
    return None


def remove_artifacts(config: InstallerConfig) -> list[StepWarning]:
    """Delete every artifact and partial download in storage."""
    logger.info("Removing Cursor AppImages...")
    if not config.storage_dir.is_dir():
        logger.info("No Cursor AppImages found in %s", config.storage_dir)
        return []

    matches = sorted(p for p in config.storage_dir.glob(config.purge_pattern) if p.is_file())
    if not matches:
        logger.info("No Cursor AppImages found in %s", config.storage_dir)
        return []

    warnings: list[StepWarning] = []
    removed = 0
    for path in matches:
        try:
            path.unlink()
        except OSError as e:
            warnings.append(_warn("artifact", f"Failed to remove {path}: {e}"))
            continue
        logger.info("Removed: %s", path)
        removed += 1

    logger.info("Removed %d Cursor AppImage(s).", removed)
    return warnings
