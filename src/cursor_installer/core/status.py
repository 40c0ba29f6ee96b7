"""Installation health report.

There is no installation manifest. The report is derived from the filesystem
each time: the newest artifact in storage is compared with the paths embedded
in the launchers and the CLI shim, which exposes integrations left pointing at
an artifact that an update has since replaced.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from cursor_installer.core.config import InstallerConfig
from cursor_installer.core.desktop_entry import parse_cli_shim_path, parse_launcher_exec_path
from cursor_installer.core.local_artifact import locate_local
from cursor_installer.core.types import ArtifactNotFound, LocalArtifact

logger = logging.getLogger(__name__)


class IntegrationState(Enum):
    VALID = "VALID"
    NEEDS_CONFIGURATION = "NEEDS CONFIGURATION"
    NEEDS_RECONFIGURATION = "NEEDS RECONFIGURATION"


@dataclass(frozen=True)
class IntegrationCheck:
    """Result of checking one integration point.

    Attributes:
        name: Display name ("Launcher", "CLI command")
        state: Whether the integration points at the current artifact
        location: File the check inspected (the shim path for the CLI)
    """

    name: str
    state: IntegrationState
    location: Path


@dataclass(frozen=True)
class StatusReport:
    """Snapshot of the installation.

    Checks are only populated when an artifact is installed.
    """

    artifact: LocalArtifact | ArtifactNotFound
    launcher: IntegrationCheck | None
    cli: IntegrationCheck | None

    @property
    def installed(self) -> bool:
        return isinstance(self.artifact, LocalArtifact)

    @property
    def needs_configuration(self) -> bool:
        checks = [c for c in (self.launcher, self.cli) if c is not None]
        return any(c.state != IntegrationState.VALID for c in checks)


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Could not read %s: %s", path, e)
        return None


def check_launchers(config: InstallerConfig, artifact_path: Path) -> IntegrationCheck:
    """VALID only if both launchers exist and Exec= points at artifact_path."""
    if not all(path.is_file() for path in config.desktop_files):
        return IntegrationCheck(
            name="Launcher",
            state=IntegrationState.NEEDS_CONFIGURATION,
            location=config.application_desktop_file,
        )

    expected = str(artifact_path)
    for path in config.desktop_files:
        content = _read_text(path)
        if content is None or parse_launcher_exec_path(content) != expected:
            return IntegrationCheck(
                name="Launcher",
                state=IntegrationState.NEEDS_RECONFIGURATION,
                location=path,
            )
    return IntegrationCheck(
        name="Launcher",
        state=IntegrationState.VALID,
        location=config.application_desktop_file,
    )


def check_cli_shim(config: InstallerConfig, artifact_path: Path) -> IntegrationCheck:
    """VALID only if the shim exists and embeds artifact_path."""
    path = config.cli_command_path
    if not path.is_file():
        return IntegrationCheck(
            name="CLI command", state=IntegrationState.NEEDS_CONFIGURATION, location=path
        )

    content = _read_text(path)
    if content is None or parse_cli_shim_path(content) != str(artifact_path):
        state = IntegrationState.NEEDS_RECONFIGURATION
    else:
        state = IntegrationState.VALID
    return IntegrationCheck(name="CLI command", state=state, location=path)


def build_status_report(config: InstallerConfig) -> StatusReport:
    """Derive the current installation status. Never raises.

    An unreadable storage directory or artifact is reported as not installed.
    """
    logger.info("Checking Cursor installation status...")
    try:
        artifact = locate_local(config.storage_dir, pattern=config.artifact_pattern)
    except OSError as e:
        logger.warning("Could not inspect %s: %s", config.storage_dir, e)
        artifact = ArtifactNotFound(storage_dir=config.storage_dir)

    if isinstance(artifact, ArtifactNotFound):
        return StatusReport(artifact=artifact, launcher=None, cli=None)

    return StatusReport(
        artifact=artifact,
        launcher=check_launchers(config, artifact.path),
        cli=check_cli_shim(config, artifact.path),
    )
