"""Value types threaded through an installer run."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Action(Enum):
    """High-level actions a single invocation can request."""

    FETCH = "fetch"
    CONFIGURE_DESKTOP = "configure-desktop"
    CONFIGURE_CLI = "configure-cli"
    STATUS = "status"
    REMOVE = "remove"
    PURGE = "purge"


CONFIGURE_ACTIONS = frozenset({Action.CONFIGURE_DESKTOP, Action.CONFIGURE_CLI})


@dataclass(frozen=True)
class RemoteArtifact:
    """The newest build as advertised by the vendor API.

    Built fresh on every metadata query; never cached across runs.

    Attributes:
        download_url: URL the artifact is served from
        name: Final path segment of download_url
        size_bytes: Content-Length reported by the download server (0 if absent)
        version: Version extracted from name ("0.0.0" when not found)
        version_known: False when version extraction fell back to the default
        fingerprint: ETag reported by the download server, or "unknown"
    """

    download_url: str
    name: str
    size_bytes: int
    version: str
    version_known: bool
    fingerprint: str


@dataclass(frozen=True)
class LocalArtifact:
    """An artifact present in local storage.

    Attributes:
        path: Absolute path of the artifact file
        name: Filename as deposited
        size_bytes: Size from filesystem metadata
        version: Version extracted from name ("0.0.0" when not found)
        version_known: False when version extraction fell back to the default
        fingerprint: Chunked content hash computed from the file bytes
    """

    path: Path
    name: str
    size_bytes: int
    version: str
    version_known: bool
    fingerprint: str


@dataclass(frozen=True)
class ArtifactNotFound:
    """Result when storage holds no matching artifact.

    This is an expected outcome (nothing installed yet), not an error.
    """

    storage_dir: Path


@dataclass(frozen=True)
class StepWarning:
    """A best-effort step that failed without aborting the run."""

    step: str
    message: str


@dataclass(frozen=True)
class RunResult:
    """Outcome of an install, configure or removal pass.

    Attributes:
        artifact: The local artifact the run ended with, if any
        downloaded: True if artifact bytes were transferred in this run
        warnings: Soft failures collected along the way, in order
    """

    artifact: LocalArtifact | None
    downloaded: bool
    warnings: tuple[StepWarning, ...]
