"""Fatal error taxonomy for installer runs.

Every error here aborts the current run: the CLI prints a single diagnostic
line and exits non-zero. Best-effort steps never raise these; they are
reported as StepWarning values instead (see core.types).
"""


class InstallerError(Exception):
    """Base class for fatal installer errors."""


class NetworkError(InstallerError):
    """The vendor API or download server was unreachable or timed out."""


class ProtocolError(InstallerError):
    """A remote response was missing expected fields or was malformed."""


class MissingArtifactError(InstallerError):
    """Configuration was requested but no local artifact exists."""


class UnsupportedEnvironmentError(InstallerError):
    """The host lacks the package-management tooling the installer needs."""


class DependencyInstallError(InstallerError):
    """Required system packages could not be installed."""
