"""Decide whether the local artifact is current."""

from cursor_installer.core.types import ArtifactNotFound, LocalArtifact, RemoteArtifact


def needs_download(local: LocalArtifact | ArtifactNotFound, remote: RemoteArtifact) -> bool:
    """Return True unless local content is byte-identical to the remote build.

    Only fingerprints are compared. Versions come from filenames and may have
    defaulted; sizes can match by coincidence.
    """
    if isinstance(local, ArtifactNotFound):
        return True
    return local.fingerprint != remote.fingerprint
