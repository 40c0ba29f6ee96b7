"""Local artifact discovery.

The newest matching file in the storage directory is the installed artifact.
Its fingerprint is recomputed on every call; nothing is cached between runs.
"""

import logging
from pathlib import Path

from cursor_installer.core.fingerprint import compute_fingerprint
from cursor_installer.core.types import ArtifactNotFound, LocalArtifact
from cursor_installer.core.versioning import DEFAULT_VERSION, extract_version

logger = logging.getLogger(__name__)


def describe_local(path: Path) -> LocalArtifact:
    """Build a LocalArtifact for a known file.

    Raises:
        OSError: If the file cannot be stat'ed or read
    """
    size_bytes = path.stat().st_size
    version = extract_version(path.name)
    if version is None:
        logger.warning("Could not determine version from %s; using %s", path.name, DEFAULT_VERSION)

    fingerprint = compute_fingerprint(path)
    logger.info("Local version hash: %s", fingerprint)
    return LocalArtifact(
        path=path.absolute(),
        name=path.name,
        size_bytes=size_bytes,
        version=version or DEFAULT_VERSION,
        version_known=version is not None,
        fingerprint=fingerprint,
    )


def find_candidates(storage_dir: Path, *, pattern: str) -> list[Path]:
    """Regular files in storage_dir matching pattern, newest first.

    Files with equal modification times are ordered by filename, greatest
    first, so the choice never depends on directory enumeration order.
    """
    if not storage_dir.is_dir():
        return []
    candidates = [p for p in storage_dir.glob(pattern) if p.is_file()]
    return sorted(candidates, key=lambda p: (p.stat().st_mtime_ns, p.name), reverse=True)


def locate_local(storage_dir: Path, *, pattern: str) -> LocalArtifact | ArtifactNotFound:
    """Find the most recently deposited artifact in storage_dir.

    Creates storage_dir if it does not exist.

    Args:
        storage_dir: Directory holding downloaded artifacts
        pattern: Glob matching artifact filenames (non-recursive)

    Returns:
        LocalArtifact for the newest match, or ArtifactNotFound if none match

    Raises:
        OSError: If the directory cannot be created or the artifact cannot be read
    """
    storage_dir.mkdir(parents=True, exist_ok=True)
    candidates = find_candidates(storage_dir, pattern=pattern)
    if not candidates:
        logger.info("No local version found in %s", storage_dir)
        return ArtifactNotFound(storage_dir=storage_dir)

    if len(candidates) > 1:
        logger.debug("Found %d artifacts, using newest: %s", len(candidates), candidates[0].name)
    return describe_local(candidates[0])
