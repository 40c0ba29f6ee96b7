"""Version extraction from artifact filenames.

Versions are informational only. The reconciliation decision is made on
fingerprints, so a filename without a recognizable version degrades to
DEFAULT_VERSION instead of failing.
"""

import re

from packaging.version import InvalidVersion, Version

DEFAULT_VERSION = "0.0.0"

_VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+")


def extract_version(filename: str) -> str | None:
    """Return the first X.Y.Z substring of filename, or None if there is none.

    Example:
        >>> extract_version("Cursor-0.45.11-x86_64.AppImage")
        '0.45.11'
    """
    match = _VERSION_PATTERN.search(filename)
    if match is None:
        return None
    return match.group(0)


def describe_version_change(current: str, available: str) -> str:
    """Label a pending download relative to the installed version.

    Used for log output only.

    Returns:
        "upgrade", "downgrade" or "rebuild" (same version, different content)
    """
    try:
        current_v = Version(current)
        available_v = Version(available)
    except InvalidVersion:
        return "rebuild"

    if available_v > current_v:
        return "upgrade"
    if available_v < current_v:
        return "downgrade"
    return "rebuild"
