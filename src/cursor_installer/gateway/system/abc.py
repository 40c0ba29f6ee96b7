"""Host-system operations abstraction for testing.

Wraps everything that needs external programs or elevated privileges:
command lookup, the APT package manager, sudo-backed writes to system
locations, and GNOME's launcher trust metadata.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class System(ABC):
    """Abstract host-system operations for dependency injection."""

    @abstractmethod
    def which(self, command: str) -> str | None:
        """Locate an executable on PATH.

        Returns:
            Absolute path of the executable, or None if not found
        """
        ...

    @abstractmethod
    def os_name(self) -> str:
        """Human-readable OS name (from os-release), or "Unknown"."""
        ...

    @abstractmethod
    def is_package_installed(self, package: str) -> bool:
        """Check whether a system package is installed."""
        ...

    @abstractmethod
    def install_packages(self, packages: list[str]) -> None:
        """Install system packages through the package manager.

        Raises:
            RuntimeError: If the package manager fails
        """
        ...

    @abstractmethod
    def write_privileged_file(self, path: Path, content: str) -> None:
        """Write an executable file, escalating privileges if required.

        Args:
            path: Destination, possibly in a root-owned directory
            content: Text to write

        Raises:
            RuntimeError: If the privileged write or chmod fails
            OSError: If a direct write fails
        """
        ...

    @abstractmethod
    def remove_privileged_file(self, path: Path) -> None:
        """Remove a file, escalating privileges if required.

        Raises:
            RuntimeError: If the privileged removal fails
            OSError: If a direct removal fails
        """
        ...

    @abstractmethod
    def mark_trusted(self, path: Path) -> None:
        """Mark a desktop launcher as trusted so it can be started by double-click.

        Raises:
            RuntimeError: If the metadata could not be set
        """
        ...
