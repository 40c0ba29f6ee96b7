"""Fake System implementation for testing.

FakeSystem reports a configured host (available commands, installed
packages) and records every mutating call. Privileged writes and removals
go straight to the given paths without escalation, so tests can point the
CLI shim at a temporary directory and inspect the result.
"""

from pathlib import Path

from cursor_installer.gateway.system.abc import System


class FakeSystem(System):
    """Configurable fake host that tracks mutations.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(
        self,
        *,
        commands: frozenset[str] = frozenset({"apt"}),
        installed_packages: frozenset[str] = frozenset({"libfuse2"}),
        os_name: str = "Ubuntu",
        install_error: str | None = None,
        privileged_write_error: str | None = None,
        trust_error: str | None = None,
    ) -> None:
        """Create FakeSystem.

        Args:
            commands: Executables reported as present on PATH
            installed_packages: Packages reported as installed
            os_name: Value returned by os_name()
            install_error: If set, install_packages raises RuntimeError with this message
            privileged_write_error: If set, privileged writes and removals raise
                RuntimeError with this message
            trust_error: If set, mark_trusted raises RuntimeError with this message
        """
        self._commands = commands
        self._installed_packages = set(installed_packages)
        self._os_name = os_name
        self._install_error = install_error
        self._privileged_write_error = privileged_write_error
        self._trust_error = trust_error
        self._installed_calls: list[list[str]] = []
        self._privileged_writes: list[Path] = []
        self._privileged_removals: list[Path] = []
        self._trusted_paths: list[Path] = []

    @property
    def installed_calls(self) -> list[list[str]]:
        """Package lists passed to install_packages, in order.

        This property is for test assertions only.
        """
        return [list(call) for call in self._installed_calls]

    @property
    def privileged_writes(self) -> list[Path]:
        """Paths written through write_privileged_file.

        This property is for test assertions only.
        """
        return list(self._privileged_writes)

    @property
    def privileged_removals(self) -> list[Path]:
        """Paths passed to remove_privileged_file.

        This property is for test assertions only.
        """
        return list(self._privileged_removals)

    @property
    def trusted_paths(self) -> list[Path]:
        """Paths successfully marked as trusted.

        This property is for test assertions only.
        """
        return list(self._trusted_paths)

    def which(self, command: str) -> str | None:
        if command in self._commands:
            return f"/usr/bin/{command}"
        return None

    def os_name(self) -> str:
        return self._os_name

    def is_package_installed(self, package: str) -> bool:
        return package in self._installed_packages

    def install_packages(self, packages: list[str]) -> None:
        self._installed_calls.append(list(packages))
        if self._install_error is not None:
            raise RuntimeError(self._install_error)
        self._installed_packages.update(packages)

    def write_privileged_file(self, path: Path, content: str) -> None:
        if self._privileged_write_error is not None:
            raise RuntimeError(self._privileged_write_error)
        path.write_text(content, encoding="utf-8")
        path.chmod(0o755)
        self._privileged_writes.append(path)

    def remove_privileged_file(self, path: Path) -> None:
        if self._privileged_write_error is not None:
            raise RuntimeError(self._privileged_write_error)
        path.unlink(missing_ok=True)
        self._privileged_removals.append(path)

    def mark_trusted(self, path: Path) -> None:
        if self._trust_error is not None:
            raise RuntimeError(self._trust_error)
        self._trusted_paths.append(path)
