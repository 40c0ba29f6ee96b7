"""Real System implementation using subprocess, shutil and platform."""

import logging
import os
import platform
import shutil
import subprocess
from pathlib import Path

from cursor_installer.gateway.system.abc import System

logger = logging.getLogger(__name__)


def _run(cmd: list[str], *, operation: str, input_text: str | None = None) -> None:
    """Run a command, converting failure into RuntimeError with context."""
    logger.debug("Running: %s", " ".join(cmd))
    try:
        subprocess.run(
            cmd,
            input=input_text,
            text=True,
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise RuntimeError(f"Failed to {operation}: {cmd[0]} not found") from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise RuntimeError(f"Failed to {operation}: {stderr or f'exit code {e.returncode}'}") from e


def _can_write_directly(path: Path) -> bool:
    parent = path.parent
    if path.exists():
        return os.access(path, os.W_OK) and os.access(parent, os.W_OK)
    return parent.is_dir() and os.access(parent, os.W_OK)


class RealSystem(System):
    """Production implementation that shells out to apt, dpkg, sudo and gio."""

    def which(self, command: str) -> str | None:
        return shutil.which(command)

    def os_name(self) -> str:
        try:
            return platform.freedesktop_os_release().get("NAME", "Unknown")
        except OSError:
            return "Unknown"

    def is_package_installed(self, package: str) -> bool:
        try:
            result = subprocess.run(
                ["dpkg-query", "-W", "-f=${Status}", package],
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError:
            return False
        return result.returncode == 0 and "install ok installed" in result.stdout

    def install_packages(self, packages: list[str]) -> None:
        _run(["sudo", "apt", "update", "-y"], operation="refresh package lists")
        _run(
            ["sudo", "apt", "install", "-y", *packages],
            operation=f"install {' '.join(packages)}",
        )

    def write_privileged_file(self, path: Path, content: str) -> None:
        """Write directly when the location is writable, otherwise via sudo tee."""
        if _can_write_directly(path):
            path.write_text(content, encoding="utf-8")
            path.chmod(0o755)
            return

        _run(["sudo", "tee", str(path)], operation=f"write {path}", input_text=content)
        _run(["sudo", "chmod", "+x", str(path)], operation=f"set permissions on {path}")

    def remove_privileged_file(self, path: Path) -> None:
        if _can_write_directly(path):
            path.unlink(missing_ok=True)
            return

        _run(["sudo", "rm", "-f", str(path)], operation=f"remove {path}")

    def mark_trusted(self, path: Path) -> None:
        _run(
            ["gio", "set", str(path), "metadata::trusted", "true"],
            operation=f"mark {path} as trusted",
        )
