"""Installer configuration: built-in defaults plus an optional TOML override file.

Example config.toml:
  # Keep AppImages somewhere else
  storage_dir = "~/Applications"

  # Install the CLI shim without sudo
  cli_command_path = "~/.local/bin/cursor"

  metadata_timeout = 10
"""

import platform
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

DEFAULT_CONFIG_PATH = Path("~/.config/cursor-installer/config.toml")

ICON_FILENAME = "cursor-icon.svg"

_API_URL_TEMPLATE = "https://www.cursor.com/api/download?platform={platform}&releaseTrack=latest"
_ICON_URL = (
    "https://raw.githubusercontent.com/mablr/cursor-installer/refs/heads/master/cursor-icon.svg"
)


def default_api_url(machine: str) -> str:
    """Vendor API endpoint for the given CPU architecture (platform.machine())."""
    if machine.lower() in ("aarch64", "arm64"):
        return _API_URL_TEMPLATE.format(platform="linux-arm64")
    return _API_URL_TEMPLATE.format(platform="linux-x64")


@dataclass(frozen=True)
class InstallerConfig:
    """Locations and endpoints used by an installer run.

    All paths are absolute.
    """

    storage_dir: Path
    icon_dir: Path
    user_desktop_file: Path
    application_desktop_file: Path
    cli_command_path: Path
    api_url: str
    icon_url: str
    metadata_timeout: float
    artifact_prefix: str
    artifact_suffix: str
    required_packages: tuple[str, ...]

    @property
    def icon_path(self) -> Path:
        return self.icon_dir / ICON_FILENAME

    @property
    def desktop_files(self) -> tuple[Path, Path]:
        return (self.user_desktop_file, self.application_desktop_file)

    @property
    def artifact_pattern(self) -> str:
        """Glob matching complete artifacts in storage_dir."""
        return f"{self.artifact_prefix}*{self.artifact_suffix}"

    @property
    def purge_pattern(self) -> str:
        """Glob matching artifacts and leftovers (partial downloads) in storage_dir."""
        return f"{self.artifact_pattern}*"

    @staticmethod
    def defaults(home: Path) -> "InstallerConfig":
        """Built-in configuration rooted at the given home directory."""
        return InstallerConfig(
            storage_dir=home / ".AppImage",
            icon_dir=home / ".local" / "share" / "icons",
            user_desktop_file=home / "Desktop" / "cursor.desktop",
            application_desktop_file=home / ".local" / "share" / "applications" / "cursor.desktop",
            cli_command_path=Path("/usr/local/bin/cursor"),
            api_url=default_api_url(platform.machine()),
            icon_url=_ICON_URL,
            metadata_timeout=5.0,
            artifact_prefix="Cursor",
            artifact_suffix=".AppImage",
            required_packages=("libfuse2",),
        )


_PATH_KEYS = frozenset(
    {
        "storage_dir",
        "icon_dir",
        "user_desktop_file",
        "application_desktop_file",
        "cli_command_path",
    }
)
_STR_KEYS = frozenset({"api_url", "icon_url", "artifact_prefix", "artifact_suffix"})


def _expand_path(value: str, home: Path) -> Path:
    if value == "~" or value.startswith("~/"):
        value = str(home) + value[1:]
    return Path(value).absolute()


def _coerce(key: str, value: object, *, home: Path, source: Path) -> object:
    if key in _PATH_KEYS or key in _STR_KEYS:
        if not isinstance(value, str) or not value:
            raise ValueError(f"'{key}' in {source} must be a non-empty string")
        return _expand_path(value, home) if key in _PATH_KEYS else value

    if key == "metadata_timeout":
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"'metadata_timeout' in {source} must be a positive number")
        return float(value)

    # required_packages
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"'required_packages' in {source} must be a list of strings")
    return tuple(value)


def load_config(config_path: Path | None, *, home: Path) -> InstallerConfig:
    """Load configuration, applying overrides from a TOML file if present.

    Args:
        config_path: Explicit config file, or None to use the default location
            (a missing default file means built-in defaults)
        home: Home directory used for defaults and "~" expansion

    Returns:
        The merged InstallerConfig

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValueError: If the file is not valid TOML, has unknown keys, or has
            values of the wrong type
    """
    config = InstallerConfig.defaults(home)

    if config_path is None:
        path = _expand_path(str(DEFAULT_CONFIG_PATH), home)
        if not path.exists():
            return config
    else:
        path = config_path
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e

    known = {f.name for f in fields(InstallerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config key(s) in {path}: {', '.join(unknown)}")

    overrides = {key: _coerce(key, value, home=home, source=path) for key, value in data.items()}
    return replace(config, **overrides)
