"""cursor-installer entry point.

This package provides a Click-based CLI that installs and updates the Cursor
AppImage, keeps its desktop launchers and CLI command pointing at the current
build, and reports installation health. See `cursor-installer --help`.
"""

from cursor_installer.cli.cli import cli


def main() -> None:
    """CLI entry point used by the `cursor-installer` console script."""
    cli()
