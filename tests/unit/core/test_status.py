"""Tests for the installation status report."""

import os
from pathlib import Path

from cursor_installer.core.desktop_entry import render_cli_shim, render_launcher
from cursor_installer.core.status import (
    IntegrationState,
    build_status_report,
    check_cli_shim,
    check_launchers,
)
from cursor_installer.core.types import LocalArtifact
from tests.test_utils.context_builders import build_test_config


def _install_artifact(storage: Path, name: str, *, mtime: int = 1_700_000_000) -> Path:
    storage.mkdir(parents=True, exist_ok=True)
    path = storage / name
    path.write_bytes(name.encode())
    os.utime(path, (mtime, mtime))
    return path


def _write_launchers(paths: tuple[Path, Path], artifact: Path, icon: Path) -> None:
    for path in paths:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_launcher(artifact, icon), encoding="utf-8")


def test_empty_storage_is_not_installed(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)

    report = build_status_report(config)

    assert not report.installed
    assert report.launcher is None
    assert report.cli is None
    assert not report.needs_configuration


def test_unconfigured_artifact_needs_configuration(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    _install_artifact(config.storage_dir, "Cursor-0.45.11-x86_64.AppImage")

    report = build_status_report(config)

    assert report.installed
    assert report.launcher is not None
    assert report.cli is not None
    assert report.launcher.state == IntegrationState.NEEDS_CONFIGURATION
    assert report.cli.state == IntegrationState.NEEDS_CONFIGURATION
    assert report.needs_configuration


def test_configured_artifact_is_valid(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    artifact = _install_artifact(config.storage_dir, "Cursor-0.45.11-x86_64.AppImage")
    _write_launchers(config.desktop_files, artifact.absolute(), config.icon_path)
    config.cli_command_path.write_text(render_cli_shim(artifact.absolute()), encoding="utf-8")

    report = build_status_report(config)

    assert isinstance(report.artifact, LocalArtifact)
    assert report.artifact.version == "0.45.11"
    assert report.launcher is not None
    assert report.cli is not None
    assert report.launcher.state == IntegrationState.VALID
    assert report.cli.state == IntegrationState.VALID
    assert report.cli.location == config.cli_command_path
    assert not report.needs_configuration


def test_newer_artifact_makes_integrations_stale(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    old = _install_artifact(config.storage_dir, "Cursor-0.45.0.AppImage", mtime=1_700_000_000)
    _write_launchers(config.desktop_files, old.absolute(), config.icon_path)
    config.cli_command_path.write_text(render_cli_shim(old.absolute()), encoding="utf-8")
    _install_artifact(config.storage_dir, "Cursor-0.46.0.AppImage", mtime=1_700_000_100)

    report = build_status_report(config)

    assert report.launcher is not None
    assert report.cli is not None
    assert report.launcher.state == IntegrationState.NEEDS_RECONFIGURATION
    assert report.cli.state == IntegrationState.NEEDS_RECONFIGURATION
    assert report.needs_configuration


def test_one_missing_launcher_needs_configuration(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    artifact = _install_artifact(config.storage_dir, "Cursor-1.0.0.AppImage").absolute()
    _write_launchers(config.desktop_files, artifact, config.icon_path)
    config.user_desktop_file.unlink()

    check = check_launchers(config, artifact)

    assert check.state == IntegrationState.NEEDS_CONFIGURATION


def test_one_stale_launcher_needs_reconfiguration(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    artifact = _install_artifact(config.storage_dir, "Cursor-1.0.0.AppImage").absolute()
    _write_launchers(config.desktop_files, artifact, config.icon_path)
    config.application_desktop_file.write_text(
        render_launcher(Path("/elsewhere/Cursor.AppImage"), config.icon_path), encoding="utf-8"
    )

    check = check_launchers(config, artifact)

    assert check.state == IntegrationState.NEEDS_RECONFIGURATION
    assert check.location == config.application_desktop_file


def test_shim_without_path_constant_needs_reconfiguration(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    config.cli_command_path.write_text("#!/bin/bash\nexit 0\n", encoding="utf-8")

    check = check_cli_shim(config, tmp_path / "Cursor.AppImage")

    assert check.state == IntegrationState.NEEDS_RECONFIGURATION


def test_status_does_not_modify_the_filesystem(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    artifact = _install_artifact(config.storage_dir, "Cursor-1.0.0.AppImage")
    before = sorted(p for p in tmp_path.rglob("*"))

    build_status_report(config)

    assert sorted(p for p in tmp_path.rglob("*")) == before
    assert artifact.read_bytes() == b"Cursor-1.0.0.AppImage"


def test_configured_artifact_under_quoted_home_is_valid(tmp_path: Path) -> None:
    config = build_test_config(tmp_path / "o'brien $HOME 100%")
    artifact = _install_artifact(config.storage_dir, "Cursor-1.0.0.AppImage").absolute()
    _write_launchers(config.desktop_files, artifact, config.icon_path)
    config.cli_command_path.write_text(render_cli_shim(artifact), encoding="utf-8")

    report = build_status_report(config)

    assert report.launcher is not None
    assert report.cli is not None
    assert report.launcher.state == IntegrationState.VALID
    assert report.cli.state == IntegrationState.VALID
