"""Tests for run_actions sequencing using fake gateways."""

import os
import stat
from pathlib import Path

import pytest

from cursor_installer.core.context import InstallerContext
from cursor_installer.core.errors import (
    DependencyInstallError,
    MissingArtifactError,
    NetworkError,
    UnsupportedEnvironmentError,
)
from cursor_installer.core.orchestrator import (
    ensure_dependencies,
    ensure_supported_environment,
    run_actions,
    storage_filename,
)
from cursor_installer.core.status import IntegrationState, StatusReport, build_status_report
from cursor_installer.core.types import Action, LocalArtifact, RemoteArtifact, RunResult
from cursor_installer.gateway.http.fake import FakeHttpClient
from cursor_installer.gateway.system.fake import FakeSystem
from tests.test_utils.context_builders import (
    API_URL,
    build_test_config,
    build_test_context,
    fake_vendor,
    multipart_etag,
)

PAYLOAD = b"\x7fELF cursor build 0.45.11" * 4096
ALL = frozenset({Action.FETCH, Action.CONFIGURE_DESKTOP, Action.CONFIGURE_CLI})
CONFIGURE = frozenset({Action.CONFIGURE_DESKTOP, Action.CONFIGURE_CLI})


def _run(ctx: InstallerContext, actions: frozenset[Action]) -> RunResult:
    result = run_actions(ctx, actions)
    assert isinstance(result, RunResult)
    return result


def _all_files(root: Path) -> list[Path]:
    return sorted(p for p in root.rglob("*") if p.is_file())


def test_install_from_empty_storage(tmp_path: Path) -> None:
    http = fake_vendor(PAYLOAD)
    ctx = build_test_context(tmp_path, http=http)

    result = _run(ctx, ALL)

    assert result.downloaded is True
    assert result.warnings == ()
    assert isinstance(result.artifact, LocalArtifact)
    assert result.artifact.fingerprint == multipart_etag(PAYLOAD)
    assert result.artifact.path.read_bytes() == PAYLOAD
    assert result.artifact.path.stat().st_mode & stat.S_IXUSR

    report = build_status_report(ctx.config)
    assert report.launcher is not None
    assert report.cli is not None
    assert report.launcher.state == IntegrationState.VALID
    assert report.cli.state == IntegrationState.VALID


def test_current_artifact_is_not_downloaded_again(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    config.storage_dir.mkdir(parents=True)
    existing = config.storage_dir / "Cursor-0.45.11-x86_64.AppImage"
    existing.write_bytes(PAYLOAD)
    http = fake_vendor(PAYLOAD)
    ctx = build_test_context(tmp_path, http=http, config=config)

    result = _run(ctx, frozenset({Action.FETCH}))

    assert result.downloaded is False
    assert http.downloaded_bytes == 0
    assert [call.method for call in http.calls] == ["GET_JSON", "HEAD"]
    assert result.artifact is not None
    assert result.artifact.path == existing.absolute()


def test_changed_content_is_downloaded(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    config.storage_dir.mkdir(parents=True)
    old = config.storage_dir / "Cursor-0.45.0-x86_64.AppImage"
    old.write_bytes(b"old build")
    os.utime(old, (1_600_000_000, 1_600_000_000))
    http = fake_vendor(PAYLOAD)
    ctx = build_test_context(tmp_path, http=http, config=config)

    result = _run(ctx, frozenset({Action.FETCH}))

    assert result.downloaded is True
    assert http.downloaded_bytes == len(PAYLOAD)
    assert result.artifact is not None
    assert result.artifact.name == "Cursor-0.45.11-x86_64.AppImage"
    assert old.exists()


def test_missing_etag_always_downloads(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    config.storage_dir.mkdir(parents=True)
    (config.storage_dir / "Cursor-0.45.11-x86_64.AppImage").write_bytes(PAYLOAD)
    http = fake_vendor(PAYLOAD, include_etag=False)
    ctx = build_test_context(tmp_path, http=http, config=config)

    result = _run(ctx, frozenset({Action.FETCH}))

    assert result.downloaded is True
    assert result.warnings == ()


def test_fingerprint_mismatch_after_download_is_a_warning(tmp_path: Path) -> None:
    http = fake_vendor(PAYLOAD, etag="0123456789abcdef0123456789abcdef-1")
    ctx = build_test_context(tmp_path, http=http)

    result = _run(ctx, frozenset({Action.FETCH}))

    assert result.downloaded is True
    assert [w.step for w in result.warnings] == ["verify"]


def test_configure_without_artifact_fails_and_writes_nothing(tmp_path: Path) -> None:
    ctx = build_test_context(tmp_path)
    before = _all_files(tmp_path)

    with pytest.raises(MissingArtifactError, match="--fetch"):
        run_actions(ctx, CONFIGURE)

    assert _all_files(tmp_path) == before
    assert not ctx.config.icon_path.exists()


def test_configure_is_idempotent(tmp_path: Path) -> None:
    ctx = build_test_context(tmp_path, http=fake_vendor(PAYLOAD))
    _run(ctx, ALL)
    snapshot = {p: p.read_bytes() for p in _all_files(tmp_path)}

    result = _run(ctx, CONFIGURE)

    assert result.warnings == ()
    assert {p: p.read_bytes() for p in _all_files(tmp_path)} == snapshot


def test_desktop_only_leaves_cli_untouched(tmp_path: Path) -> None:
    ctx = build_test_context(tmp_path, http=fake_vendor(PAYLOAD))
    _run(ctx, frozenset({Action.FETCH}))

    _run(ctx, frozenset({Action.CONFIGURE_DESKTOP}))

    assert all(path.is_file() for path in ctx.config.desktop_files)
    assert not ctx.config.cli_command_path.exists()


def test_cli_failure_does_not_abort_launchers(tmp_path: Path) -> None:
    system = FakeSystem(privileged_write_error="sudo: a password is required")
    ctx = build_test_context(tmp_path, http=fake_vendor(PAYLOAD), system=system)

    result = _run(ctx, ALL)

    assert [w.step for w in result.warnings] == ["cli"]
    assert all(path.is_file() for path in ctx.config.desktop_files)


def test_unsupported_environment_fails_before_any_request(tmp_path: Path) -> None:
    http = fake_vendor(PAYLOAD)
    ctx = build_test_context(
        tmp_path, http=http, system=FakeSystem(commands=frozenset(), os_name="Fedora Linux")
    )

    with pytest.raises(UnsupportedEnvironmentError, match="Fedora Linux"):
        run_actions(ctx, ALL)

    assert http.calls == []


def test_missing_dependency_is_installed_before_fetch(tmp_path: Path) -> None:
    system = FakeSystem(installed_packages=frozenset())
    ctx = build_test_context(tmp_path, http=fake_vendor(PAYLOAD), system=system)

    _run(ctx, frozenset({Action.FETCH}))

    assert system.installed_calls == [["libfuse2"]]


def test_dependency_install_failure_is_fatal(tmp_path: Path) -> None:
    system = FakeSystem(installed_packages=frozenset(), install_error="apt exited 100")
    http = fake_vendor(PAYLOAD)
    ctx = build_test_context(tmp_path, http=http, system=system)

    with pytest.raises(DependencyInstallError, match="apt exited 100"):
        run_actions(ctx, frozenset({Action.FETCH}))

    assert http.calls == []


def test_ensure_dependencies_skips_installed_packages() -> None:
    system = FakeSystem(installed_packages=frozenset({"libfuse2"}))

    ensure_dependencies(system, ("libfuse2",))

    assert system.installed_calls == []


def test_ensure_supported_environment_accepts_apt() -> None:
    ensure_supported_environment(FakeSystem())


def test_network_failure_leaves_storage_unchanged(tmp_path: Path) -> None:
    http = FakeHttpClient(errors={API_URL: NetworkError("timed out")})
    ctx = build_test_context(tmp_path, http=http)

    with pytest.raises(NetworkError):
        run_actions(ctx, ALL)

    assert _all_files(tmp_path) == []


def test_status_takes_precedence(tmp_path: Path) -> None:
    http = fake_vendor(PAYLOAD)
    ctx = build_test_context(tmp_path, http=http)

    result = run_actions(ctx, frozenset({Action.STATUS, Action.FETCH, Action.REMOVE}))

    assert isinstance(result, StatusReport)
    assert not result.installed
    assert http.calls == []


def test_remove_keeps_artifacts_and_purge_deletes_them(tmp_path: Path) -> None:
    ctx = build_test_context(tmp_path, http=fake_vendor(PAYLOAD))
    installed = _run(ctx, ALL)
    assert installed.artifact is not None

    removed = _run(ctx, frozenset({Action.REMOVE}))

    assert removed.warnings == ()
    assert installed.artifact.path.exists()
    assert not ctx.config.icon_path.exists()
    assert not any(path.exists() for path in ctx.config.desktop_files)
    assert not ctx.config.cli_command_path.exists()

    purged = _run(ctx, frozenset({Action.REMOVE, Action.PURGE}))

    assert purged.warnings == ()
    assert not installed.artifact.path.exists()


def test_remove_on_clean_system_succeeds(tmp_path: Path) -> None:
    ctx = build_test_context(tmp_path)

    first = _run(ctx, frozenset({Action.REMOVE, Action.PURGE}))
    second = _run(ctx, frozenset({Action.REMOVE, Action.PURGE}))

    assert first.warnings == ()
    assert second.warnings == ()


def test_remove_wins_over_install(tmp_path: Path) -> None:
    http = fake_vendor(PAYLOAD)
    ctx = build_test_context(tmp_path, http=http)

    _run(ctx, frozenset({Action.REMOVE}) | ALL)

    assert http.calls == []


def test_remote_name_outside_pattern_is_renamed_for_locator(tmp_path: Path) -> None:
    http = fake_vendor(PAYLOAD, name="cursor_1.2.3_amd64.AppImage")
    ctx = build_test_context(tmp_path, http=http)

    first = _run(ctx, ALL)

    assert first.artifact is not None
    assert first.artifact.name == "Cursor-1.2.3.AppImage"
    assert first.artifact.path.parent == ctx.config.storage_dir.absolute()
    report = build_status_report(ctx.config)
    assert report.installed
    assert report.launcher is not None
    assert report.launcher.state == IntegrationState.VALID

    second = _run(ctx, frozenset({Action.FETCH}))

    assert second.downloaded is False
    assert len(http.downloaded_urls) == 2  # artifact and icon from the first run


def test_storage_filename_keeps_matching_names(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    remote = _remote("Cursor-0.45.11-x86_64.AppImage", version="0.45.11", version_known=True)

    assert storage_filename(config, remote) == "Cursor-0.45.11-x86_64.AppImage"


def test_storage_filename_without_version_uses_bare_name(tmp_path: Path) -> None:
    config = build_test_config(tmp_path)
    remote = _remote("latest.AppImage", version="0.0.0", version_known=False)

    assert storage_filename(config, remote) == "Cursor.AppImage"


def _remote(name: str, *, version: str, version_known: bool) -> RemoteArtifact:
    return RemoteArtifact(
        download_url=f"https://downloads.example.test/{name}",
        name=name,
        size_bytes=1,
        version=version,
        version_known=version_known,
        fingerprint="abc-1",
    )
