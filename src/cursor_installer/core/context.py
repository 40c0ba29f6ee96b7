"""Application context with dependency injection."""

from dataclasses import dataclass

from cursor_installer.core.config import InstallerConfig
from cursor_installer.gateway.http.abc import HttpClient
from cursor_installer.gateway.http.real import RealHttpClient
from cursor_installer.gateway.system.abc import System
from cursor_installer.gateway.system.real import RealSystem


@dataclass(frozen=True)
class InstallerContext:
    """Immutable context holding all dependencies for an installer run.

    Created at the CLI entry point and threaded through the orchestrator.
    Tests build one with fake gateways and pass it as the click context object.
    """

    http: HttpClient
    system: System
    config: InstallerConfig
    show_progress: bool


def create_context(config: InstallerConfig, *, show_progress: bool) -> InstallerContext:
    """Create the production context backed by real gateways."""
    return InstallerContext(
        http=RealHttpClient(),
        system=RealSystem(),
        config=config,
        show_progress=show_progress,
    )
