"""Real HttpClient implementation using urllib.request."""

import json
import logging
import urllib.error
import urllib.request
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from cursor_installer.core.errors import NetworkError, ProtocolError
from cursor_installer.gateway.http.abc import HttpClient

logger = logging.getLogger(__name__)

_READ_SIZE = 1024 * 1024


def _user_agent() -> str:
    try:
        return f"cursor-installer/{version('cursor-installer')}"
    except PackageNotFoundError:
        return "cursor-installer"


def _content_length(response: Any) -> int | None:
    """Announced body size, or None when the header is missing or malformed."""
    raw = response.headers.get("Content-Length")
    if raw is None:
        return None
    try:
        total = int(raw)
    except ValueError:
        logger.debug("Ignoring invalid Content-Length %r", raw)
        return None
    return total if total > 0 else None


class RealHttpClient(HttpClient):
    """Production implementation backed by urllib.request."""

    def _request(self, url: str, *, method: str, accept: str | None) -> urllib.request.Request:
        headers = {"User-Agent": _user_agent()}
        if accept is not None:
            headers["Accept"] = accept
        return urllib.request.Request(url, headers=headers, method=method)

    def get_json(self, url: str, *, timeout: float) -> Any:
        """GET a URL and decode the body as JSON."""
        logger.debug("GET %s (timeout=%ss)", url, timeout)
        request = self._request(url, method="GET", accept="application/json")
        try:
            with urllib.request.urlopen(request, timeout=timeout) as response:
                body = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            raise ProtocolError(f"{url} answered HTTP {e.code}: {e.reason}") from e
        except urllib.error.URLError as e:
            raise NetworkError(f"Could not reach {url}: {e.reason}") from e
        except TimeoutError as e:
            raise NetworkError(f"Timed out after {timeout}s waiting for {url}") from e

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise ProtocolError(f"{url} did not return valid JSON: {e}") from e

    def get_headers(self, url: str, *, timeout: float) -> dict[str, str]:
        """Issue a HEAD request and return the final response headers."""
        logger.debug("HEAD %s (timeout=%ss)", url, timeout)
        request = self._request(url, method="HEAD", accept=None)
        try:
            with urllib.request.urlopen(request, timeout=timeout) as response:
                return dict(response.headers.items())
        except urllib.error.HTTPError as e:
            raise NetworkError(f"Download server answered HTTP {e.code} for {url}") from e
        except urllib.error.URLError as e:
            raise NetworkError(f"Could not reach download server: {e.reason}") from e
        except TimeoutError as e:
            raise NetworkError(f"Timed out after {timeout}s waiting for {url}") from e

    def download(self, url: str, destination: Path, *, show_progress: bool) -> int:
        """Stream a URL to a file, rendering a rich progress bar on stderr."""
        logger.debug("GET %s -> %s", url, destination)
        request = self._request(url, method="GET", accept=None)
        try:
            response = urllib.request.urlopen(request)
        except urllib.error.HTTPError as e:
            raise NetworkError(f"Download failed with HTTP {e.code}: {url}") from e
        except urllib.error.URLError as e:
            raise NetworkError(f"Could not reach download server: {e.reason}") from e

        total = _content_length(response)
        written = 0
        progress = Progress(
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=Console(stderr=True),
            disable=not show_progress,
            transient=True,
        )
        with response, progress, destination.open("wb") as out:
            task = progress.add_task("download", total=total)
            while True:
                try:
                    chunk = response.read(_READ_SIZE)
                except (urllib.error.URLError, TimeoutError, ConnectionError) as e:
                    raise NetworkError(f"Download interrupted after {written} bytes: {e}") from e
                if not chunk:
                    break
                out.write(chunk)
                written += len(chunk)
                progress.update(task, advance=len(chunk))
        return written
