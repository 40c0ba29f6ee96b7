"""Fake HttpClient implementation for testing.

FakeHttpClient serves constructor-injected responses and records every
request, enabling reconciliation and orchestration tests without network
access.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cursor_installer.core.errors import NetworkError
from cursor_installer.gateway.http.abc import HttpClient


@dataclass(frozen=True)
class HttpCall:
    """Record of a request for test assertions.

    Attributes:
        method: "GET_JSON", "HEAD" or "DOWNLOAD"
        url: Requested URL
        timeout: Timeout passed by the caller (None for downloads)
    """

    method: str
    url: str
    timeout: float | None


class FakeHttpClient(HttpClient):
    """In-memory fake that serves configured responses.

    This class has NO public setup methods. All state is provided via constructor.
    URLs without a configured response raise NetworkError, as an unreachable
    host would.
    """

    def __init__(
        self,
        *,
        json_responses: dict[str, Any] | None = None,
        header_responses: dict[str, dict[str, str]] | None = None,
        downloads: dict[str, bytes] | None = None,
        errors: dict[str, Exception] | None = None,
    ) -> None:
        """Create FakeHttpClient with canned responses.

        Args:
            json_responses: Decoded JSON values returned by get_json, by URL
            header_responses: Header dicts returned by get_headers, by URL
            downloads: File contents written by download, by URL
            errors: Exceptions raised for any request to the given URL
        """
        self._json_responses = json_responses or {}
        self._header_responses = header_responses or {}
        self._downloads = downloads or {}
        self._errors = errors or {}
        self._calls: list[HttpCall] = []

    @property
    def calls(self) -> list[HttpCall]:
        """All requests made, in order.

        This property is for test assertions only.
        """
        return list(self._calls)

    @property
    def downloaded_urls(self) -> list[str]:
        """URLs passed to download(), in order.

        This property is for test assertions only.
        """
        return [call.url for call in self._calls if call.method == "DOWNLOAD"]

    @property
    def downloaded_bytes(self) -> int:
        """Total bytes written by download().

        This property is for test assertions only.
        """
        return sum(len(self._downloads.get(url, b"")) for url in self.downloaded_urls)

    def _raise_configured_error(self, url: str) -> None:
        if url in self._errors:
            raise self._errors[url]

    def get_json(self, url: str, *, timeout: float) -> Any:
        """Return the configured JSON value for url."""
        self._calls.append(HttpCall(method="GET_JSON", url=url, timeout=timeout))
        self._raise_configured_error(url)
        if url not in self._json_responses:
            raise NetworkError(f"Could not reach {url}")
        return self._json_responses[url]

    def get_headers(self, url: str, *, timeout: float) -> dict[str, str]:
        """Return the configured headers for url."""
        self._calls.append(HttpCall(method="HEAD", url=url, timeout=timeout))
        self._raise_configured_error(url)
        if url not in self._header_responses:
            raise NetworkError(f"Could not reach download server for {url}")
        return dict(self._header_responses[url])

    def download(self, url: str, destination: Path, *, show_progress: bool) -> int:
        """Write the configured content for url to destination."""
        self._calls.append(HttpCall(method="DOWNLOAD", url=url, timeout=None))
        self._raise_configured_error(url)
        if url not in self._downloads:
            raise NetworkError(f"Could not reach download server for {url}")
        content = self._downloads[url]
        destination.write_bytes(content)
        return len(content)
