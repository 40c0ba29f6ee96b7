"""HTTP operations abstraction for testing.

This module provides an ABC for the three kinds of requests the installer
makes (JSON metadata, header-only probe, streamed download) so that
reconciliation and orchestration can be tested without network access.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class HttpClient(ABC):
    """Abstract HTTP client for dependency injection."""

    @abstractmethod
    def get_json(self, url: str, *, timeout: float) -> Any:
        """GET a URL and decode the body as JSON.

        Args:
            url: URL to fetch
            timeout: Seconds before the request is abandoned

        Returns:
            The decoded JSON value

        Raises:
            NetworkError: If the host is unreachable or the request times out
            ProtocolError: If the server answers with an error status or the
                body is not valid JSON
        """
        ...

    @abstractmethod
    def get_headers(self, url: str, *, timeout: float) -> dict[str, str]:
        """Issue a header-only request and return the response headers.

        Redirects are followed; the headers are those of the final response.

        Args:
            url: URL to probe
            timeout: Seconds before the request is abandoned

        Returns:
            Response headers (empty if the server returned none)

        Raises:
            NetworkError: If the host is unreachable, the request times out,
                or the server answers with an error status
        """
        ...

    @abstractmethod
    def download(self, url: str, destination: Path, *, show_progress: bool) -> int:
        """Stream a URL to a file, overwriting it.

        No timeout applies. An interrupted transfer leaves a partial file.

        Args:
            url: URL to download
            destination: File to write
            show_progress: Whether to render a progress bar on stderr

        Returns:
            Number of bytes written

        Raises:
            NetworkError: If the transfer cannot be started or is cut off
            OSError: If the destination cannot be written
        """
        ...
