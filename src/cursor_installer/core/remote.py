"""Remote metadata resolution.

Two cheap requests describe the newest build without transferring it: the
vendor API names the download URL, and a header-only request against that
URL yields its size and the CDN's content fingerprint (ETag).
"""

import logging
from urllib.parse import unquote, urlparse

from cursor_installer.core.errors import NetworkError, ProtocolError
from cursor_installer.core.types import RemoteArtifact
from cursor_installer.core.versioning import DEFAULT_VERSION, extract_version
from cursor_installer.gateway.http.abc import HttpClient

logger = logging.getLogger(__name__)

UNKNOWN_FINGERPRINT = "unknown"


def normalize_etag(raw: str | None) -> str:
    """Strip quotes and line breaks from an ETag header value.

    Returns UNKNOWN_FINGERPRINT for a missing or blank header. That value never
    equals a computed fingerprint, so reconciliation treats content as changed.
    """
    if raw is None:
        return UNKNOWN_FINGERPRINT
    cleaned = raw.replace('"', "").replace("\r", "").replace("\n", "").strip()
    if not cleaned:
        return UNKNOWN_FINGERPRINT
    return cleaned


def artifact_name_from_url(download_url: str) -> str:
    """Final path segment of a download URL, percent-decoded.

    Raises:
        ProtocolError: If the URL path has no final segment, or the decoded
            segment is not a plain file name (contains a path separator or
            is "." or "..")
    """
    name = unquote(urlparse(download_url).path.rsplit("/", 1)[-1])
    if not name:
        raise ProtocolError(f"Download URL has no file name: {download_url}")
    if "/" in name or "\\" in name or "\0" in name or name in (".", ".."):
        raise ProtocolError(f"Download URL does not name a plain file: {download_url}")
    return name


def _extract_download_url(payload: object, api_url: str) -> str:
    if not isinstance(payload, dict):
        raise ProtocolError(f"Unexpected API response from {api_url}: {payload!r}")
    download_url = payload.get("downloadUrl")
    if not isinstance(download_url, str) or not download_url or download_url == "null":
        raise ProtocolError(
            f"Failed to extract download URL from API response. Response: {payload!r}"
        )
    return download_url


def _parse_content_length(raw: str) -> int:
    try:
        size = int(raw.strip())
    except ValueError as e:
        raise ProtocolError(f"Invalid Content-Length header: {raw!r}") from e
    if size < 0:
        raise ProtocolError(f"Invalid Content-Length header: {raw!r}")
    return size


def resolve_remote(http: HttpClient, *, api_url: str, timeout: float) -> RemoteArtifact:
    """Describe the newest build advertised by the vendor API.

    Args:
        http: HTTP gateway
        api_url: Vendor endpoint returning {"downloadUrl": ...}
        timeout: Bound in seconds applied to each of the two requests

    Returns:
        A freshly built RemoteArtifact

    Raises:
        NetworkError: If either request fails to complete, or the download
            server returns no headers
        ProtocolError: If the API response lacks a usable downloadUrl, the URL
            has no file name, or Content-Length is not an integer
    """
    logger.info("Looking for the latest version online...")
    payload = http.get_json(api_url, timeout=timeout)
    download_url = _extract_download_url(payload, api_url)
    name = artifact_name_from_url(download_url)
    logger.debug("Download URL: %s", download_url)

    headers = http.get_headers(download_url, timeout=timeout)
    if not headers:
        raise NetworkError("Failed to fetch file details from the download server.")
    by_name = {key.lower(): value for key, value in headers.items()}

    size_bytes = _parse_content_length(by_name.get("content-length", "0"))
    fingerprint = normalize_etag(by_name.get("etag"))
    if fingerprint == UNKNOWN_FINGERPRINT:
        logger.warning("Download server sent no ETag; the artifact will be treated as changed.")

    version = extract_version(name)
    if version is None:
        logger.warning("Could not determine version from %s; using %s", name, DEFAULT_VERSION)

    logger.info("Latest version hash: %s", fingerprint)
    return RemoteArtifact(
        download_url=download_url,
        name=name,
        size_bytes=size_bytes,
        version=version or DEFAULT_VERSION,
        version_known=version is not None,
        fingerprint=fingerprint,
    )
