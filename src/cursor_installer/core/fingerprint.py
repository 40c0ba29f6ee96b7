"""Chunked content fingerprint matching the download CDN's multipart ETag.

The CDN stores the artifact as a multipart upload with 5 MiB parts and
reports an ETag of the form ``md5(md5(part_1) + ... + md5(part_n))-n``.
Computing the same value from local bytes tells us whether the file on disk
is the file being served, without downloading anything.

An empty file has zero parts, so its fingerprint is the MD5 of an empty
buffer with a count of 0: ``d41d8cd98f00b204e9800998ecf8427e-0``.
"""

import hashlib
from pathlib import Path

CHUNK_SIZE = 5 * 1024 * 1024


def compute_fingerprint(path: Path, *, chunk_size: int = CHUNK_SIZE) -> str:
    """Compute the multipart-ETag fingerprint of a file.

    Reads the file sequentially, holding a single chunk in memory.

    Args:
        path: File to fingerprint
        chunk_size: Part size in bytes (the CDN uses 5 MiB)

    Returns:
        Fingerprint string "<32 hex chars>-<chunk count>"

    Raises:
        OSError: If the file cannot be opened or read
    """
    part_digests = bytearray()
    chunk_count = 0
    with path.open("rb") as f:
        while chunk := f.read(chunk_size):
            part_digests += hashlib.md5(chunk, usedforsecurity=False).digest()
            chunk_count += 1

    combined = hashlib.md5(bytes(part_digests), usedforsecurity=False).hexdigest()
    return f"{combined}-{chunk_count}"
