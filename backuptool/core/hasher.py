"""Hashing helpers for archive checksums."""

from __future__ import annotations

import hashlib
from typing import BinaryIO

_CHUNK_SIZE = 64 * 1024


def sha256_stream(stream: BinaryIO) -> tuple[str, int]:
    """Hash a seekable stream from its start without consuming it.

    Returns ``(hex_digest, size_bytes)``.  The stream position is restored
    to offset 0 afterwards so the caller can read it again.
    """
    digest = hashlib.sha256()
    size = 0
    stream.seek(0)
    for chunk in iter(lambda: stream.read(_CHUNK_SIZE), b""):
        digest.update(chunk)
        size += len(chunk)
    stream.seek(0)
    return digest.hexdigest(), size
