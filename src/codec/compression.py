"""Gzip compression for image export payloads.

Output is a standard gzip member readable by any gzip tool. The header
timestamp is zeroed so identical input always compresses identically.
"""

from __future__ import annotations

import gzip
import zlib

from core.constants import DEFAULT_COMPRESSION_LEVEL
from core.errors import DecodeError


def compress(data: bytes, level: int = DEFAULT_COMPRESSION_LEVEL) -> bytes:
    """Gzip-compress a byte sequence.

    Args:
        data: Raw bytes to compress.
        level: gzip compression level in [0, 9].

    Returns:
        Gzip stream bytes.
    """
    return gzip.compress(data, compresslevel=level, mtime=0)


def decompress(data: bytes) -> bytes:
    """Decompress a gzip byte stream.

    Args:
        data: Gzip stream bytes.

    Returns:
        Original raw bytes.

    Raises:
        DecodeError: If input is not a complete, valid gzip stream.
    """
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as error:
        raise DecodeError(f"Compressed payload is not valid gzip data: {error}") from error
