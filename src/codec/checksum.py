"""CRC-32 integrity checksum.

Reflected CRC-32 (polynomial 0xEDB88320) over raw bytes, computed with a
precomputed 256-entry table. The check value of b"123456789" is 0xCBF43926.
"""

from __future__ import annotations

_POLYNOMIAL = 0xEDB88320


def _build_table() -> tuple[int, ...]:
    """Precompute the per-byte remainder table."""
    table = []
    for index in range(256):
        crc = index
        for _ in range(8):
            crc = (crc >> 1) ^ _POLYNOMIAL if crc & 1 else crc >> 1
        table.append(crc)
    return tuple(table)


_TABLE = _build_table()


def crc32(data: bytes) -> int:
    """Compute the CRC-32 checksum of a byte sequence.

    Args:
        data: Raw bytes, any length including zero.

    Returns:
        Unsigned 32-bit checksum.
    """
    table = _TABLE
    crc = 0xFFFFFFFF
    for byte in data:
        crc = (crc >> 8) ^ table[(crc ^ byte) & 0xFF]
    return crc ^ 0xFFFFFFFF
