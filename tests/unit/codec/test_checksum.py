"""Unit tests for CRC-32 checksums."""

from __future__ import annotations

import zlib

from codec.checksum import crc32


def test_crc32_matches_standard_check_value() -> None:
    """The ASCII digits 1-9 should hash to the published check value."""
    assert crc32(b"123456789") == 0xCBF43926


def test_crc32_of_empty_input_is_zero() -> None:
    """An empty byte string should hash to zero."""
    assert crc32(b"") == 0


def test_crc32_agrees_with_zlib_for_utf8_text() -> None:
    """Checksums should be interoperable with zlib for arbitrary bytes."""
    data = "kabasé river ✓".encode("utf-8") * 40

    assert crc32(data) == zlib.crc32(data)
