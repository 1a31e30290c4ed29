"""Envelope text to pixel block conversion.

Encoding: UTF-8 encode, CRC-32 over the raw bytes, gzip, frame into pixels.
Decoding reverses the steps and re-checks the CRC after decompression, so
corruption that survives the frame markers is still detected.
"""

from __future__ import annotations

from codec.checksum import crc32
from codec.compression import compress, decompress
from codec.frame_codec import decode_block, encode_frame
from core.constants import DEFAULT_COMPRESSION_LEVEL
from core.errors import DecodeError, IntegrityError
from core.logging_config import get_logger
from core.types import PixelBlock

_LOGGER = get_logger(__name__)


def text_to_block(text: str, level: int = DEFAULT_COMPRESSION_LEVEL) -> PixelBlock:
    """Encode envelope text into a framed pixel block.

    Args:
        text: Serialized envelope.
        level: gzip compression level.

    Returns:
        Pixel block carrying the compressed, checksummed text.
    """
    raw_bytes = text.encode("utf-8")
    checksum = crc32(raw_bytes)
    compressed = compress(raw_bytes, level)
    block = encode_frame(compressed, checksum)
    _LOGGER.debug(
        "pixel_payload_encoded",
        raw_bytes=len(raw_bytes),
        compressed_bytes=len(compressed),
        checksum=f"{checksum:08x}",
        width=block.width,
        height=block.height,
    )
    return block


def block_to_text(block: PixelBlock) -> str:
    """Decode a framed pixel block back into envelope text.

    Args:
        block: Pixel block extracted from an image.

    Returns:
        Serialized envelope text.

    Raises:
        FormatError: If the frame structure is corrupted.
        DecodeError: If the payload is not gzip or not UTF-8.
        IntegrityError: If the decompressed bytes fail the CRC check.
    """
    frame = decode_block(block)
    raw_bytes = decompress(frame.payload)
    computed = crc32(raw_bytes)
    if computed != frame.checksum:
        raise IntegrityError(
            "Data integrity check failed: checksum mismatch "
            f"(expected {frame.checksum:08x}, computed {computed:08x})"
        )
    try:
        return raw_bytes.decode("utf-8")
    except UnicodeDecodeError as error:
        raise DecodeError(f"Decoded payload is not valid UTF-8: {error}") from error
