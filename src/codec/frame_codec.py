"""Marker-framed byte streams packed into RGBA pixels.

Frame layout, all integers big-endian unsigned::

    [START "ETYMOLOG" 8][VERSION 1][LENGTH 4][PAYLOAD LENGTH][CRC 4][END "ENDETYMO" 8]

Each pixel carries three consecutive frame bytes in R, G, B with alpha fixed
at 255. The grid is the smallest near-square holding every byte triplet:
``width = ceil(sqrt(pixels))`` and ``height = ceil(pixels / width)``.
Trailing capacity is zero-filled. The codec knows nothing about compression
or JSON; the checksum is passed through untouched.
"""

from __future__ import annotations

import math
import struct

import numpy as np

from core.constants import (
    BYTES_PER_PIXEL,
    FRAME_END_MARKER,
    FRAME_FOOTER_SIZE,
    FRAME_FORMAT_VERSION,
    FRAME_HEADER_SIZE,
    FRAME_MAX_PAYLOAD_LENGTH,
    FRAME_START_MARKER,
    OPAQUE_ALPHA,
)
from core.errors import FormatError
from core.types import DecodedFrame, PixelBlock

_HEADER = struct.Struct(">8sBI")
_FOOTER = struct.Struct(">I8s")


def build_frame_bytes(payload: bytes, checksum: int) -> bytes:
    """Build the raw frame byte stream.

    Args:
        payload: Frame payload, usually compressed bytes.
        checksum: Unsigned 32-bit checksum to carry in the footer.

    Returns:
        Header, payload, and footer bytes.

    Raises:
        FormatError: If the payload or checksum exceed 32-bit fields.
    """
    if len(payload) > FRAME_MAX_PAYLOAD_LENGTH:
        raise FormatError(f"Invalid frame: payload of {len(payload)} bytes is too large")
    if not 0 <= checksum <= 0xFFFFFFFF:
        raise FormatError(f"Invalid frame: checksum {checksum} is not an unsigned 32-bit value")
    header = _HEADER.pack(FRAME_START_MARKER, FRAME_FORMAT_VERSION, len(payload))
    footer = _FOOTER.pack(checksum, FRAME_END_MARKER)
    return header + payload + footer


def block_dimensions(byte_count: int) -> tuple[int, int]:
    """Compute the near-square grid holding ``byte_count`` bytes.

    Args:
        byte_count: Number of stream bytes to store.

    Returns:
        Pair of width and height in pixels.
    """
    pixel_count = max(1, math.ceil(byte_count / BYTES_PER_PIXEL))
    width = math.isqrt(pixel_count)
    if width * width < pixel_count:
        width += 1
    height = math.ceil(pixel_count / width)
    return width, height


def encode_frame(payload: bytes, checksum: int) -> PixelBlock:
    """Frame a payload and pack it into an RGBA pixel block.

    Args:
        payload: Frame payload bytes.
        checksum: Unsigned 32-bit checksum to carry in the footer.

    Returns:
        Pixel block with alpha 255 and zero-filled padding.
    """
    stream = build_frame_bytes(payload, checksum)
    width, height = block_dimensions(len(stream))
    capacity = width * height * BYTES_PER_PIXEL
    channels = np.zeros(capacity, dtype=np.uint8)
    channels[: len(stream)] = np.frombuffer(stream, dtype=np.uint8)
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :, :3] = channels.reshape(height, width, BYTES_PER_PIXEL)
    pixels[:, :, 3] = OPAQUE_ALPHA
    return PixelBlock(pixels=pixels, width=width, height=height)


def decode_frame(pixels: np.ndarray, width: int, height: int) -> DecodedFrame:
    """Recover payload and checksum from an RGBA pixel grid.

    Args:
        pixels: uint8 array of shape (height, width, 4); alpha is ignored.
        width: Grid width in pixels.
        height: Grid height in pixels.

    Returns:
        Decoded payload and footer checksum.

    Raises:
        FormatError: If the grid shape, markers, version, or length are invalid.
    """
    stream = _pixels_to_stream(pixels, width, height)
    if stream[: len(FRAME_START_MARKER)] != FRAME_START_MARKER:
        raise FormatError("Invalid frame: missing start marker")
    if len(stream) <= len(FRAME_START_MARKER):
        raise FormatError("Invalid frame: wrong data length")
    version = stream[len(FRAME_START_MARKER)]
    if version != FRAME_FORMAT_VERSION:
        raise FormatError(f"Invalid frame: unsupported version {version}")
    if len(stream) < FRAME_HEADER_SIZE:
        raise FormatError("Invalid frame: wrong data length")
    _, _, length = _HEADER.unpack_from(stream, 0)
    # struct ">I" is unsigned, so a corrupted length can only be too large.
    if FRAME_HEADER_SIZE + length + FRAME_FOOTER_SIZE > len(stream):
        raise FormatError("Invalid frame: wrong data length")
    payload_end = FRAME_HEADER_SIZE + length
    payload = stream[FRAME_HEADER_SIZE:payload_end]
    checksum, end_marker = _FOOTER.unpack_from(stream, payload_end)
    if end_marker != FRAME_END_MARKER:
        raise FormatError("Invalid frame: missing end marker")
    return DecodedFrame(payload=payload, checksum=checksum)


def decode_block(block: PixelBlock) -> DecodedFrame:
    """Decode a pixel block produced by ``encode_frame`` or image extraction."""
    return decode_frame(block.pixels, block.width, block.height)


def _pixels_to_stream(pixels: np.ndarray, width: int, height: int) -> bytes:
    """Read R, G, B channels across the whole grid into bytes."""
    array = np.asarray(pixels, dtype=np.uint8)
    if array.ndim == 1 and array.size == width * height * 4:
        array = array.reshape(height, width, 4)
    if array.shape != (height, width, 4):
        raise FormatError(
            f"Invalid frame: pixel grid of shape {array.shape} does not match {width}x{height}"
        )
    return array[:, :, :BYTES_PER_PIXEL].tobytes()
