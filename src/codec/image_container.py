"""Decorated PNG container for pixel blocks.

The block is copied verbatim into a larger canvas at a fixed offset and a
three-pixel metadata header at the canvas origin records its size::

    pixel 0: R, G, B = b"EXP"
    pixel 1: R = width >> 8,  G = width & 0xFF, B = height >> 8
    pixel 2: R = height & 0xFF, G = 0, B = 0

The split height bytes are kept for compatibility with existing images.
Decoration is drawn first and never touches the copy step, which is a plain
array assignment with no blending.
"""

from __future__ import annotations

from io import BytesIO

import numpy as np
from PIL import Image, ImageDraw, UnidentifiedImageError

from core.constants import (
    CONTAINER_BACKGROUND_RGBA,
    CONTAINER_BORDER_RGBA,
    CONTAINER_BOTTOM_PADDING,
    CONTAINER_BRAND_LABEL,
    CONTAINER_BRAND_RGBA,
    CONTAINER_MAX_BLOCK_SIDE,
    CONTAINER_METADATA_TAG,
    CONTAINER_SIDE_PADDING,
    CONTAINER_TITLE_RGBA,
    CONTAINER_TOP_PADDING,
    OPAQUE_ALPHA,
)
from core.errors import FormatError
from core.logging_config import get_logger
from core.types import PixelBlock

_LOGGER = get_logger(__name__)
_HEADER_PIXELS = 3


def embed(block: PixelBlock, display_name: str) -> bytes:
    """Place a pixel block inside a decorated PNG canvas.

    Args:
        block: Pixel block to embed.
        display_name: Label drawn above the block.

    Returns:
        PNG file bytes.

    Raises:
        FormatError: If the block does not fit the 16-bit header fields.
    """
    if not 0 < block.width <= CONTAINER_MAX_BLOCK_SIDE:
        raise FormatError(f"Invalid block: width {block.width} cannot be recorded")
    if not 0 < block.height <= CONTAINER_MAX_BLOCK_SIDE:
        raise FormatError(f"Invalid block: height {block.height} cannot be recorded")
    canvas_width = block.width + CONTAINER_SIDE_PADDING * 2
    canvas_height = block.height + CONTAINER_TOP_PADDING + CONTAINER_BOTTOM_PADDING
    canvas = _decorated_canvas(canvas_width, canvas_height, display_name)
    top, left = CONTAINER_TOP_PADDING, CONTAINER_SIDE_PADDING
    canvas[top : top + block.height, left : left + block.width] = block.pixels
    canvas[0, :_HEADER_PIXELS] = _metadata_header(block.width, block.height)
    buffer = BytesIO()
    Image.fromarray(canvas).save(buffer, format="PNG")
    _LOGGER.debug(
        "image_container_embedded",
        block_width=block.width,
        block_height=block.height,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
    )
    return buffer.getvalue()


def extract(image_bytes: bytes) -> PixelBlock:
    """Locate and copy the pixel block out of a container image.

    Args:
        image_bytes: Encoded image file bytes.

    Returns:
        Extracted pixel block.

    Raises:
        FormatError: If the image cannot be decoded, lacks the metadata
            tag, or declares a block outside the canvas.
    """
    canvas = _decode_rgba(image_bytes)
    canvas_height, canvas_width = canvas.shape[:2]
    if canvas_width < _HEADER_PIXELS or canvas_height < 1:
        raise FormatError("Invalid image: missing metadata marker")
    header = canvas[0, :_HEADER_PIXELS, :3]
    if header[0].tobytes() != CONTAINER_METADATA_TAG:
        raise FormatError("Invalid image: missing metadata marker")
    width = (int(header[1, 0]) << 8) | int(header[1, 1])
    height = (int(header[1, 2]) << 8) | int(header[2, 0])
    if (
        width <= 0
        or height <= 0
        or CONTAINER_SIDE_PADDING + width > canvas_width
        or CONTAINER_TOP_PADDING + height > canvas_height
    ):
        raise FormatError("Invalid image: data dimensions out of bounds")
    top, left = CONTAINER_TOP_PADDING, CONTAINER_SIDE_PADDING
    pixels = canvas[top : top + height, left : left + width].copy()
    return PixelBlock(pixels=pixels, width=width, height=height)


def _metadata_header(width: int, height: int) -> np.ndarray:
    """Build the three RGBA header pixels."""
    return np.array(
        [
            [*CONTAINER_METADATA_TAG, OPAQUE_ALPHA],
            [(width >> 8) & 0xFF, width & 0xFF, (height >> 8) & 0xFF, OPAQUE_ALPHA],
            [height & 0xFF, 0, 0, OPAQUE_ALPHA],
        ],
        dtype=np.uint8,
    )


def _decorated_canvas(width: int, height: int, display_name: str) -> np.ndarray:
    """Render background, border, and labels into an RGBA array."""
    image = Image.new("RGBA", (width, height), CONTAINER_BACKGROUND_RGBA)
    draw = ImageDraw.Draw(image)
    draw.rectangle((2, 2, width - 3, height - 3), outline=CONTAINER_BORDER_RGBA, width=1)
    # The built-in font only covers ASCII.
    title = display_name.encode("ascii", "replace").decode("ascii")
    draw.text((CONTAINER_SIDE_PADDING, CONTAINER_TOP_PADDING - 30), title, fill=CONTAINER_TITLE_RGBA)
    brand_x = width - CONTAINER_SIDE_PADDING - draw.textlength(CONTAINER_BRAND_LABEL)
    draw.text(
        (brand_x, height - CONTAINER_BOTTOM_PADDING + 20),
        CONTAINER_BRAND_LABEL,
        fill=CONTAINER_BRAND_RGBA,
    )
    return np.array(image, dtype=np.uint8)


def _decode_rgba(image_bytes: bytes) -> np.ndarray:
    """Decode image bytes into an RGBA uint8 array without color transforms."""
    try:
        with Image.open(BytesIO(image_bytes)) as image:
            image.load()
            rgba = image if image.mode == "RGBA" else image.convert("RGBA")
            return np.array(rgba, dtype=np.uint8)
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as error:
        raise FormatError(f"Invalid image: not a decodable image ({error})") from error
