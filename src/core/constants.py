"""Core constants used across Etymolog modules.

This module centralizes wire-format and storage constants.
Keeping values here avoids magic literals in codec and store logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".etymolog")
DATABASE_FILE_NAME = "lexicon.sqlite3"
SETTINGS_FILE_NAME = "settings.json"
DEFAULT_DISPLAY_NAME = "Untitled"
DEFAULT_COMPRESSION_LEVEL = 9

DOCUMENT_FILE_SUFFIX = ".etymolog.json"
IMAGE_FILE_SUFFIX = ".etymolog.png"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# Envelope
EXPORT_MAGIC = "ETYMOLOG_EXPORT"
EXPORT_SCHEMA_VERSION = 1

# Frame layout: START(8) + VERSION(1) + LENGTH(4) | payload | CRC(4) + END(8)
FRAME_START_MARKER = b"ETYMOLOG"
FRAME_END_MARKER = b"ENDETYMO"
FRAME_FORMAT_VERSION = 1
FRAME_HEADER_SIZE = 13
FRAME_FOOTER_SIZE = 12
FRAME_MAX_PAYLOAD_LENGTH = 0xFFFFFFFF
BYTES_PER_PIXEL = 3
OPAQUE_ALPHA = 255

# Image container
CONTAINER_SIDE_PADDING = 20
CONTAINER_TOP_PADDING = 48
CONTAINER_BOTTOM_PADDING = 48
CONTAINER_METADATA_TAG = b"EXP"
CONTAINER_MAX_BLOCK_SIDE = 0xFFFF
CONTAINER_BACKGROUND_RGBA = (0x0A, 0x0A, 0x0F, 0xFF)
CONTAINER_BORDER_RGBA = (0x00, 0xD4, 0xFF, 0x66)
CONTAINER_TITLE_RGBA = (0x00, 0xD4, 0xFF, 0xFF)
CONTAINER_BRAND_RGBA = (0x88, 0x88, 0x88, 0xFF)
CONTAINER_BRAND_LABEL = "Etymolog"

# Progress stages
STAGE_COLLECT = "collect"
STAGE_SERIALIZE = "serialize"
STAGE_COMPRESS = "compress"
STAGE_FRAME = "frame"
STAGE_EXTRACT = "extract"
STAGE_DECODE = "decode"
STAGE_VALIDATE = "validate"
STAGE_IMPORT = "import"
STAGE_DONE = "done"
IMPORT_PROGRESS_START = 0.2
IMPORT_PROGRESS_SPAN = 0.7
