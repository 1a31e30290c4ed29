"""Shared typed models.

This module defines the transient models passed between the codec,
store, and transfer layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

import numpy as np

from core.records import LexiconRecord


@dataclass(frozen=True)
class Envelope:
    """Versioned, self-identifying export document.

    Attributes:
        magic: Fixed file-type identification string.
        schema_version: Envelope schema version.
        exported_at: UTC timestamp of the export, None when absent.
        display_name: Human-readable conlang name.
        settings: Opaque settings snapshot.
        collections: Typed rows keyed by collection name.
    """

    magic: str
    schema_version: int
    exported_at: datetime | None
    display_name: str
    settings: Mapping[str, Any]
    collections: Mapping[str, tuple[LexiconRecord, ...]]

    def row_count(self) -> int:
        """Return the total number of rows across collections."""
        return sum(len(rows) for rows in self.collections.values())


@dataclass(frozen=True)
class PixelBlock:
    """RGBA pixel grid carrying a frame byte stream.

    Attributes:
        pixels: uint8 array of shape (height, width, 4).
        width: Grid width in pixels.
        height: Grid height in pixels.
    """

    pixels: np.ndarray
    width: int
    height: int


@dataclass(frozen=True)
class DecodedFrame:
    """Payload and checksum recovered from a frame.

    Attributes:
        payload: Exactly the payload bytes declared by the length field.
        checksum: CRC-32 carried in the frame footer.
    """

    payload: bytes
    checksum: int


@dataclass(frozen=True)
class ArtifactSummary:
    """Inspection result for an export artifact.

    Attributes:
        kind: Either "document" or "image".
        display_name: Conlang name stored in the envelope.
        exported_at: Export timestamp stored in the envelope, if any.
        row_counts: Row count per collection in import order.
    """

    kind: str
    display_name: str
    exported_at: datetime | None
    row_counts: tuple[tuple[str, int], ...]
