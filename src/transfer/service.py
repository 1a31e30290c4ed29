"""Document and image export/import pipelines.

Each entry point is a strict sequence of codec stages reporting progress at
named stages. Errors from any stage propagate unchanged, and nothing is
wiped until the envelope has fully validated.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from codec.envelope_codec import build_envelope, parse_and_validate, serialize
from codec.image_container import embed, extract
from codec.pixel_payload import block_to_text, text_to_block
from core.constants import (
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_DISPLAY_NAME,
    PNG_SIGNATURE,
    STAGE_COLLECT,
    STAGE_COMPRESS,
    STAGE_DECODE,
    STAGE_DONE,
    STAGE_EXTRACT,
    STAGE_FRAME,
    STAGE_IMPORT,
    STAGE_SERIALIZE,
    STAGE_VALIDATE,
)
from core.errors import ValidationError
from core.logging_config import get_logger
from core.progress import ProgressCallback, ProgressSink, resolve_sink
from core.records import IMPORT_ORDER, record_from_payload
from core.types import ArtifactSummary, Envelope
from store.row_store import RowStore, SettingsStore
from transfer.restore import restore

_LOGGER = get_logger(__name__)

ARTIFACT_DOCUMENT = "document"
ARTIFACT_IMAGE = "image"

Progress = Optional[Union[ProgressSink, ProgressCallback]]


class TransferService:
    """Export/import pipelines bound to one pair of destination stores.

    Callers must not run two imports, or an import and an export, at the
    same time against the same stores.
    """

    def __init__(
        self,
        store: RowStore,
        settings_store: SettingsStore,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
        default_display_name: str = DEFAULT_DISPLAY_NAME,
    ) -> None:
        self._store = store
        self._settings_store = settings_store
        self._compression_level = compression_level
        self._default_display_name = default_display_name

    def collect_envelope(self) -> Envelope:
        """Snapshot every collection and the settings into an envelope."""
        collections = {
            name: tuple(
                record_from_payload(name, row, index)
                for index, row in enumerate(self._store.query_all(name))
            )
            for name in IMPORT_ORDER
        }
        settings = self._settings_store.load()
        return build_envelope(collections, settings, self._display_name(settings))

    def export_document(self, progress: Progress = None) -> str:
        """Export all data as envelope JSON text."""
        sink = resolve_sink(progress)
        sink.report(STAGE_COLLECT, 0.0, "Reading database...")
        envelope = self.collect_envelope()
        sink.report(STAGE_SERIALIZE, 0.5, "Serializing...")
        text = serialize(envelope)
        sink.report(STAGE_DONE, 1.0)
        _LOGGER.info(
            "export_document_completed",
            rows=envelope.row_count(),
            characters=len(text),
        )
        return text

    def export_image(self, progress: Progress = None) -> bytes:
        """Export all data as a PNG image with the envelope in its pixels."""
        sink = resolve_sink(progress)
        sink.report(STAGE_COLLECT, 0.0, "Reading database...")
        envelope = self.collect_envelope()
        sink.report(STAGE_SERIALIZE, 0.15, "Serializing...")
        text = serialize(envelope)
        sink.report(STAGE_COMPRESS, 0.3, "Encoding image...")
        block = text_to_block(text, self._compression_level)
        sink.report(STAGE_FRAME, 0.8, "Building PNG frame...")
        image_bytes = embed(block, envelope.display_name)
        sink.report(STAGE_DONE, 1.0)
        _LOGGER.info(
            "export_image_completed",
            rows=envelope.row_count(),
            block_width=block.width,
            block_height=block.height,
            image_bytes=len(image_bytes),
        )
        return image_bytes

    def import_document(self, text: str, progress: Progress = None) -> Envelope:
        """Validate envelope JSON text and replace all data with it.

        Returns:
            The envelope that was restored.
        """
        sink = resolve_sink(progress)
        sink.report(STAGE_VALIDATE, 0.0, "Validating...")
        envelope = parse_and_validate(text)
        sink.report(STAGE_IMPORT, 0.2, "Importing data...")
        restore(envelope, self._store, self._settings_store, sink)
        sink.report(STAGE_DONE, 1.0, "Import complete")
        _LOGGER.info("import_document_completed", rows=envelope.row_count())
        return envelope

    def import_image(self, image_bytes: bytes, progress: Progress = None) -> Envelope:
        """Decode an export image and replace all data with its envelope.

        Returns:
            The envelope that was restored.
        """
        sink = resolve_sink(progress)
        sink.report(STAGE_EXTRACT, 0.0, "Extracting image data...")
        block = extract(image_bytes)
        sink.report(STAGE_DECODE, 0.15, "Decoding image data...")
        text = block_to_text(block)
        sink.report(STAGE_VALIDATE, 0.6, "Validating...")
        envelope = parse_and_validate(text)
        sink.report(STAGE_IMPORT, 0.7, "Importing data...")
        restore(
            envelope,
            self._store,
            self._settings_store,
            sink,
            progress_start=0.7,
            progress_span=0.25,
        )
        sink.report(STAGE_DONE, 1.0, "Import complete")
        _LOGGER.info("import_image_completed", rows=envelope.row_count())
        return envelope

    def import_artifact(self, data: bytes, progress: Progress = None) -> Envelope:
        """Import either artifact kind, detected from its leading bytes."""
        if detect_artifact_kind(data) == ARTIFACT_IMAGE:
            return self.import_image(data, progress)
        return self.import_document(decode_document_bytes(data), progress)

    def current_display_name(self) -> str:
        """Return the conlang name the next export will carry."""
        return self._display_name(self._settings_store.load())

    def _display_name(self, settings: Mapping[str, Any]) -> str:
        """Pick the conlang name from settings or the configured fallback."""
        name = settings.get("conlangName")
        if isinstance(name, str) and name.strip():
            return name
        return self._default_display_name


def detect_artifact_kind(data: bytes) -> str:
    """Classify artifact bytes as an image (PNG signature) or a document."""
    if data.startswith(PNG_SIGNATURE):
        return ARTIFACT_IMAGE
    return ARTIFACT_DOCUMENT


def decode_document_bytes(data: bytes) -> str:
    """Decode document artifact bytes as UTF-8 text.

    Raises:
        ValidationError: If the bytes are not UTF-8.
    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as error:
        raise ValidationError("Invalid export: invalid syntax (not UTF-8 text)") from error


def envelope_from_artifact(data: bytes) -> tuple[str, Envelope]:
    """Decode and validate an artifact without touching any store.

    Returns:
        Pair of artifact kind and validated envelope.
    """
    kind = detect_artifact_kind(data)
    if kind == ARTIFACT_IMAGE:
        text = block_to_text(extract(data))
    else:
        text = decode_document_bytes(data)
    return kind, parse_and_validate(text)


def inspect_artifact(data: bytes) -> ArtifactSummary:
    """Summarize an artifact's envelope without importing it."""
    kind, envelope = envelope_from_artifact(data)
    return ArtifactSummary(
        kind=kind,
        display_name=envelope.display_name,
        exported_at=envelope.exported_at,
        row_counts=tuple((name, len(envelope.collections[name])) for name in IMPORT_ORDER),
    )
