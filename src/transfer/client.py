"""Python SDK for lexicon export and import.

This module binds the transfer pipelines to the SQLite database and the
settings file under the configured data root.
"""

from __future__ import annotations

from pathlib import Path

from core.config import EtymologConfig
from core.constants import DOCUMENT_FILE_SUFFIX, IMAGE_FILE_SUFFIX
from core.errors import EtymologStoreError
from core.logging_config import get_logger
from core.types import ArtifactSummary, Envelope
from store.settings_store import JsonSettingsStore
from store.sqlite_store import SqliteRowStore
from transfer.service import (
    ARTIFACT_DOCUMENT,
    ARTIFACT_IMAGE,
    Progress,
    TransferService,
    inspect_artifact,
)

_LOGGER = get_logger(__name__)


class EtymologClient:
    """Primary SDK entry point for export and import workflows."""

    def __init__(self, config: EtymologConfig | None = None) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
        """
        self._config = config or EtymologConfig.from_env()
        self._store = SqliteRowStore(self._config.database_path)
        self._settings_store = JsonSettingsStore(self._config.settings_path)
        self._service = TransferService(
            self._store,
            self._settings_store,
            compression_level=self._config.compression_level,
            default_display_name=self._config.default_display_name,
        )

    @property
    def config(self) -> EtymologConfig:
        """Return the runtime configuration."""
        return self._config

    @property
    def store(self) -> SqliteRowStore:
        """Return the lexicon row store."""
        return self._store

    @property
    def settings_store(self) -> JsonSettingsStore:
        """Return the settings store."""
        return self._settings_store

    def close(self) -> None:
        """Release the database connection."""
        self._store.close()

    def export_document(self, progress: Progress = None) -> str:
        """Export all data as envelope JSON text."""
        return self._service.export_document(progress)

    def export_image(self, progress: Progress = None) -> bytes:
        """Export all data as PNG image bytes."""
        return self._service.export_image(progress)

    def export_to_path(
        self,
        output_path: str | Path,
        kind: str = ARTIFACT_DOCUMENT,
        progress: Progress = None,
    ) -> Path:
        """Export all data into a file.

        Args:
            output_path: Target file, or a directory to receive
                ``<conlang name>.etymolog.json`` / ``.etymolog.png``.
            kind: ``"document"`` or ``"image"``.
            progress: Optional progress sink or callback.

        Returns:
            Written file path.

        Raises:
            EtymologStoreError: If the file cannot be written.
        """
        if kind == ARTIFACT_IMAGE:
            payload = self._service.export_image(progress)
        elif kind == ARTIFACT_DOCUMENT:
            payload = self._service.export_document(progress).encode("utf-8")
        else:
            raise ValueError(f"Unsupported artifact kind: {kind}")
        target = self._resolve_output_path(Path(output_path).expanduser(), kind)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except OSError as error:
            raise EtymologStoreError(f"Failed to write export to {target}: {error}") from error
        _LOGGER.info("export_written", path=str(target), kind=kind, size=len(payload))
        return target

    def import_document(self, text: str, progress: Progress = None) -> Envelope:
        """Replace all data with a JSON document export."""
        return self._service.import_document(text, progress)

    def import_image(self, image_bytes: bytes, progress: Progress = None) -> Envelope:
        """Replace all data with an image export."""
        return self._service.import_image(image_bytes, progress)

    def import_from_path(self, input_path: str | Path, progress: Progress = None) -> Envelope:
        """Replace all data with the artifact stored in a file."""
        return self._service.import_artifact(_read_artifact(Path(input_path)), progress)

    def inspect_path(self, input_path: str | Path) -> ArtifactSummary:
        """Summarize the artifact stored in a file without importing it."""
        return inspect_artifact(_read_artifact(Path(input_path)))

    def _resolve_output_path(self, output_path: Path, kind: str) -> Path:
        """Expand a directory target into a default export file name."""
        if not output_path.is_dir():
            return output_path
        base_name = self._service.current_display_name()
        suffix = IMAGE_FILE_SUFFIX if kind == ARTIFACT_IMAGE else DOCUMENT_FILE_SUFFIX
        return output_path / f"{_safe_file_stem(base_name)}{suffix}"


def _read_artifact(input_path: Path) -> bytes:
    """Read artifact bytes from disk.

    Raises:
        EtymologStoreError: If the file cannot be read.
    """
    try:
        return input_path.expanduser().read_bytes()
    except OSError as error:
        raise EtymologStoreError(f"Failed to read artifact {input_path}: {error}") from error


def _safe_file_stem(name: str) -> str:
    """Reduce a display name to a portable file name stem."""
    stem = "".join(char if char.isalnum() or char in "-_" else "_" for char in name.strip())
    return stem.strip("_") or "export"
