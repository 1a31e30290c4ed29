"""Unit tests for export/import pipelines."""

from __future__ import annotations

import copy
import json

import pytest

from core.errors import EtymologStoreError, FormatError, ValidationError
from lexicon_fixtures import (
    SAMPLE_ROWS,
    SAMPLE_SETTINGS,
    InMemorySettingsStore,
    RecordingProgressSink,
    populate_store,
)
from store.sqlite_store import SqliteRowStore
from transfer.service import (
    ARTIFACT_DOCUMENT,
    ARTIFACT_IMAGE,
    TransferService,
    decode_document_bytes,
    detect_artifact_kind,
    inspect_artifact,
)


def _service(populated: bool = True, settings=None) -> TransferService:
    store = SqliteRowStore()
    if populated:
        populate_store(store)
    settings_store = InMemorySettingsStore(SAMPLE_SETTINGS if settings is None else settings)
    return TransferService(store, settings_store, compression_level=6)


def test_export_document_reports_collect_serialize_done() -> None:
    """Document export should report its three stages in order."""
    sink = RecordingProgressSink()

    text = _service().export_document(sink)

    assert sink.stages == ["collect", "serialize", "done"]
    assert json.loads(text)["conlangName"] == "Kabanic"


def test_export_image_reports_every_encoding_stage() -> None:
    """Image export should report each encoding stage and emit a PNG."""
    sink = RecordingProgressSink()

    image_bytes = _service().export_image(sink)

    assert sink.stages == ["collect", "serialize", "compress", "frame", "done"]
    assert detect_artifact_kind(image_bytes) == ARTIFACT_IMAGE


def test_export_uses_configured_name_when_settings_have_none() -> None:
    """Exports should fall back to the default display name."""
    service = _service(settings={"conlangName": "  "})

    payload = json.loads(service.export_document())

    assert payload["conlangName"] == "Untitled"
    assert service.current_display_name() == "Untitled"


def test_import_document_reports_validate_import_done() -> None:
    """Document import should validate before importing and finish with done."""
    text = _service().export_document()
    target = _service(populated=False, settings={})
    sink = RecordingProgressSink()

    envelope = target.import_document(text, sink)

    stages = sink.stages
    assert stages[0] == "validate" and stages[-1] == "done"
    assert stages.index("validate") < stages.index("import")
    assert sink.reports[-1][2] == "Import complete"
    assert envelope.row_count() == sum(len(rows) for rows in SAMPLE_ROWS.values())


def test_import_image_progress_is_monotonic() -> None:
    """Image import fractions should never decrease."""
    image_bytes = _service().export_image()
    sink = RecordingProgressSink()

    _service(populated=False).import_image(image_bytes, sink)

    fractions = [fraction for _, fraction, _ in sink.reports]
    assert sink.stages[:4] == ["extract", "decode", "validate", "import"]
    assert fractions == sorted(fractions)


def test_import_accepts_plain_callback() -> None:
    """A bare callable should work as a progress receiver."""
    calls = []
    text = _service().export_document()

    _service(populated=False).import_document(text, lambda *report: calls.append(report))

    assert calls[-1] == ("done", 1.0, "Import complete")


def test_invalid_document_leaves_destination_untouched() -> None:
    """A failed validation should not wipe any rows."""
    service = _service()
    sink = RecordingProgressSink()

    with pytest.raises(ValidationError, match="not a recognized export"):
        service.import_document('{"magic": "OTHER"}', sink)

    assert sink.stages == ["validate"]
    assert json.loads(service.export_document())["tables"]["lexicon"] == SAMPLE_ROWS["lexicon"]


def test_store_failure_rolls_back_import() -> None:
    """A foreign-key violation during restore should keep the previous data."""
    payload = json.loads(_service().export_document())
    payload["tables"]["phonemes"][0]["grapheme_id"] = 404
    service = _service(settings={"conlangName": "Before"})

    with pytest.raises(EtymologStoreError):
        service.import_document(json.dumps(payload))

    exported = json.loads(service.export_document())
    assert exported["tables"]["phonemes"] == SAMPLE_ROWS["phonemes"]
    assert exported["conlangName"] == "Before"


def test_import_artifact_detects_kind() -> None:
    """PNG bytes should route to image import and other bytes to document import."""
    source = _service()
    image_bytes = source.export_image()
    document_bytes = source.export_document().encode("utf-8")
    target = _service(populated=False)

    from_image = target.import_artifact(image_bytes)
    from_document = target.import_artifact(document_bytes)

    assert from_image.collections == from_document.collections
    assert detect_artifact_kind(document_bytes) == ARTIFACT_DOCUMENT


def test_import_artifact_rejects_truncated_png() -> None:
    """A PNG signature with a broken body should raise a format error."""
    image_bytes = _service().export_image()

    with pytest.raises(FormatError):
        _service().import_artifact(image_bytes[:64])


def test_decode_document_bytes_rejects_binary() -> None:
    """Non UTF-8 document bytes should raise a validation error."""
    with pytest.raises(ValidationError, match="invalid syntax"):
        decode_document_bytes(b"\xff\xfe\x00garbage")


def test_inspect_artifact_summarizes_without_importing() -> None:
    """Inspection should count rows per collection in import order."""
    summary = inspect_artifact(_service().export_image())

    counts = dict(summary.row_counts)
    assert summary.kind == ARTIFACT_IMAGE
    assert summary.display_name == "Kabanic"
    assert counts == {name: len(rows) for name, rows in SAMPLE_ROWS.items()}
    assert [name for name, _ in summary.row_counts][0] == "glyphs"


def test_round_trip_restores_settings_blob() -> None:
    """Imported settings should replace the destination settings exactly."""
    settings = copy.deepcopy(SAMPLE_SETTINGS)
    settings["custom"] = {"nested": [1, 2, 3]}
    text = _service(settings=settings).export_document()
    target = _service(populated=False, settings={})

    target.import_document(text)

    assert target.current_display_name() == "Kabanic"
    assert json.loads(target.export_document())["settings"] == settings
