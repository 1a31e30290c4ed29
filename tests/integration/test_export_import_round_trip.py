"""Integration tests for export/import round trips through the SDK."""

from __future__ import annotations

import json
from dataclasses import replace

from core.config import EtymologConfig
from core.records import IMPORT_ORDER
from lexicon_fixtures import SAMPLE_ROWS, SAMPLE_SETTINGS, RecordingProgressSink, populate_store
from transfer.client import EtymologClient


def _seeded_client(tmp_path) -> EtymologClient:
    config = replace(EtymologConfig.from_env(), data_root=tmp_path / "source")
    client = EtymologClient(config)
    populate_store(client.store)
    client.store.persist()
    client.settings_store.save(SAMPLE_SETTINGS)
    return client


def _fresh_client(tmp_path, name: str) -> EtymologClient:
    return EtymologClient(replace(EtymologConfig.from_env(), data_root=tmp_path / name))


def test_document_round_trip_restores_rows_and_settings(tmp_path) -> None:
    """A JSON export imported elsewhere should reproduce every row and setting."""
    source = _seeded_client(tmp_path)
    target = _fresh_client(tmp_path, "target")

    target.import_document(source.export_document())

    for collection in IMPORT_ORDER:
        assert target.store.query_all(collection) == SAMPLE_ROWS[collection]
    assert target.settings_store.load() == SAMPLE_SETTINGS


def test_image_round_trip_matches_document_round_trip(tmp_path) -> None:
    """An image export should carry exactly the same data as a document export."""
    source = _seeded_client(tmp_path)
    via_image = _fresh_client(tmp_path, "via-image")
    via_document = _fresh_client(tmp_path, "via-document")

    via_image.import_image(source.export_image())
    via_document.import_document(source.export_document())

    for collection in IMPORT_ORDER:
        assert via_image.store.query_all(collection) == via_document.store.query_all(collection)


def test_empty_database_round_trips(tmp_path) -> None:
    """An export of an empty database should import into an empty database."""
    source = _fresh_client(tmp_path, "empty")
    target = _seeded_client(tmp_path)

    envelope = target.import_image(source.export_image())

    assert envelope.row_count() == 0
    assert all(target.store.query_all(collection) == [] for collection in IMPORT_ORDER)


def test_ids_continue_after_import(tmp_path) -> None:
    """New rows after an import should receive ids above the imported maximum."""
    source = _seeded_client(tmp_path)
    target = _fresh_client(tmp_path, "target")
    target.import_document(source.export_document())

    target.store.insert_row("lexicon", ("lemma",), ("nova",))

    assert target.store.query_all("lexicon")[-1]["id"] == 4


def test_image_import_progress_runs_through_all_stages(tmp_path) -> None:
    """Image import should report every decoding stage before completing."""
    source = _seeded_client(tmp_path)
    target = _fresh_client(tmp_path, "target")
    sink = RecordingProgressSink()

    target.import_from_path(
        source.export_to_path(tmp_path / "lexicon.etymolog.png", kind="image"),
        progress=sink,
    )

    assert sink.stages[0] == "extract" and sink.stages[-1] == "done"
    assert {"decode", "validate", "import"} <= set(sink.stages)


def test_import_survives_reopen_from_disk(tmp_path) -> None:
    """Imported data should be durable across client instances."""
    source = _seeded_client(tmp_path)
    target = _fresh_client(tmp_path, "target")
    target.import_document(source.export_document())
    target.close()

    reopened = _fresh_client(tmp_path, "target")

    assert reopened.store.query_all("lexicon_ancestry_closure") == SAMPLE_ROWS[
        "lexicon_ancestry_closure"
    ]
    assert reopened.settings_store.load()["conlangName"] == "Kabanic"


def test_empty_document_re_export_is_structurally_equal(tmp_path) -> None:
    """Export, import, and re-export of an empty database should match apart from time."""
    source = _fresh_client(tmp_path, "empty")
    target = _fresh_client(tmp_path, "target")
    first = json.loads(source.export_document())

    target.import_document(json.dumps(first))
    second = json.loads(target.export_document())

    assert second["tables"] == first["tables"]
    assert second["settings"] == first["settings"]
    assert all(rows == [] for rows in second["tables"].values())
