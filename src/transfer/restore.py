"""Ordered, transactional restore of a validated envelope.

Restore wipes the row store, inserts every collection parents-first, and
advances identifier sequences past the imported ids, all inside one store
transaction. Only after the transaction commits are the rows persisted and
the settings replaced, so a failed insert leaves both stores untouched.
"""

from __future__ import annotations

from core.constants import IMPORT_PROGRESS_SPAN, IMPORT_PROGRESS_START, STAGE_IMPORT
from core.logging_config import get_logger
from core.progress import ProgressCallback, ProgressSink, resolve_sink
from core.records import AUTO_ID_COLLECTIONS, IMPORT_ORDER, column_names, record_values
from core.types import Envelope
from store.row_store import RowStore, SettingsStore

_LOGGER = get_logger(__name__)


def restore(
    envelope: Envelope,
    store: RowStore,
    settings_store: SettingsStore,
    progress: ProgressSink | ProgressCallback | None = None,
    progress_start: float = IMPORT_PROGRESS_START,
    progress_span: float = IMPORT_PROGRESS_SPAN,
) -> None:
    """Replace the destination stores with the envelope contents.

    Args:
        envelope: Validated envelope.
        store: Destination row store.
        settings_store: Destination settings store.
        progress: Optional sink receiving one ``import`` report per row.
        progress_start: Overall fraction reported before the first row.
        progress_span: Overall fraction covered by row insertion.

    Raises:
        EtymologStoreError: If any store step fails; the transaction is
            rolled back and settings are not written.
    """
    sink = resolve_sink(progress)
    total_rows = envelope.row_count()
    inserted_rows = 0
    _LOGGER.info(
        "restore_started",
        display_name=envelope.display_name,
        total_rows=total_rows,
    )
    with store.transaction():
        store.wipe()
        for collection in IMPORT_ORDER:
            rows = envelope.collections.get(collection, ())
            if not rows:
                continue
            columns = column_names(collection)
            for record in rows:
                store.insert_row(collection, columns, record_values(record))
                inserted_rows += 1
                sink.report(
                    STAGE_IMPORT,
                    progress_start + progress_span * (inserted_rows / total_rows),
                    f"Importing {collection}...",
                )
        _advance_sequences(envelope, store)
    store.persist()
    settings_store.save(envelope.settings)
    _LOGGER.info("restore_completed", inserted_rows=inserted_rows)


def _advance_sequences(envelope: Envelope, store: RowStore) -> None:
    """Move each auto-id sequence past the highest imported identifier."""
    for collection in IMPORT_ORDER:
        rows = envelope.collections.get(collection, ())
        if collection not in AUTO_ID_COLLECTIONS or not rows:
            continue
        highest_id = max(getattr(record, "id") for record in rows)
        store.advance_sequence(collection, highest_id)
