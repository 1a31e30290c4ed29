"""Store interfaces consumed by the import orchestrator.

The orchestrator receives these as explicit dependencies rather than
reaching for a global database, which keeps restore logic testable.
"""

from __future__ import annotations

from typing import Any, ContextManager, Mapping, Protocol, Sequence


class RowStore(Protocol):
    """Row-oriented destination store for lexicon collections."""

    def wipe(self) -> None:
        """Drop every collection and recreate the empty schema."""

    def insert_row(self, collection: str, columns: Sequence[str], values: Sequence[Any]) -> None:
        """Insert one row with an explicit column list."""

    def query_all(self, collection: str) -> list[dict[str, Any]]:
        """Return every row of a collection keyed by column name."""

    def advance_sequence(self, collection: str, minimum: int) -> None:
        """Ensure the next generated identifier is above ``minimum``."""

    def persist(self) -> None:
        """Flush the current state to durable backing."""

    def transaction(self) -> ContextManager[None]:
        """Scope writes so any failure restores the previous state."""


class SettingsStore(Protocol):
    """Key/value store holding the opaque settings blob."""

    def load(self) -> dict[str, Any]:
        """Return the current settings mapping."""

    def save(self, settings: Mapping[str, Any]) -> None:
        """Replace the stored settings mapping."""
