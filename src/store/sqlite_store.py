"""SQLite-backed lexicon row store.

The working database lives in memory and is copied to the database file on
``persist``, so a failed restore never reaches the durable copy. Foreign keys
are enforced and writes can be scoped in an explicit transaction.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Any, Iterator, Sequence

from core.errors import EtymologStoreError
from core.logging_config import get_logger
from core.records import IMPORT_ORDER
from store.schema import create_statements, drop_statements

_LOGGER = get_logger(__name__)


class SqliteRowStore:
    """Row store over an in-memory SQLite working copy.

    Args:
        database_path: Durable database file. ``None`` keeps the store purely
            in memory and turns ``persist`` into a no-op.
    """

    def __init__(self, database_path: Path | None = None) -> None:
        self._database_path = database_path
        self._connection = sqlite3.connect(":memory:", isolation_level=None)
        self._connection.row_factory = sqlite3.Row
        try:
            if database_path is not None and database_path.exists():
                with closing(sqlite3.connect(database_path)) as source:
                    source.backup(self._connection)
            self._connection.execute("PRAGMA foreign_keys = ON")
            self._create_schema()
        except sqlite3.Error as error:
            self._connection.close()
            raise EtymologStoreError(
                f"Failed to open lexicon database at {database_path}: {error}"
            ) from error

    def close(self) -> None:
        """Release the working connection without persisting."""
        self._connection.close()

    def wipe(self) -> None:
        """Drop every lexicon table and recreate the empty schema."""
        self._run_all(drop_statements())
        self._create_schema()

    def insert_row(self, collection: str, columns: Sequence[str], values: Sequence[Any]) -> None:
        """Insert one row into a collection.

        Args:
            collection: Collection name from the import order.
            columns: Insert column list.
            values: Values aligned with ``columns``.

        Raises:
            EtymologStoreError: If the insert violates a constraint.
        """
        table = _table_name(collection)
        placeholders = ", ".join("?" for _ in columns)
        statement = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
        try:
            self._connection.execute(statement, tuple(values))
        except sqlite3.Error as error:
            raise EtymologStoreError(f"Failed to insert row into {table}: {error}") from error

    def query_all(self, collection: str) -> list[dict[str, Any]]:
        """Return every row of a collection in insertion order."""
        table = _table_name(collection)
        try:
            cursor = self._connection.execute(f"SELECT * FROM {table} ORDER BY rowid")
        except sqlite3.Error as error:
            raise EtymologStoreError(f"Failed to read table {table}: {error}") from error
        return [dict(row) for row in cursor.fetchall()]

    def advance_sequence(self, collection: str, minimum: int) -> None:
        """Raise the AUTOINCREMENT counter of a collection to at least ``minimum``."""
        table = _table_name(collection)
        try:
            cursor = self._connection.execute(
                "UPDATE sqlite_sequence SET seq = MAX(seq, ?) WHERE name = ?",
                (minimum, table),
            )
            if cursor.rowcount == 0:
                self._connection.execute(
                    "INSERT INTO sqlite_sequence (name, seq) VALUES (?, ?)",
                    (table, minimum),
                )
        except sqlite3.Error as error:
            raise EtymologStoreError(f"Failed to advance sequence for {table}: {error}") from error

    def sequence_value(self, collection: str) -> int | None:
        """Return the current AUTOINCREMENT counter of a collection."""
        row = self._connection.execute(
            "SELECT seq FROM sqlite_sequence WHERE name = ?",
            (_table_name(collection),),
        ).fetchone()
        return None if row is None else int(row["seq"])

    def persist(self) -> None:
        """Copy the working database to the durable database file.

        Raises:
            EtymologStoreError: If called mid-transaction or the copy fails.
        """
        if self._database_path is None:
            return
        if self._connection.in_transaction:
            raise EtymologStoreError("Cannot persist lexicon database inside an open transaction")
        try:
            self._database_path.parent.mkdir(parents=True, exist_ok=True)
            with closing(sqlite3.connect(self._database_path)) as target:
                self._connection.backup(target)
        except (sqlite3.Error, OSError) as error:
            raise EtymologStoreError(
                f"Failed to persist lexicon database to {self._database_path}: {error}"
            ) from error
        _LOGGER.info("lexicon_database_persisted", path=str(self._database_path))

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed writes atomically.

        Raises:
            EtymologStoreError: If a transaction is already open.
        """
        if self._connection.in_transaction:
            raise EtymologStoreError("Nested lexicon transactions are not supported")
        self._connection.execute("BEGIN")
        try:
            yield
        except BaseException:
            self._connection.execute("ROLLBACK")
            _LOGGER.warning("lexicon_transaction_rolled_back")
            raise
        try:
            self._connection.execute("COMMIT")
        except sqlite3.Error as error:
            self._connection.execute("ROLLBACK")
            raise EtymologStoreError(f"Failed to commit lexicon transaction: {error}") from error

    def _create_schema(self) -> None:
        """Create any missing tables and indexes."""
        self._run_all(create_statements())

    def _run_all(self, statements: Sequence[str]) -> None:
        """Execute DDL statements one by one inside the current scope."""
        try:
            for statement in statements:
                self._connection.execute(statement)
        except sqlite3.Error as error:
            raise EtymologStoreError(f"Failed to apply lexicon schema: {error}") from error


def _table_name(collection: str) -> str:
    """Map a collection name to its table, rejecting unknown names.

    Raises:
        EtymologStoreError: If the collection is not part of the schema.
    """
    if collection not in IMPORT_ORDER:
        raise EtymologStoreError(f"Unknown lexicon collection: {collection}")
    return collection
