"""Persistence of resolved attributes in the ``attributes`` table."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import nullcontext

from poolattr.backends.base import Database
from poolattr.core.errors import PersistenceError
from poolattr.core.model import AttributeRecord, DeleteResult, ResolvedAttribute

LOGGER = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS attributes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        type INTEGER NOT NULL,
        value BLOB NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS attributes_type ON attributes (type)",
)


class AttributeStore:
    def __init__(self, database: Database, *, transactional: bool = False) -> None:
        self.database = database
        self.transactional = transactional

    def ensure_schema(self) -> None:
        for statement in _SCHEMA:
            self.database.execute(statement)

    def add(self, resolved: ResolvedAttribute) -> AttributeRecord:
        affected = self.database.execute(
            "INSERT INTO attributes (type, value) VALUES (?, ?)",
            resolved.type_code,
            resolved.blob,
        )
        if affected != 1:
            raise PersistenceError(
                f"Adding {resolved.keyword} attribute (type {resolved.type_code}) "
                f"affected {affected} rows",
                operation="add",
                type_code=resolved.type_code,
            )
        record = AttributeRecord(
            id=self.database.last_insert_id(),
            type_code=resolved.type_code,
            value=resolved.blob,
        )
        LOGGER.info("Added attribute id=%d type=%d", record.id, record.type_code)
        return record

    def find_matching(self, resolved: ResolvedAttribute) -> list[AttributeRecord]:
        if resolved.blob:
            rows = self.database.query(
                "SELECT id, type, value FROM attributes WHERE type = ? AND value = ?",
                resolved.type_code,
                resolved.blob,
            )
        elif not resolved.type_code_v6:
            rows = self.database.query(
                "SELECT id, type, value FROM attributes WHERE type = ?",
                resolved.type_code,
            )
        else:
            rows = self.database.query(
                "SELECT id, type, value FROM attributes WHERE type = ? OR type = ?",
                resolved.type_code,
                resolved.type_code_v6,
            )
        return [_record(row) for row in rows]

    def delete_matching(self, resolved: ResolvedAttribute) -> DeleteResult:
        """Delete every record matching *resolved*, one id at a time.

        Without ``transactional`` the deletions already performed stay
        committed when a later one fails; the raised error lists them.
        """
        deleted: list[AttributeRecord] = []
        already_gone: list[AttributeRecord] = []
        scope = self.database.transaction() if self.transactional else nullcontext()

        with scope:
            for record in self.find_matching(resolved):
                try:
                    affected = self.database.execute("DELETE FROM attributes WHERE id = ?", record.id)
                except PersistenceError as exc:
                    raise PersistenceError(
                        f"Deleting attribute id={record.id} failed: {exc}",
                        operation="delete",
                        type_code=record.type_code,
                        record=record,
                        deleted=self._committed(deleted),
                    ) from exc
                if affected == 0:
                    LOGGER.warning("Attribute id=%d was already removed", record.id)
                    already_gone.append(record)
                    continue
                if affected != 1:
                    raise PersistenceError(
                        f"Deleting attribute id={record.id} affected {affected} rows",
                        operation="delete",
                        type_code=record.type_code,
                        record=record,
                        deleted=self._committed(deleted),
                    )
                LOGGER.info("Deleted attribute id=%d type=%d", record.id, record.type_code)
                deleted.append(record)

        return DeleteResult(resolved=resolved, deleted=tuple(deleted), already_gone=tuple(already_gone))

    def _committed(self, deleted: list[AttributeRecord]) -> tuple[AttributeRecord, ...]:
        # A failed transactional delete rolls everything back.
        return () if self.transactional else tuple(deleted)

    def list(self) -> Iterator[AttributeRecord]:
        rows = self.database.query("SELECT id, type, value FROM attributes ORDER BY type, id")
        for row in rows:
            yield _record(row)


def _record(row: tuple) -> AttributeRecord:
    record_id, type_code, value = row
    return AttributeRecord(id=int(record_id), type_code=int(type_code), value=bytes(value or b""))
