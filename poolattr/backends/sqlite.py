"""SQLite database backend."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from poolattr.core.errors import PersistenceError, StoreUnavailableError

LOGGER = logging.getLogger(__name__)


class SQLiteDatabase:
    """Autocommit SQLite connection; use :meth:`transaction` to group writes."""

    def __init__(self, path: str | Path, *, timeout_s: float = 5.0) -> None:
        self.path = str(path)
        if self.path != ":memory:":
            try:
                Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StoreUnavailableError(
                    f"Could not create database directory for {self.path}: {exc}",
                    operation="open",
                ) from exc
        try:
            self._conn = sqlite3.connect(self.path, timeout=timeout_s, isolation_level=None)
        except sqlite3.Error as exc:
            raise StoreUnavailableError(
                f"Could not open database {self.path}: {exc}",
                operation="open",
            ) from exc
        self._in_transaction = False
        self._last_insert_id = 0

    def execute(self, sql: str, *params: Any) -> int:
        LOGGER.debug("execute: %s %r", sql, params)
        try:
            cursor = self._conn.execute(sql, params)
        except (sqlite3.Error, OverflowError) as exc:
            raise PersistenceError(f"Database statement failed: {exc}", operation="execute") from exc
        self._last_insert_id = cursor.lastrowid or 0
        return cursor.rowcount

    def query(self, sql: str, *params: Any) -> Iterator[tuple[Any, ...]]:
        LOGGER.debug("query: %s %r", sql, params)
        try:
            cursor = self._conn.execute(sql, params)
        except (sqlite3.Error, OverflowError) as exc:
            raise PersistenceError(f"Database query failed: {exc}", operation="query") from exc
        try:
            yield from cursor
        except sqlite3.Error as exc:
            raise PersistenceError(f"Database query failed: {exc}", operation="query") from exc
        finally:
            cursor.close()

    def last_insert_id(self) -> int:
        return self._last_insert_id

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._in_transaction:
            yield
            return
        self.execute("BEGIN")
        self._in_transaction = True
        try:
            yield
        except BaseException:
            self._in_transaction = False
            self.execute("ROLLBACK")
            raise
        self._in_transaction = False
        self.execute("COMMIT")

    def close(self) -> None:
        self._conn.close()
