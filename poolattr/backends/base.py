"""Database interfaces."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import Any, Protocol


class Database(Protocol):
    def execute(self, sql: str, *params: Any) -> int:
        """Run a statement and return the number of affected rows."""

    def query(self, sql: str, *params: Any) -> Iterator[tuple[Any, ...]]:
        """Run a query and lazily yield result rows."""

    def last_insert_id(self) -> int:
        """Return the row id generated by the most recent insert."""

    def transaction(self) -> AbstractContextManager[None]:
        """Group the statements issued inside the block into one transaction."""

    def close(self) -> None:
        """Release the underlying connection."""
