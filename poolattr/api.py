"""Stable public API for building tooling on top of poolattr.

This module is the supported integration surface for third-party callers
(pool daemons, provisioning scripts, tests). Avoid importing from internal
modules unless intentionally depending on non-stable internals.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from poolattr.backends.base import Database
from poolattr.backends.sqlite import SQLiteDatabase
from poolattr.core.catalog import CATALOG, AttributeCatalog
from poolattr.core.codec import decode_value
from poolattr.core.config import Settings, load_settings
from poolattr.core.errors import (
    ConfigLoadError,
    ConfigValidationError,
    EncodingError,
    MissingKindError,
    MissingValueError,
    NotFoundError,
    PersistenceError,
    PoolAttrError,
    StoreUnavailableError,
    TypeMismatchError,
    UnknownAttributeError,
)
from poolattr.core.model import (
    AttributeDefinition,
    AttributeRecord,
    DeleteResult,
    ResolvedAttribute,
    ValueKind,
)
from poolattr.core.service import AttributeService

__all__ = [
    "PoolAttrError",
    "ConfigLoadError",
    "ConfigValidationError",
    "EncodingError",
    "MissingKindError",
    "MissingValueError",
    "NotFoundError",
    "PersistenceError",
    "StoreUnavailableError",
    "TypeMismatchError",
    "UnknownAttributeError",
    "AttributeCatalog",
    "AttributeDefinition",
    "AttributeRecord",
    "DeleteResult",
    "ResolvedAttribute",
    "ValueKind",
    "Database",
    "SQLiteDatabase",
    "Settings",
    "Client",
]


class Client:
    """Public client for managing pool attributes.

    A `Client` wraps value resolution and the attribute store behind a stable
    API. Pass an explicit `database` to use a custom backend or an in-memory
    SQLite database; otherwise settings are loaded from the configuration
    file and environment.
    """

    def __init__(
        self,
        database: Database | str | Path | None = None,
        *,
        settings: Settings | None = None,
        catalog: AttributeCatalog = CATALOG,
    ) -> None:
        if database is None:
            settings = settings or load_settings()
            database = SQLiteDatabase(settings.database, timeout_s=settings.timeout_s)
        elif isinstance(database, (str, Path)):
            database = SQLiteDatabase(database)
        transactional = settings.transactional_delete if settings else False
        self._service = AttributeService(
            database,
            catalog=catalog,
            transactional_delete=transactional,
        )

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._service.close()

    def resolve(self, keyword: str, value: str | None = None, kind: ValueKind = ValueKind.NONE) -> ResolvedAttribute:
        return self._service.resolve(keyword, value, kind)

    def add_attribute(self, keyword: str, value: str, kind: ValueKind) -> AttributeRecord:
        return self._service.add_attribute(keyword, value, kind)

    def delete_attribute(
        self,
        keyword: str,
        value: str | None = None,
        kind: ValueKind = ValueKind.NONE,
    ) -> DeleteResult:
        return self._service.delete_attribute(keyword, value, kind)

    def find_attributes(
        self,
        keyword: str,
        value: str | None = None,
        kind: ValueKind = ValueKind.NONE,
    ) -> list[AttributeRecord]:
        return self._service.find_attributes(keyword, value, kind)

    def list_attributes(self) -> Iterator[AttributeRecord]:
        return self._service.list_attributes()

    def describe_catalog(self) -> tuple[AttributeDefinition, ...]:
        return self._service.describe_catalog()

    def display_value(self, record: AttributeRecord) -> str:
        """Decode a stored value for display, falling back to hex."""
        return decode_value(self._service.kind_for_type(record.type_code), record.value)
