"""Service layer used by CLI and the public API."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from poolattr.backends.base import Database
from poolattr.backends.sqlite import SQLiteDatabase
from poolattr.core.catalog import CATALOG, AttributeCatalog
from poolattr.core.codec import resolve
from poolattr.core.config import Settings
from poolattr.core.errors import MissingKindError, MissingValueError, NotFoundError
from poolattr.core.model import (
    AttributeDefinition,
    AttributeRecord,
    DeleteResult,
    ResolvedAttribute,
    ValueKind,
)
from poolattr.core.store import AttributeStore

LOGGER = logging.getLogger(__name__)


class AttributeService:
    def __init__(
        self,
        database: Database,
        *,
        catalog: AttributeCatalog = CATALOG,
        transactional_delete: bool = False,
    ) -> None:
        self.database = database
        self.catalog = catalog
        self.store = AttributeStore(database, transactional=transactional_delete)
        self.store.ensure_schema()

    @classmethod
    def from_settings(cls, settings: Settings) -> AttributeService:
        database = SQLiteDatabase(settings.database, timeout_s=settings.timeout_s)
        LOGGER.debug("Using attribute database %s", settings.database)
        return cls(database, transactional_delete=settings.transactional_delete)

    def resolve(self, keyword: str, value: str | None, kind: ValueKind) -> ResolvedAttribute:
        return resolve(keyword, value, kind, self.catalog)

    def add_attribute(self, keyword: str, value: str | None, kind: ValueKind) -> AttributeRecord:
        if kind is ValueKind.NONE or value is None:
            raise MissingValueError(keyword)
        resolved = self.resolve(keyword, value, kind)
        return self.store.add(resolved)

    def delete_attribute(
        self,
        keyword: str,
        value: str | None = None,
        kind: ValueKind = ValueKind.NONE,
    ) -> DeleteResult:
        """Delete attributes by keyword, optionally narrowed to one value.

        Raises ``NotFoundError`` when nothing matched and ``MissingKindError``
        when a value is given without a kind.
        """
        resolved = self._resolve_filter(keyword, value, kind)
        result = self.store.delete_matching(resolved)
        if result.deleted_count == 0 and not result.already_gone:
            raise NotFoundError(resolved)
        return result

    def find_attributes(
        self,
        keyword: str,
        value: str | None = None,
        kind: ValueKind = ValueKind.NONE,
    ) -> list[AttributeRecord]:
        return self.store.find_matching(self._resolve_filter(keyword, value, kind))

    def _resolve_filter(self, keyword: str, value: str | None, kind: ValueKind) -> ResolvedAttribute:
        if value is None:
            kind = ValueKind.NONE
        elif kind is ValueKind.NONE:
            raise MissingKindError(keyword, value)
        return self.resolve(keyword, value, kind)

    def list_attributes(self) -> Iterator[AttributeRecord]:
        return self.store.list()

    def describe_catalog(self) -> tuple[AttributeDefinition, ...]:
        return self.catalog.all()

    def kind_for_type(self, type_code: int) -> ValueKind:
        return self.catalog.kind_for_type(type_code)

    def display_kind(self, keyword: str) -> ValueKind:
        definition = self.catalog.lookup(keyword)
        return definition.value_kind if definition else ValueKind.HEX

    def close(self) -> None:
        self.database.close()
