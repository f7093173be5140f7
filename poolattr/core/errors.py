"""Domain-specific errors for poolattr.

Every error carries the structured fields that describe it; the message
passed to ``Exception`` is only a default rendering for logs and the CLI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from poolattr.core.model import AttributeRecord, ResolvedAttribute, ValueKind


class PoolAttrError(Exception):
    """Base error for poolattr."""


class ConfigLoadError(PoolAttrError):
    """Raised when reading the configuration file fails."""


class ConfigValidationError(PoolAttrError):
    """Raised when the configuration file does not conform to its schema."""


class UnknownAttributeError(PoolAttrError):
    """Keyword is not in the catalog and is not a numeric type code."""

    def __init__(self, keyword: str) -> None:
        super().__init__(f"the {keyword} attribute is not recognized")
        self.keyword = keyword


class TypeMismatchError(PoolAttrError):
    """Declared value kind conflicts with the catalog's kind for a keyword."""

    def __init__(self, keyword: str, expected: ValueKind, declared: ValueKind) -> None:
        super().__init__(f"the {keyword} attribute requires {expected.article} value")
        self.keyword = keyword
        self.expected = expected
        self.declared = declared


class EncodingError(PoolAttrError):
    """Raw value could not be encoded into a blob of the requested kind."""

    def __init__(self, value: str, reason: str, *, keyword: str | None = None) -> None:
        super().__init__(f"{reason}: '{value}'" if value else reason)
        self.value = value
        self.reason = reason
        self.keyword = keyword


class MissingValueError(PoolAttrError):
    """An attribute cannot be added without a value."""

    def __init__(self, keyword: str) -> None:
        super().__init__(f"the value of the {keyword} attribute is missing")
        self.keyword = keyword


class MissingKindError(PoolAttrError):
    """A value was given without saying how to encode it."""

    def __init__(self, keyword: str, value: str) -> None:
        super().__init__(f"the value '{value}' of the {keyword} attribute needs a value kind")
        self.keyword = keyword
        self.value = value


class PersistenceError(PoolAttrError):
    """Store operation failed or did not affect the expected number of rows."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        type_code: int | None = None,
        record: AttributeRecord | None = None,
        deleted: tuple[AttributeRecord, ...] = (),
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.type_code = type_code
        self.record = record
        self.deleted = deleted


class StoreUnavailableError(PersistenceError):
    """Raised when the backing database cannot be opened."""


class NotFoundError(PoolAttrError):
    """A delete matched zero records."""

    def __init__(self, resolved: ResolvedAttribute) -> None:
        super().__init__(f"no {resolved.keyword} attribute was found")
        self.resolved = resolved
