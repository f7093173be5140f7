"""Core data models used across catalog, codec, store, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ValueKind(str, Enum):
    """How a raw attribute value is written and encoded.

    The values double as the CLI option names (``--server`` etc).
    """

    HEX = "hex"
    STRING = "string"
    ADDRESS = "server"
    SUBNET = "subnet"
    NONE = "none"

    @property
    def article(self) -> str:
        return _ARTICLES[self]


_ARTICLES = {
    ValueKind.HEX: "a hex",
    ValueKind.STRING: "a string",
    ValueKind.ADDRESS: "an IP address",
    ValueKind.SUBNET: "a subnet",
    ValueKind.NONE: "no",
}


@dataclass(frozen=True)
class AttributeDefinition:
    keyword: str
    value_kind: ValueKind
    type_code: int
    type_code_v6: int = 0

    @property
    def dual_family(self) -> bool:
        return self.type_code_v6 != 0


@dataclass(frozen=True)
class ResolvedAttribute:
    keyword: str
    value_kind: ValueKind
    type_code: int
    type_code_v6: int = 0
    blob: bytes = b""


@dataclass(frozen=True)
class AttributeRecord:
    id: int
    type_code: int
    value: bytes


@dataclass(frozen=True)
class DeleteResult:
    resolved: ResolvedAttribute
    deleted: tuple[AttributeRecord, ...]
    already_gone: tuple[AttributeRecord, ...] = ()

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)
