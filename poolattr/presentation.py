"""Human-readable rendering of attributes, results, and errors."""

from __future__ import annotations

from poolattr.core.attribute_types import type_name
from poolattr.core.codec import decode_value
from poolattr.core.errors import NotFoundError, PersistenceError
from poolattr.core.model import AttributeDefinition, AttributeRecord, DeleteResult, ValueKind

STATUS_HEADER = " type  description          value"


def type_label(type_code: int) -> str:
    return type_name(type_code) or str(type_code)


def format_added(keyword: str, record: AttributeRecord) -> str:
    return f"added {keyword} attribute ({type_label(record.type_code)})."


def format_deleted_record(keyword: str, kind: ValueKind, record: AttributeRecord, *, failed: bool = False) -> str:
    verb = "deleting" if failed else "deleted"
    suffix = " failed" if failed else ""
    if kind is ValueKind.ADDRESS and len(record.value) in (4, 16):
        return f"{verb} {keyword} server {decode_value(kind, record.value)}{suffix}"
    label = type_label(record.type_code)
    value = decode_value(kind, record.value)
    if kind is ValueKind.STRING:
        value = f"'{value}'"
    end = suffix if failed else "."
    return f"{verb} {keyword} attribute ({label}) with value {value}{end}"


def format_delete_result(result: DeleteResult) -> list[str]:
    resolved = result.resolved
    lines = [format_deleted_record(resolved.keyword, resolved.value_kind, r) for r in result.deleted]
    for record in result.already_gone:
        lines.append(f"{resolved.keyword} attribute id {record.id} was already removed")
    return lines


def format_not_found(exc: NotFoundError) -> str:
    resolved = exc.resolved
    keyword = resolved.keyword
    if not resolved.blob:
        if resolved.type_code_v6:
            return f"no {keyword} attribute was found."
        return f"no {keyword} attribute ({type_label(resolved.type_code)}) was found."
    if resolved.value_kind is ValueKind.ADDRESS:
        return f"the {keyword} server {decode_value(ValueKind.ADDRESS, resolved.blob)} was not found."
    value = decode_value(resolved.value_kind, resolved.blob)
    return f"the {keyword} attribute ({type_label(resolved.type_code)}) with value '{value}' was not found."


def format_delete_failure(keyword: str, kind: ValueKind, exc: PersistenceError) -> str:
    if exc.record is None:
        return f"deleting {keyword} attribute failed: {exc}"
    return format_deleted_record(keyword, kind, exc.record, failed=True)


def format_status_line(record: AttributeRecord, kind: ValueKind) -> str:
    name = type_name(record.type_code) or ""
    return f"{record.type_code:5d}  {name:<20} {decode_value(kind, record.value)}"


def format_catalog_entry(definition: AttributeDefinition) -> str:
    names = type_label(definition.type_code)
    if definition.dual_family:
        names = f"{names}, {type_label(definition.type_code_v6)}"
    return f"{definition.keyword:<19}  --{definition.value_kind.value:<6}  ({names})"
