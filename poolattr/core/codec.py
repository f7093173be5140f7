"""Value encoding and attribute type resolution.

Resolution runs in two phases: the raw value is first encoded according to
the kind the operator declared, independent of the keyword, and the result
is then reconciled against the catalog. Declaring ``hex`` is always allowed
and acts as an escape hatch for exact control over the stored bytes; for
address attributes the decoded length then selects the IPv4 or IPv6 type.
"""

from __future__ import annotations

import ipaddress
import logging
import re

from poolattr.core.attribute_types import IP6_ADDRESS_TYPES
from poolattr.core.catalog import CATALOG, AttributeCatalog
from poolattr.core.errors import EncodingError, TypeMismatchError, UnknownAttributeError
from poolattr.core.model import AttributeDefinition, ResolvedAttribute, ValueKind

UNITY_NETWORK_LEN = 14
MAX_TYPE_CODE = 0xFFFF
_HEX_RE = re.compile(r"[0-9a-f]*")
_DECIMAL_RE = re.compile(r"[0-9]+")
LOGGER = logging.getLogger(__name__)


def encode_hex(value: str) -> bytes:
    normalized = value.strip().lower()
    if normalized.startswith("0x"):
        normalized = normalized[2:]
    normalized = normalized.replace(":", "")
    if not _HEX_RE.fullmatch(normalized):
        raise EncodingError(value, "invalid hex value")
    if len(normalized) % 2 != 0:
        normalized = "0" + normalized
    return bytes.fromhex(normalized)


def encode_address(value: str) -> bytes:
    try:
        return ipaddress.ip_address(value).packed
    except ValueError as exc:
        raise EncodingError(value, "invalid IP address") from exc


def encode_subnet(value: str) -> bytes:
    """Encode ``net/mask`` as the 14 byte Unity network structure.

    Bytes 0-3 hold the network, 4-7 the mask, the remainder is zero.
    """
    network, separator, mask = value.partition("/")
    if not separator or not network or not mask:
        raise EncodingError(value, "invalid IPv4 subnet")
    try:
        network_addr = ipaddress.IPv4Address(network)
        mask_addr = ipaddress.IPv4Address(mask)
    except ValueError as exc:
        raise EncodingError(value, "invalid IPv4 subnet") from exc
    return (network_addr.packed + mask_addr.packed).ljust(UNITY_NETWORK_LEN, b"\x00")


def encode_value(value: str | None, kind: ValueKind) -> bytes:
    if kind is ValueKind.NONE:
        return b""
    if value is None:
        raise EncodingError("", f"a {kind.value} value is required")
    if kind is ValueKind.STRING:
        return value.encode("utf-8")
    if kind is ValueKind.HEX:
        return encode_hex(value)
    if kind is ValueKind.ADDRESS:
        return encode_address(value)
    if kind is ValueKind.SUBNET:
        return encode_subnet(value)
    raise ValueError(f"Unsupported value kind {kind!r}")


def resolve(
    keyword: str,
    value: str | None,
    declared_kind: ValueKind,
    catalog: AttributeCatalog = CATALOG,
) -> ResolvedAttribute:
    """Determine type code(s), final kind, and blob for *keyword* and *value*."""
    blob = encode_value(value, declared_kind)

    definition = catalog.lookup(keyword)
    if definition is None:
        return _resolve_numeric(keyword, declared_kind, blob)

    if declared_kind is ValueKind.NONE:
        return ResolvedAttribute(
            keyword=keyword,
            value_kind=definition.value_kind,
            type_code=definition.type_code,
            type_code_v6=definition.type_code_v6,
        )

    if declared_kind is not definition.value_kind and declared_kind is not ValueKind.HEX:
        raise TypeMismatchError(keyword, definition.value_kind, declared_kind)

    type_code = definition.type_code
    if definition.value_kind is ValueKind.ADDRESS:
        type_code = _select_address_type(definition, blob, value or "")

    LOGGER.debug("Resolved %s (%s) to type %d", keyword, declared_kind.value, type_code)
    return ResolvedAttribute(
        keyword=keyword,
        value_kind=definition.value_kind,
        type_code=type_code,
        type_code_v6=definition.type_code_v6,
        blob=blob,
    )


def _resolve_numeric(keyword: str, declared_kind: ValueKind, blob: bytes) -> ResolvedAttribute:
    if not _DECIMAL_RE.fullmatch(keyword):
        raise UnknownAttributeError(keyword)
    type_code = int(keyword)
    if not 0 < type_code <= MAX_TYPE_CODE:
        raise UnknownAttributeError(keyword)
    kind = ValueKind.HEX if declared_kind is ValueKind.NONE else declared_kind
    return ResolvedAttribute(keyword=keyword, value_kind=kind, type_code=type_code, blob=blob)


def _select_address_type(definition: AttributeDefinition, blob: bytes, value: str) -> int:
    if len(blob) == 4:
        family = 4
    elif len(blob) == 16:
        family = 6
    else:
        raise EncodingError(
            value,
            f"the {definition.keyword} attribute requires a valid IP address",
            keyword=definition.keyword,
        )

    if definition.dual_family:
        return definition.type_code if family == 4 else definition.type_code_v6

    # Single-family keywords only take addresses of their own family.
    native = 6 if definition.type_code in IP6_ADDRESS_TYPES else 4
    if family != native:
        raise EncodingError(
            value,
            f"the {definition.keyword} attribute requires an IPv{native} address",
            keyword=definition.keyword,
        )
    return definition.type_code


def format_hex(blob: bytes) -> str:
    return ":".join(f"{byte:02x}" for byte in blob)


def decode_value(kind: ValueKind, blob: bytes) -> str:
    """Render *blob* as text according to *kind*, falling back to hex."""
    if kind is ValueKind.ADDRESS and len(blob) in (4, 16):
        return str(ipaddress.ip_address(blob))
    if kind is ValueKind.SUBNET and len(blob) == UNITY_NETWORK_LEN:
        network = ipaddress.IPv4Address(blob[:4])
        mask = ipaddress.IPv4Address(blob[4:8])
        return f"{network}/{mask}"
    if kind is ValueKind.STRING:
        return blob.decode("utf-8", errors="replace")
    return format_hex(blob)
