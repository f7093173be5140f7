"""Keyword catalog of the attributes an operator can manage by name."""

from __future__ import annotations

from collections.abc import Iterable

from poolattr.core.attribute_types import AttributeType as T
from poolattr.core.model import AttributeDefinition, ValueKind

_ADDR = ValueKind.ADDRESS
_STRING = ValueKind.STRING
_SUBNET = ValueKind.SUBNET

_DEFINITIONS = (
    AttributeDefinition("internal_ip4_dns", _ADDR, T.INTERNAL_IP4_DNS),
    AttributeDefinition("internal_ip6_dns", _ADDR, T.INTERNAL_IP6_DNS),
    AttributeDefinition("dns", _ADDR, T.INTERNAL_IP4_DNS, T.INTERNAL_IP6_DNS),
    AttributeDefinition("internal_ip4_nbns", _ADDR, T.INTERNAL_IP4_NBNS),
    AttributeDefinition("internal_ip6_nbns", _ADDR, T.INTERNAL_IP6_NBNS),
    AttributeDefinition("nbns", _ADDR, T.INTERNAL_IP4_NBNS, T.INTERNAL_IP6_NBNS),
    AttributeDefinition("wins", _ADDR, T.INTERNAL_IP4_NBNS, T.INTERNAL_IP6_NBNS),
    AttributeDefinition("internal_ip4_dhcp", _ADDR, T.INTERNAL_IP4_DHCP),
    AttributeDefinition("internal_ip6_dhcp", _ADDR, T.INTERNAL_IP6_DHCP),
    AttributeDefinition("dhcp", _ADDR, T.INTERNAL_IP4_DHCP, T.INTERNAL_IP6_DHCP),
    AttributeDefinition("internal_ip4_server", _ADDR, T.INTERNAL_IP4_SERVER),
    AttributeDefinition("internal_ip6_server", _ADDR, T.INTERNAL_IP6_SERVER),
    AttributeDefinition("server", _ADDR, T.INTERNAL_IP4_SERVER, T.INTERNAL_IP6_SERVER),
    AttributeDefinition("application_version", _STRING, T.APPLICATION_VERSION),
    AttributeDefinition("version", _STRING, T.APPLICATION_VERSION),
    AttributeDefinition("unity_banner", _STRING, T.UNITY_BANNER),
    AttributeDefinition("banner", _STRING, T.UNITY_BANNER),
    AttributeDefinition("unity_splitdns_name", _STRING, T.UNITY_SPLITDNS_NAME),
    AttributeDefinition("unity_split_include", _SUBNET, T.UNITY_SPLIT_INCLUDE),
    AttributeDefinition("unity_local_lan", _SUBNET, T.UNITY_LOCAL_LAN),
)


class AttributeCatalog:
    """Immutable keyword table, indexed case-insensitively."""

    def __init__(self, definitions: Iterable[AttributeDefinition]) -> None:
        self._definitions = tuple(definitions)
        self._index: dict[str, AttributeDefinition] = {}
        for definition in self._definitions:
            self._index.setdefault(definition.keyword.lower(), definition)

    def lookup(self, keyword: str) -> AttributeDefinition | None:
        return self._index.get(keyword.lower())

    def all(self) -> tuple[AttributeDefinition, ...]:
        return self._definitions

    def kind_for_type(self, type_code: int) -> ValueKind:
        """Value kind of the first definition using *type_code*, else HEX."""
        for definition in self._definitions:
            if type_code == definition.type_code or (
                definition.dual_family and type_code == definition.type_code_v6
            ):
                return definition.value_kind
        return ValueKind.HEX

    def __len__(self) -> int:
        return len(self._definitions)


CATALOG = AttributeCatalog(_DEFINITIONS)
