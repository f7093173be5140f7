"""Configuration attribute type registry (IKEv2, IKEv1 XAUTH and Cisco Unity)."""

from __future__ import annotations

from enum import IntEnum


class AttributeType(IntEnum):
    INTERNAL_IP4_ADDRESS = 1
    INTERNAL_IP4_NETMASK = 2
    INTERNAL_IP4_DNS = 3
    INTERNAL_IP4_NBNS = 4
    INTERNAL_ADDRESS_EXPIRY = 5
    INTERNAL_IP4_DHCP = 6
    APPLICATION_VERSION = 7
    INTERNAL_IP6_ADDRESS = 8
    INTERNAL_IP6_NETMASK = 9
    INTERNAL_IP6_DNS = 10
    INTERNAL_IP6_NBNS = 11
    INTERNAL_IP6_DHCP = 12
    INTERNAL_IP4_SUBNET = 13
    SUPPORTED_ATTRIBUTES = 14
    INTERNAL_IP6_SUBNET = 15
    MIP6_HOME_PREFIX = 16
    INTERNAL_IP6_LINK = 17
    INTERNAL_IP6_PREFIX = 18
    HOME_AGENT_ADDRESS = 19
    P_CSCF_IP4_ADDRESS = 20
    P_CSCF_IP6_ADDRESS = 21
    XAUTH_TYPE = 16520
    XAUTH_USER_NAME = 16521
    XAUTH_USER_PASSWORD = 16522
    XAUTH_PASSCODE = 16523
    XAUTH_MESSAGE = 16524
    XAUTH_CHALLENGE = 16525
    XAUTH_DOMAIN = 16526
    XAUTH_STATUS = 16527
    XAUTH_NEXT_PIN = 16528
    XAUTH_ANSWER = 16529
    INTERNAL_IP4_SERVER = 23456
    INTERNAL_IP6_SERVER = 23457
    UNITY_BANNER = 28672
    UNITY_SAVE_PASSWD = 28673
    UNITY_DEF_DOMAIN = 28674
    UNITY_SPLITDNS_NAME = 28675
    UNITY_SPLIT_INCLUDE = 28676
    UNITY_NATT_PORT = 28677
    UNITY_LOCAL_LAN = 28678
    UNITY_PFS = 28679
    UNITY_FW_TYPE = 28680
    UNITY_BACKUP_SERVERS = 28681
    UNITY_DDNS_HOSTNAME = 28682


# Types whose value is a bare IPv6 address.
IP6_ADDRESS_TYPES = frozenset(
    {
        AttributeType.INTERNAL_IP6_ADDRESS,
        AttributeType.INTERNAL_IP6_DNS,
        AttributeType.INTERNAL_IP6_NBNS,
        AttributeType.INTERNAL_IP6_DHCP,
        AttributeType.INTERNAL_IP6_SERVER,
        AttributeType.P_CSCF_IP6_ADDRESS,
    }
)


def type_name(type_code: int) -> str | None:
    """Return the registered name of *type_code*, or ``None`` if unassigned."""
    try:
        return AttributeType(type_code).name
    except ValueError:
        return None
