"""Detection of loopback and private-network IP addresses."""

from __future__ import annotations

import ipaddress

_Address = ipaddress.IPv4Address | ipaddress.IPv6Address


def is_lan_addr(ip: str) -> tuple[bool, str]:
    """Check whether the textual address ``ip`` is local; unparsable input is not."""
    try:
        address = ipaddress.ip_address(ip.strip())
    except ValueError:
        return False, ""
    return is_lan_ip(address)


def is_lan_ip(ip: _Address | None) -> tuple[bool, str]:
    """Return whether ``ip`` is loopback or private, and the matching network."""
    if ip is None:
        return False, ""
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    if ip.is_loopback:
        return True, "127.0.0.0/24"
    if not isinstance(ip, ipaddress.IPv4Address):
        return False, ""
    first, second = ip.packed[0], ip.packed[1]
    if first == 10:
        return True, "10.0.0.0/8"
    if first == 172 and 16 <= second <= 31:
        return True, "172.16.0.0/12"
    if first == 169 and second == 254:
        return True, "169.254.0.0/16"
    if first == 192 and second == 168:
        return True, "192.168.0.0/16"
    return False, ""