"""Utility functions for name resolution and value normalization."""

from __future__ import annotations

import ipaddress
import socket


def is_ip_address(name: str) -> bool:
    """Check whether a string is a literal IPv4 or IPv6 address."""
    try:
        ipaddress.ip_address(name)
        return True
    except ValueError:
        return False


def resolve_name(name: str, ipv6: bool = False) -> str | None:
    """Resolve a host name or literal IP address to an address string.

    Literal addresses are returned unchanged. Host names are resolved
    through the system resolver; names that do not resolve yield None.

    Examples:
        resolve_name("8.8.8.8") -> "8.8.8.8"
        resolve_name("no-such-host.invalid") -> None
    """
    if is_ip_address(name):
        return name
    family = socket.AF_INET6 if ipv6 else socket.AF_INET
    try:
        infos = socket.getaddrinfo(name, None, family)
    except (socket.gaierror, UnicodeError):
        return None
    if not infos:
        return None
    return infos[0][4][0]


def blank_to_none(value):
    """Map empty strings to None, leaving every other value untouched."""
    if value == "":
        return None
    return value
