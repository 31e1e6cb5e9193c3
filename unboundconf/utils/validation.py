"""Hostname and address validation for user-supplied block and allow lists."""

import ipaddress
import re

MAX_HOSTNAME_LENGTH = 253

HOSTNAME_PATTERN = re.compile(
    r"^(?:[a-zA-Z0-9_](?:[a-zA-Z0-9_-]{0,61}[a-zA-Z0-9])?\.)*"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?$"
)


def is_valid_hostname(hostname: str) -> bool:
    """Validate if string is a hostname that can appear in a local-zone line.

    Args:
        hostname: Hostname to validate, without trailing dot.

    Returns:
        bool: True if valid, False otherwise.

    Examples:
        >>> is_valid_hostname("ads.example.com")
        True
        >>> is_valid_hostname("bad host.com")
        False
        >>> is_valid_hostname('evil".com')
        False
    """
    if not hostname or len(hostname) > MAX_HOSTNAME_LENGTH:
        return False
    return bool(HOSTNAME_PATTERN.match(hostname))


def is_valid_ip_or_network(value: str) -> bool:
    """Validate if string is an IP address or a CIDR network.

    Host bits may be set in the network form, as in "192.168.1.1/24".

    Args:
        value: IPv4/IPv6 address or network to validate.

    Returns:
        bool: True if valid, False otherwise.

    Examples:
        >>> is_valid_ip_or_network("203.0.113.45")
        True
        >>> is_valid_ip_or_network("10.0.0.0/8")
        True
        >>> is_valid_ip_or_network("2001:db8::/32")
        True
        >>> is_valid_ip_or_network("256.0.0.1")
        False
    """
    try:
        if "/" in value:
            ipaddress.ip_network(value, strict=False)
        else:
            ipaddress.ip_address(value)
        return True
    except ValueError:
        return False


def is_allowed(hostname: str, allowed_hostnames: list[str]) -> bool:
    """Check if a hostname is covered by an allow-list entry.

    A hostname is covered when it equals an allowed hostname or is one of its
    subdomains.

    Examples:
        >>> is_allowed("ads.example.com", ["example.com"])
        True
        >>> is_allowed("badexample.com", ["example.com"])
        False
    """
    return any(
        hostname == allowed or hostname.endswith("." + allowed)
        for allowed in allowed_hostnames
    )
