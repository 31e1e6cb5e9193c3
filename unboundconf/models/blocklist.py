"""Blocklist categories and the remote list URLs for each of them."""

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Category(Enum):
    """Blocking category a remote list belongs to."""

    MALICIOUS = "malicious"
    ADS = "ads"
    SURVEILLANCE = "surveillance"


class ListKind(Enum):
    """Kind of entries a remote list holds."""

    HOSTNAMES = "hostnames"
    IPS = "ips"


_BASE_URL = "https://raw.githubusercontent.com/qdm12/files/master"

HOSTNAMES_URLS: Mapping[Category, str] = MappingProxyType(
    {
        Category.MALICIOUS: f"{_BASE_URL}/malicious-hostnames.updated",
        Category.ADS: f"{_BASE_URL}/ads-hostnames.updated",
        Category.SURVEILLANCE: f"{_BASE_URL}/surveillance-hostnames.updated",
    }
)

IPS_URLS: Mapping[Category, str] = MappingProxyType(
    {
        Category.MALICIOUS: f"{_BASE_URL}/malicious-ips.updated",
        Category.ADS: f"{_BASE_URL}/ads-ips.updated",
        Category.SURVEILLANCE: f"{_BASE_URL}/surveillance-ips.updated",
    }
)

_URLS_BY_KIND: Mapping[ListKind, Mapping[Category, str]] = MappingProxyType(
    {ListKind.HOSTNAMES: HOSTNAMES_URLS, ListKind.IPS: IPS_URLS}
)


def blocklist_url(kind: ListKind, category: Category) -> str:
    """Get the remote list URL for a list kind and category.

    Args:
        kind: Hostnames or IPs list.
        category: Blocking category.

    Returns:
        str: URL of the newline-delimited list.

    Examples:
        >>> blocklist_url(ListKind.IPS, Category.ADS)
        'https://raw.githubusercontent.com/qdm12/files/master/ads-ips.updated'
    """
    return _URLS_BY_KIND[kind][category]


def enabled_categories(
    block_malicious: bool, block_ads: bool, block_surveillance: bool
) -> list[Category]:
    """List the categories enabled by the three blocking flags, in fixed order."""
    flags = (
        (Category.MALICIOUS, block_malicious),
        (Category.ADS, block_ads),
        (Category.SURVEILLANCE, block_surveillance),
    )
    return [category for category, enabled in flags if enabled]
