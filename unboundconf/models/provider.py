"""DNS over TLS upstream provider data."""

import ipaddress
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

DOT_PORT = 853

# Provider without DNSSEC trust anchor support
LIBREDNS = "libredns"


class UnknownProviderError(ValueError):
    """Raised when a provider name has no known upstream data."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Unknown DNS provider {name!r}, expected one of: "
            f"{', '.join(sorted(PROVIDERS))}"
        )


@dataclass(frozen=True)
class ProviderData:
    """Upstream DNS over TLS server of a provider.

    Attributes:
        host: TLS hostname used to authenticate the upstream.
        ips: Upstream IPv4 and IPv6 addresses, in forwarding order.
        port: DNS over TLS port.
    """

    host: str
    ips: tuple[ipaddress.IPv4Address | ipaddress.IPv6Address, ...]
    port: int = field(default=DOT_PORT)

    @classmethod
    def from_strings(cls, host: str, *ips: str) -> "ProviderData":
        return cls(host=host, ips=tuple(ipaddress.ip_address(ip) for ip in ips))


PROVIDERS: Mapping[str, ProviderData] = MappingProxyType(
    {
        "cloudflare": ProviderData.from_strings(
            "cloudflare-dns.com",
            "1.1.1.1",
            "1.0.0.1",
            "2606:4700:4700::1111",
            "2606:4700:4700::1001",
        ),
        "google": ProviderData.from_strings(
            "dns.google",
            "8.8.8.8",
            "8.8.4.4",
            "2001:4860:4860::8888",
            "2001:4860:4860::8844",
        ),
        "quad9": ProviderData.from_strings(
            "dns.quad9.net",
            "9.9.9.9",
            "149.112.112.112",
            "2620:fe::fe",
            "2620:fe::9",
        ),
        "quad9-secured": ProviderData.from_strings(
            "dns11.quad9.net",
            "9.9.9.11",
            "149.112.112.11",
            "2620:fe::11",
            "2620:fe::fe:11",
        ),
        "quad9-unsecured": ProviderData.from_strings(
            "dns10.quad9.net",
            "9.9.9.9",
            "149.112.112.9",
            "2620:fe::9",
            "2620:fe::fe:9",
        ),
        LIBREDNS: ProviderData.from_strings(
            "dot.libredns.gr",
            "116.202.176.26",
            "2a01:4f8:1c0c:8274::1",
        ),
        "cleanbrowsing": ProviderData.from_strings(
            "security-filter-dns.cleanbrowsing.org",
            "185.228.168.9",
            "185.228.169.9",
            "2a0d:2a00:1::2",
            "2a0d:2a00:2::2",
        ),
    }
)


def get_provider_data(name: str) -> ProviderData:
    """Look up the upstream data of a provider.

    Args:
        name: Provider name, case insensitive (e.g., "cloudflare").

    Returns:
        ProviderData: Upstream host, addresses and port.

    Raises:
        UnknownProviderError: If the provider is not supported.
    """
    try:
        return PROVIDERS[name.lower()]
    except KeyError:
        raise UnknownProviderError(name) from None
