"""Resolver settings consumed by the blocklist build and config renderer."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Settings:
    """Immutable settings for one configuration generation.

    Attributes:
        listening_port: UDP/TCP port the resolver listens on.
        caching: Whether forwarded answers may be cached.
        verbosity_level: Resolver log verbosity (0-5).
        validation_log_level: DNSSEC validation log level (0-2).
        ipv4: Whether to answer and query over IPv4.
        ipv6: Whether to answer and query over IPv6.
        providers: Upstream DNS over TLS providers, in forwarding order.
        block_malicious: Fetch the malicious hostnames and IPs lists.
        block_ads: Fetch the ads hostnames and IPs lists.
        block_surveillance: Fetch the surveillance hostnames and IPs lists.
        blocked_hostnames: User-specified hostnames to block.
        blocked_ips: User-specified IPs or CIDRs to block.
        allowed_hostnames: User-specified hostnames never to block.
    """

    listening_port: int = 53
    caching: bool = True
    verbosity_level: int = 1
    validation_log_level: int = 0
    ipv4: bool = True
    ipv6: bool = False
    providers: tuple[str, ...] = ("cloudflare",)
    block_malicious: bool = True
    block_ads: bool = False
    block_surveillance: bool = False
    blocked_hostnames: tuple[str, ...] = field(default_factory=tuple)
    blocked_ips: tuple[str, ...] = field(default_factory=tuple)
    allowed_hostnames: tuple[str, ...] = field(default_factory=tuple)
