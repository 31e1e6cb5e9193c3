"""Unbound configuration renderer."""

import os

from unboundconf.models.provider import LIBREDNS, get_provider_data
from unboundconf.models.settings import Settings


CACERTS_FILENAME = "ca-certificates.crt"
ROOT_HINTS_FILENAME = "root.hints"
ROOT_KEY_FILENAME = "root.key"
INCLUDE_CONF_FILENAME = "include.conf"


def _yes_no(value: bool) -> str:
    return "yes" if value else "no"


def _quoted(value: str) -> str:
    return f'"{value}"'


def _section_lines(section: dict[str, str]) -> list[str]:
    return sorted(f"  {key}: {value}" for key, value in section.items())


def generate_unbound_conf(
    settings: Settings,
    hostname_lines: list[str],
    ip_lines: list[str],
    unbound_dir: str,
    username: str,
) -> list[str]:
    """Generate the Unbound configuration lines from the settings.

    The server section options are sorted so the output only depends on its
    inputs. Blocking lines are appended verbatim after them.

    Args:
        settings: Resolver settings.
        hostname_lines: Sorted local-zone lines from the blocklist build.
        ip_lines: Sorted private-address lines from the blocklist build.
        unbound_dir: Directory holding the Unbound files.
        username: User Unbound drops privileges to.

    Returns:
        list[str]: Configuration lines, without line terminators.

    Raises:
        UnknownProviderError: If a configured provider is not supported.
    """
    server_section = {
        # Logging
        "verbosity": str(settings.verbosity_level),
        "val-log-level": str(settings.validation_log_level),
        "use-syslog": "no",
        # Performance
        "num-threads": "2",
        "prefetch": "yes",
        "prefetch-key": "yes",
        "key-cache-size": "32m",
        "key-cache-slabs": "4",
        "msg-cache-size": "8m",
        "msg-cache-slabs": "4",
        "rrset-cache-size": "8m",
        "rrset-cache-slabs": "4",
        "cache-min-ttl": "3600",
        "cache-max-ttl": "9000",
        # Privacy
        "rrset-roundrobin": "yes",
        "hide-identity": "yes",
        "hide-version": "yes",
        # Security
        "tls-cert-bundle": _quoted(os.path.join(unbound_dir, CACERTS_FILENAME)),
        "root-hints": _quoted(os.path.join(unbound_dir, ROOT_HINTS_FILENAME)),
        "trust-anchor-file": _quoted(os.path.join(unbound_dir, ROOT_KEY_FILENAME)),
        "harden-below-nxdomain": "yes",
        "harden-referral-path": "yes",
        "harden-algo-downgrade": "yes",
        # Network
        "do-ip4": _yes_no(settings.ipv4),
        "do-ip6": _yes_no(settings.ipv6),
        "interface": "0.0.0.0",
        "port": str(settings.listening_port),
        # Other
        "username": _quoted(username),
        "include": INCLUDE_CONF_FILENAME,
    }

    # LibreDNS does not support DNSSEC trust anchors
    if any(provider.lower() == LIBREDNS for provider in settings.providers):
        del server_section["trust-anchor-file"]

    lines = ["server:"]
    lines.extend(_section_lines(server_section))
    lines.extend(hostname_lines)
    lines.extend(ip_lines)

    forward_zone_section = {
        "name": _quoted("."),
        "forward-tls-upstream": "yes",
        "forward-no-cache": _yes_no(not settings.caching),
    }
    lines.append("forward-zone:")
    lines.extend(_section_lines(forward_zone_section))
    for provider in settings.providers:
        data = get_provider_data(provider)
        for ip in data.ips:
            lines.append(f"  forward-addr: {ip}@{data.port}#{data.host}")

    return lines
