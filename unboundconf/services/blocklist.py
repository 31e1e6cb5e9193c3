"""Blocklist aggregation service.

Fetches the remote lists of every enabled category concurrently, merges them
with the user block and allow lists and renders Unbound configuration lines.
Fetch failures never abort the build: they are returned next to whatever
entries were gathered, and the caller decides what to do with them.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

import requests

from unboundconf.models.blocklist import (
    Category,
    ListKind,
    blocklist_url,
    enabled_categories,
)
from unboundconf.models.fetch_result import FetchResult
from unboundconf.services.fetcher import FetchError, get_list
from unboundconf.utils.context import FetchContext
from unboundconf.utils.validation import is_allowed


logger = logging.getLogger(__name__)


def hostname_line(hostname: str) -> str:
    return f'  local-zone: "{hostname}" static'


def ip_line(ip: str) -> str:
    return f"  private-address: {ip}"


def fetch_category(
    ctx: FetchContext,
    session: requests.Session,
    category: Category,
    kind: ListKind,
) -> FetchResult:
    """Fetch the remote list of one category.

    Args:
        ctx: Context propagated to the HTTP request.
        session: HTTP session.
        category: Blocking category to fetch.
        kind: Hostnames or IPs list.

    Returns:
        FetchResult: Entries on success, the fetch error otherwise.
    """
    url = blocklist_url(kind, category)
    try:
        entries = get_list(ctx, session, url)
    except FetchError as e:
        return FetchResult(category=category, kind=kind, url=url, error=e)
    return FetchResult(category=category, kind=kind, url=url, entries=entries)


def fetch_categories(
    ctx: FetchContext,
    session: requests.Session,
    categories: list[Category],
    kind: ListKind,
) -> tuple[set[str], list[Exception]]:
    """Fetch the lists of several categories concurrently and merge them.

    One worker runs per category. Every submitted worker is waited for, even
    once the context is cancelled, before the merged set is returned.

    Args:
        ctx: Context propagated to every HTTP request.
        session: HTTP session shared by the workers.
        categories: Categories to fetch.
        kind: Hostnames or IPs lists.

    Returns:
        tuple[set[str], list[Exception]]: Union of all fetched entries and the
            errors of the failed fetches.
    """
    entries: set[str] = set()
    errors: list[Exception] = []
    if not categories:
        return entries, errors

    with ThreadPoolExecutor(max_workers=len(categories)) as executor:
        futures = {
            executor.submit(fetch_category, ctx, session, category, kind): category
            for category in categories
        }

        # Merging happens on this thread only, in completion order
        for future in as_completed(futures):
            try:
                result = future.result()
            except Exception as e:
                category = futures[future]
                logger.error(
                    f"Unexpected error fetching {category.value} {kind.value} list: {e}"
                )
                errors.append(e)
                continue

            if result.is_error():
                errors.append(result.error)
            elif result.entries:
                entries.update(result.entries)

    return entries, errors


def build_blocked_hostnames(
    ctx: FetchContext,
    session: requests.Session,
    block_malicious: bool,
    block_ads: bool,
    block_surveillance: bool,
    blocked_hostnames: list[str],
    allowed_hostnames: list[str],
) -> tuple[list[str], list[Exception]]:
    """Build the sorted local-zone lines blocking hostnames.

    User-blocked hostnames are skipped when they equal an allowed hostname or
    are a subdomain of one. Allowed hostnames themselves are then removed from
    the merged set. Subdomains of allowed hostnames coming from remote lists
    are kept.

    Args:
        ctx: Context propagated to the HTTP requests.
        session: HTTP session.
        block_malicious: Fetch the malicious hostnames list.
        block_ads: Fetch the ads hostnames list.
        block_surveillance: Fetch the surveillance hostnames list.
        blocked_hostnames: User-specified hostnames to block.
        allowed_hostnames: User-specified hostnames never to block.

    Returns:
        tuple[list[str], list[Exception]]: Sorted configuration lines and the
            errors of the failed fetches.
    """
    categories = enabled_categories(block_malicious, block_ads, block_surveillance)
    hostnames, errors = fetch_categories(ctx, session, categories, ListKind.HOSTNAMES)

    for hostname in blocked_hostnames:
        if is_allowed(hostname, allowed_hostnames):
            continue
        hostnames.add(hostname)

    for hostname in allowed_hostnames:
        hostnames.discard(hostname)

    lines = sorted(hostname_line(hostname) for hostname in hostnames)
    return lines, errors


def build_blocked_ips(
    ctx: FetchContext,
    session: requests.Session,
    block_malicious: bool,
    block_ads: bool,
    block_surveillance: bool,
    blocked_ips: list[str],
) -> tuple[list[str], list[Exception]]:
    """Build the sorted private-address lines blocking IPs and CIDRs.

    Returns:
        tuple[list[str], list[Exception]]: Sorted configuration lines and the
            errors of the failed fetches.
    """
    categories = enabled_categories(block_malicious, block_ads, block_surveillance)
    ips, errors = fetch_categories(ctx, session, categories, ListKind.IPS)
    ips.update(blocked_ips)
    lines = sorted(ip_line(ip) for ip in ips)
    return lines, errors


def build_blocked(
    ctx: FetchContext,
    session: requests.Session,
    block_malicious: bool,
    block_ads: bool,
    block_surveillance: bool,
    blocked_hostnames: list[str],
    blocked_ips: list[str],
    allowed_hostnames: list[str],
) -> tuple[list[str], list[str], list[Exception]]:
    """Build the hostname and IP blocking lines concurrently.

    Both builds are waited for, including all their list fetches, before
    returning.

    Returns:
        tuple[list[str], list[str], list[Exception]]: Sorted hostname lines,
            sorted IP lines and the errors of both builds.
    """
    with ThreadPoolExecutor(max_workers=2) as executor:
        hostnames_future = executor.submit(
            build_blocked_hostnames,
            ctx,
            session,
            block_malicious,
            block_ads,
            block_surveillance,
            blocked_hostnames,
            allowed_hostnames,
        )
        ips_future = executor.submit(
            build_blocked_ips,
            ctx,
            session,
            block_malicious,
            block_ads,
            block_surveillance,
            blocked_ips,
        )
        hostname_lines, hostname_errors = hostnames_future.result()
        ip_lines, ip_errors = ips_future.result()

    return hostname_lines, ip_lines, hostname_errors + ip_errors
