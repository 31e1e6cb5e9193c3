"""DNS readiness check against the local resolver.

Used once Unbound is started with the generated configuration, to wait until
it answers queries.
"""

import logging

import dns.exception
import dns.resolver

from unboundconf.utils.context import FetchContext


logger = logging.getLogger(__name__)

HOST_TO_RESOLVE = "github.com"
MAX_TRIES = 10
INITIAL_WAIT = 0.3
RETRY_WAIT = 0.5
QUERY_TIMEOUT = 1.0


class DNSNotWorkingError(Exception):
    """Raised when the resolver did not answer after every try."""

    def __init__(self, tries: int, last_error: Exception | None):
        self.tries = tries
        self.last_error = last_error
        super().__init__(f"DNS is not working after {tries} tries: {last_error}")


def wait_for_dns(
    ctx: FetchContext,
    nameserver: str = "127.0.0.1",
    port: int = 53,
    hostname: str = HOST_TO_RESOLVE,
    max_tries: int = MAX_TRIES,
    initial_wait: float = INITIAL_WAIT,
    retry_wait: float = RETRY_WAIT,
) -> None:
    """Wait until the resolver answers an A query for hostname.

    Waits initial_wait seconds for the resolver to start, then tries up to
    max_tries times with retry_wait seconds between tries.

    Args:
        ctx: Context whose cancellation or deadline stops the wait.
        nameserver: Address of the resolver to query.
        port: Port of the resolver.
        hostname: Hostname to resolve.
        max_tries: Maximum number of queries.
        initial_wait: Seconds to wait before the first query.
        retry_wait: Seconds to wait between queries.

    Raises:
        ContextError: If the context finished while waiting.
        DNSNotWorkingError: If no query succeeded.

    Example:
        >>> wait_for_dns(FetchContext.with_timeout(30), port=53)
    """
    resolver = dns.resolver.Resolver(configure=False)
    resolver.nameservers = [nameserver]
    resolver.port = port
    resolver.lifetime = QUERY_TIMEOUT

    ctx.wait(initial_wait)

    last_error: Exception | None = None
    for attempt in range(1, max_tries + 1):
        ctx.raise_if_done()
        try:
            resolver.resolve(hostname, "A")
            logger.info(f"DNS is working after {attempt} tries")
            return
        except dns.exception.DNSException as e:
            last_error = e
            logger.debug(f"DNS check {attempt}/{max_tries} failed: {e}")

        if attempt < max_tries:
            ctx.wait(retry_wait)

    raise DNSNotWorkingError(max_tries, last_error)
