"""Remote list fetcher for newline-delimited blocklists."""

import logging
import threading
from concurrent.futures import Future

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from unboundconf.utils.context import (
    ContextError,
    DeadlineExceededError,
    FetchContext,
)


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
MAX_RETRIES = 3
RETRY_BACKOFF = 0.5
RETRY_STATUS_CODES = [429, 500, 502, 503, 504]
CHUNK_SIZE = 64 * 1024
USER_AGENT = "unbound-blocklist-conf"


class FetchError(Exception):
    """Base error for a failed remote list fetch.

    Attributes:
        url: URL of the list that failed.
    """

    description = "fetching list failed"

    def __init__(self, url: str, cause: Exception | str):
        self.url = url
        super().__init__(f"{self.description} for {url}: {cause}")

    @property
    def cancelled(self) -> bool:
        """Check if the fetch failed because its context finished.

        Returns:
            bool: True on context cancellation or deadline, False otherwise.
        """
        return isinstance(self.__cause__, ContextError)


class RequestError(FetchError):
    """The HTTP request could not be built, usually a malformed URL."""

    description = "cannot create request"


class TransportError(FetchError):
    """The HTTP request failed before a response was received."""

    description = "cannot do request"


class ReadError(FetchError):
    """The response body could not be fully read."""

    description = "cannot read response body"


class BadStatusError(FetchError):
    """The server answered with a status other than 200 OK.

    Attributes:
        status_code: HTTP status code received.
        reason: HTTP reason phrase received.
    """

    description = "bad HTTP status code"

    def __init__(self, url: str, status_code: int, reason: str | None):
        self.status_code = status_code
        self.reason = reason or ""
        super().__init__(url, f"{status_code} {self.reason}".rstrip())


class TimeoutHTTPAdapter(HTTPAdapter):
    """HTTP adapter applying a default timeout to requests sent without one."""

    def __init__(self, *args, timeout: float = DEFAULT_TIMEOUT, **kwargs):
        self.timeout = timeout
        super().__init__(*args, **kwargs)

    def send(self, request, **kwargs):
        if kwargs.get("timeout") is None:
            kwargs["timeout"] = self.timeout
        return super().send(request, **kwargs)


def build_session(timeout: float = DEFAULT_TIMEOUT) -> requests.Session:
    """Create a session with a default timeout and retries on transient errors.

    Retries on rate limits (429) and server errors (5xx) return the last
    response once exhausted, so the caller still sees its status code.

    Args:
        timeout: Default per-request timeout in seconds.

    Returns:
        requests.Session: Session ready to be shared by fetch workers.
    """
    session = requests.Session()
    retry = Retry(
        total=MAX_RETRIES,
        backoff_factor=RETRY_BACKOFF,
        status_forcelist=RETRY_STATUS_CODES,
        allowed_methods=["GET"],
        raise_on_status=False,
    )
    adapter = TimeoutHTTPAdapter(max_retries=retry, timeout=timeout)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _close_abandoned(future: Future) -> None:
    if future.exception() is None:
        future.result().close()


def _send(
    ctx: FetchContext, session: requests.Session, request: requests.PreparedRequest
) -> requests.Response:
    """Send request, returning as soon as ctx finishes.

    A blocking connect, header read or retry backoff cannot be interrupted
    from another thread, so the request runs in a helper thread that the
    caller stops waiting for on cancellation or deadline. The response of an
    abandoned request is closed once it arrives.

    Raises:
        ContextError: If the context finished before the response arrived.
        requests.exceptions.RequestException: If the request failed.
    """
    ctx.raise_if_done()
    timeout = ctx.remaining()
    if timeout == 0:
        raise DeadlineExceededError()

    future: Future = Future()
    finished = threading.Event()

    def run() -> None:
        try:
            future.set_result(session.send(request, timeout=timeout, stream=True))
        except BaseException as e:
            future.set_exception(e)
        finally:
            finished.set()

    wake = finished.set
    ctx.add_cancel_callback(wake)
    try:
        threading.Thread(target=run, name="fetch-send", daemon=True).start()
        finished.wait(timeout)
    finally:
        ctx.remove_cancel_callback(wake)

    err = ctx.error()
    if err is not None or not future.done():
        future.add_done_callback(_close_abandoned)
        raise err or DeadlineExceededError()
    return future.result()


def _read_body(ctx: FetchContext, response: requests.Response, url: str) -> str:
    chunks: list[bytes] = []
    try:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            ctx.raise_if_done()
            chunks.append(chunk)
    except (ContextError, requests.exceptions.RequestException) as e:
        raise ReadError(url, e) from e
    return b"".join(chunks).decode("utf-8", errors="replace")


def get_list(
    ctx: FetchContext, session: requests.Session, url: str
) -> set[str] | None:
    """Fetch a newline-delimited list and return its unique non-empty lines.

    The response is always closed before returning, on error paths too.

    Args:
        ctx: Context whose cancellation or deadline aborts the fetch.
        session: HTTP session used to send the request.
        url: URL of the list.

    Returns:
        set[str] | None: Unique entries, or None if the list has no entries.

    Raises:
        RequestError: If the request cannot be built from the URL.
        TransportError: If the request fails or the context finished before
            the response arrived.
        BadStatusError: If the status code is not 200.
        ReadError: If the body cannot be fully read.
    """
    try:
        request = requests.Request(
            "GET", url, headers={"User-Agent": USER_AGENT}
        ).prepare()
    except (requests.exceptions.RequestException, ValueError) as e:
        raise RequestError(url, e) from e

    try:
        response = _send(ctx, session, request)
    except (ContextError, requests.exceptions.RequestException) as e:
        # A socket timeout caused by the deadline is reported as the deadline
        cause = ctx.error() or e
        raise TransportError(url, cause) from cause

    try:
        if response.status_code != 200:
            raise BadStatusError(url, response.status_code, response.reason)
        content = _read_body(ctx, response, url)
    finally:
        response.close()

    entries = {line for line in content.split("\n") if line}
    logger.debug(f"Fetched {len(entries)} entries from {url}")
    if not entries:
        return None
    return entries
