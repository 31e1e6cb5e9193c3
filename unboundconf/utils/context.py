"""Cancellable execution context shared by concurrent list fetches.

A context finishes either when cancel() is called or when its deadline
passes. Workers check it before blocking calls and between body chunks, and
derive their socket timeouts from the remaining time. Blocking waits register
a cancel callback to be woken up as soon as cancel() is called.
"""

import threading
import time
from typing import Callable


class ContextError(Exception):
    """Raised when work is attempted on a finished context."""


class ContextCancelledError(ContextError):
    """The context was cancelled."""

    def __init__(self) -> None:
        super().__init__("context cancelled")


class DeadlineExceededError(ContextError):
    """The context deadline passed."""

    def __init__(self) -> None:
        super().__init__("context deadline exceeded")


class FetchContext:
    """Cancellation signal plus optional deadline.

    Thread safe: cancel() may be called from any thread while workers are
    running.

    Example:
        >>> ctx = FetchContext.with_timeout(60)
        >>> ctx.remaining() <= 60
        True
        >>> ctx.cancel()
        >>> ctx.error()
        ContextCancelledError('context cancelled')
    """

    def __init__(self, deadline: float | None = None):
        """Initialize the context.

        Args:
            deadline: Absolute time.monotonic() value after which the context
                is finished, or None for no deadline.
        """
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []
        self.deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: float) -> "FetchContext":
        """Create a context whose deadline is seconds from now."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        """Cancel the context and run every registered cancel callback."""
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def add_cancel_callback(self, callback: Callable[[], None]) -> None:
        """Register callback to run once on cancel().

        The callback runs immediately if the context is already cancelled.
        """
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_cancel_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def remaining(self) -> float | None:
        """Get the seconds left before the deadline.

        Returns:
            float | None: Seconds left (never negative), None without deadline.
        """
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def error(self) -> ContextError | None:
        """Get the reason the context finished.

        Returns:
            ContextError | None: Cancellation or deadline error, None if the
                context is still active.
        """
        if self._cancelled.is_set():
            return ContextCancelledError()
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return DeadlineExceededError()
        return None

    def raise_if_done(self) -> None:
        """Raise the context error if the context is finished.

        Raises:
            ContextCancelledError: If the context was cancelled.
            DeadlineExceededError: If the deadline passed.
        """
        err = self.error()
        if err is not None:
            raise err

    def wait(self, seconds: float) -> None:
        """Sleep for up to seconds, waking up early on cancellation.

        Raises:
            ContextError: If the context finished before or while waiting.
        """
        self.raise_if_done()
        timeout = seconds
        remaining = self.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)
        self._cancelled.wait(timeout)
        self.raise_if_done()
