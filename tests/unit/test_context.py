"""Unit tests for FetchContext."""

import threading
import time

import pytest

from unboundconf.utils.context import (
    ContextCancelledError,
    DeadlineExceededError,
    FetchContext,
)


class TestFetchContext:
    """Test FetchContext cancellation and deadline handling."""

    def test_new_context_is_active(self):
        ctx = FetchContext()

        assert ctx.error() is None
        assert ctx.remaining() is None
        ctx.raise_if_done()

    def test_cancel(self):
        ctx = FetchContext()
        ctx.cancel()

        assert isinstance(ctx.error(), ContextCancelledError)
        with pytest.raises(ContextCancelledError):
            ctx.raise_if_done()

    def test_with_timeout_sets_remaining(self):
        ctx = FetchContext.with_timeout(30)

        assert 29 < ctx.remaining() <= 30
        assert ctx.error() is None

    def test_expired_deadline(self):
        ctx = FetchContext(deadline=time.monotonic() - 0.1)

        assert ctx.remaining() == 0.0
        with pytest.raises(DeadlineExceededError):
            ctx.raise_if_done()

    def test_cancellation_takes_precedence_over_deadline(self):
        ctx = FetchContext(deadline=time.monotonic() - 0.1)
        ctx.cancel()

        assert isinstance(ctx.error(), ContextCancelledError)

    def test_wait_returns_when_active(self):
        ctx = FetchContext()

        ctx.wait(0.01)

    def test_wait_stops_at_deadline(self):
        """Test that wait does not outlive the deadline."""
        ctx = FetchContext.with_timeout(0.05)
        start = time.monotonic()

        with pytest.raises(DeadlineExceededError):
            ctx.wait(5)

        assert time.monotonic() - start < 1

    def test_wait_wakes_up_on_cancel(self):
        """Test that cancel() from another thread interrupts wait."""
        ctx = FetchContext()
        timer = threading.Timer(0.05, ctx.cancel)
        timer.start()
        start = time.monotonic()

        try:
            with pytest.raises(ContextCancelledError):
                ctx.wait(5)
        finally:
            timer.cancel()

        assert time.monotonic() - start < 1

    def test_cancel_runs_callbacks_once(self):
        ctx = FetchContext()
        calls = []
        ctx.add_cancel_callback(lambda: calls.append("first"))
        ctx.add_cancel_callback(lambda: calls.append("second"))

        ctx.cancel()
        ctx.cancel()

        assert calls == ["first", "second"]

    def test_callback_added_after_cancel_runs_immediately(self):
        ctx = FetchContext()
        ctx.cancel()
        calls = []

        ctx.add_cancel_callback(lambda: calls.append("late"))

        assert calls == ["late"]

    def test_removed_callback_not_run(self):
        ctx = FetchContext()
        calls = []

        def callback():
            calls.append("removed")

        ctx.add_cancel_callback(callback)
        ctx.remove_cancel_callback(callback)
        ctx.remove_cancel_callback(callback)
        ctx.cancel()

        assert calls == []
