#!/usr/bin/env python3
"""Tests for depmap/cancellation.py"""

import threading

import pytest

from depmap.cancellation import CancellationToken, check_cancelled
from depmap.constants import EXIT_CANCELLED, OperationCancelledError, ValidationError


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_new_token_not_cancelled(self) -> None:
        """A fresh token does not cancel."""
        token = CancellationToken()

        assert not token.is_cancelled
        token.raise_if_cancelled("step")

    def test_cancel(self) -> None:
        """cancel() sets the flag and raising carries the step name."""
        token = CancellationToken()
        token.cancel()

        assert token.is_cancelled
        with pytest.raises(OperationCancelledError, match="cycle detection") as exc_info:
            token.raise_if_cancelled("cycle detection")
        assert exc_info.value.exit_code == EXIT_CANCELLED

    def test_zero_timeout_expires_immediately(self) -> None:
        """A zero deadline is already past."""
        assert CancellationToken(timeout=0).is_cancelled

    def test_long_timeout_not_expired(self) -> None:
        """A generous deadline does not cancel."""
        assert not CancellationToken(timeout=3600).is_cancelled

    def test_negative_timeout_rejected(self) -> None:
        """Negative timeouts are invalid."""
        with pytest.raises(ValidationError):
            CancellationToken(timeout=-1)

    def test_cancel_from_other_thread(self) -> None:
        """Cancellation requested on another thread is observed."""
        token = CancellationToken()
        worker = threading.Thread(target=token.cancel)
        worker.start()
        worker.join()

        assert token.is_cancelled


class TestCheckCancelled:
    """Tests for check_cancelled."""

    def test_none_token_never_cancels(self) -> None:
        """Passing no token is a no-op."""
        check_cancelled(None, "step")

    def test_cancelled_token_raises(self) -> None:
        """A cancelled token raises."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            check_cancelled(token, "step")
