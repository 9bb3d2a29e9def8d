"""
Tests for cooperative cancellation tokens and the SIGINT bridge.
"""

import signal
import threading

import pytest

from ontology_loader.core.cancellation import (
    CancellationToken,
    SimpleCancellationToken,
    restore_default_handler,
    setup_cancellation_handler,
)
from ontology_loader.core.errors import LoadCancelledError, OntologyLoadError


@pytest.mark.resilience
class TestSimpleCancellationToken:
    """Token state transitions."""

    def test_initially_not_cancelled(self):
        token = SimpleCancellationToken()
        assert not token.is_cancelled()
        token.throw_if_cancelled()

    def test_cancel(self):
        token = SimpleCancellationToken()
        token.cancel()
        assert token.is_cancelled()
        with pytest.raises(LoadCancelledError):
            token.throw_if_cancelled()

    def test_cancel_is_idempotent(self):
        token = SimpleCancellationToken()
        token.cancel()
        token.cancel()
        assert token.is_cancelled()

    def test_cancelled_error_is_a_load_error(self):
        assert issubclass(LoadCancelledError, OntologyLoadError)

    def test_satisfies_protocol(self):
        assert isinstance(SimpleCancellationToken(), CancellationToken)

    def test_cancel_from_another_thread(self):
        token = SimpleCancellationToken()
        worker = threading.Thread(target=token.cancel)
        worker.start()
        worker.join()
        assert token.is_cancelled()

    def test_repr(self):
        assert "cancelled=False" in repr(SimpleCancellationToken())


@pytest.mark.resilience
class TestSignalHandler:
    """SIGINT routing."""

    def test_handler_cancels_token(self):
        token = SimpleCancellationToken()
        previous = setup_cancellation_handler(token)
        try:
            handler = signal.getsignal(signal.SIGINT)
            handler(signal.SIGINT, None)
            assert token.is_cancelled()
        finally:
            restore_default_handler(previous)

    def test_restore_puts_previous_handler_back(self):
        before = signal.getsignal(signal.SIGINT)
        previous = setup_cancellation_handler(SimpleCancellationToken())
        restore_default_handler(previous)
        assert signal.getsignal(signal.SIGINT) is before

    def test_not_installed_off_main_thread(self):
        results = []
        worker = threading.Thread(
            target=lambda: results.append(setup_cancellation_handler(SimpleCancellationToken()))
        )
        worker.start()
        worker.join()
        assert results == [None]

    def test_restore_none_is_noop(self):
        restore_default_handler(None)
