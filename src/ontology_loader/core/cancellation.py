"""
Cooperative cancellation for import resolution.

A resolution tree checks its token before starting each recursive import.
Cancellation never rolls back ontologies that were already populated.
"""

import logging
import signal
import threading
from typing import Any, Optional, Protocol, runtime_checkable

from .errors import LoadCancelledError

logger = logging.getLogger(__name__)


@runtime_checkable
class CancellationToken(Protocol):
    """Protocol for cancellation tokens."""

    def is_cancelled(self) -> bool:
        """Check if cancellation has been requested."""
        ...

    def throw_if_cancelled(self) -> None:
        """Raise exception if cancelled."""
        ...


class SimpleCancellationToken:
    """Thread-safe cancellation token."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    def is_cancelled(self) -> bool:
        """Check if cancelled."""
        return self._event.is_set()

    def throw_if_cancelled(self) -> None:
        """Raise if cancelled."""
        if self._event.is_set():
            raise LoadCancelledError("Ontology loading cancelled")

    def __repr__(self) -> str:
        return f"SimpleCancellationToken(cancelled={self.is_cancelled()})"


def setup_cancellation_handler(token: SimpleCancellationToken) -> Optional[Any]:
    """
    Route SIGINT to a cancellation token.

    The first Ctrl+C requests cancellation; the in-flight import finishes and
    the resolver stops before the next one.

    Returns:
        The previous SIGINT handler, or None when not on the main thread.
    """
    if threading.current_thread() is not threading.main_thread():
        logger.debug("Not on main thread - SIGINT handler not installed")
        return None

    def _handler(signum: int, frame: Any) -> None:
        logger.warning("Cancellation requested - stopping after the current document")
        token.cancel()

    return signal.signal(signal.SIGINT, _handler)


def restore_default_handler(previous: Optional[Any]) -> None:
    """Restore the SIGINT handler returned by setup_cancellation_handler."""
    if previous is not None:
        signal.signal(signal.SIGINT, previous)
