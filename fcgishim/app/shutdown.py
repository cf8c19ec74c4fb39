"""
Shutdown signal handling.

SIGTERM and SIGINT raise KeyboardInterrupt in the main thread so the call
stack unwinds through the supervisor's context manager, which removes the
socket and terminates the child. While flup's accept loop runs it installs
its own handlers (stop the loop cleanly) and restores these afterwards.
"""

import signal
from typing import Any


class ShutdownManager:
    """
    Manages shutdown signal handling.

    Usage:
        manager = ShutdownManager()
        manager.register_signal_handlers()
        try:
            ...
        except KeyboardInterrupt:
            code = manager.get_signal_return_code()
        finally:
            manager.restore_signal_handlers()
    """

    def __init__(self) -> None:
        self._shutting_down = False
        self._signal_return_code: int = 130  # Default to SIGINT
        self._original_handlers: dict[signal.Signals, Any] = {}

    def register_signal_handlers(self) -> None:
        """Register signal handlers for SIGTERM and SIGINT."""
        for signum in (signal.SIGTERM, signal.SIGINT):
            self._original_handlers[signum] = signal.signal(signum, self._handle_signal)

    def restore_signal_handlers(self) -> None:
        """Put back the handlers that were active before registration."""
        for signum, handler in self._original_handlers.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._original_handlers.clear()

    def _handle_signal(self, signum: int, frame: Any) -> None:
        """
        Handle shutdown signal by raising KeyboardInterrupt.

        Args:
            signum: Signal number (SIGINT=2, SIGTERM=15)
            frame: Current stack frame (unused)
        """
        if self._shutting_down:
            return  # Ignore duplicate signals

        self._shutting_down = True
        self._signal_return_code = 130 if signum == signal.SIGINT else 143
        raise KeyboardInterrupt()

    def mark_shutting_down(self) -> None:
        """Ignore further signals; cleanup is already under way."""
        self._shutting_down = True

    def get_signal_return_code(self) -> int:
        """
        Get the return code for the signal that triggered shutdown.

        Returns:
            130 for SIGINT (Ctrl+C), 143 for SIGTERM, or 130 as default.
        """
        return self._signal_return_code
