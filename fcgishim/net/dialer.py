"""
Client connections to the back end's Unix socket.

The child binds its listening socket some time after it is spawned, so the
first requests may find no socket file yet. ``dial()`` polls for it with a
fixed delay, bounded by a fixed number of attempts; any other connection
failure means the back end is broken and is not retried.
"""

from __future__ import annotations

import socket
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from .exceptions import DialError, DialTimeoutError

if TYPE_CHECKING:
    from ..log import Logger

DEFAULT_ATTEMPTS = 40
DEFAULT_DELAY = 0.1


class ConnectionDialer:
    """
    Opens one fresh back-end connection per call.

    The socket path is fixed for the life of the child, so a dialer can be
    shared by concurrent requests.

    Args:
        lg: Logger for dial events
        socket_path: Path the child listens on
        attempts: Maximum number of connection attempts
        delay: Seconds slept after each attempt that found no socket
        sleep: Sleep function (time.sleep)
    """

    def __init__(
        self,
        lg: Logger,
        socket_path: str,
        attempts: int = DEFAULT_ATTEMPTS,
        delay: float = DEFAULT_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if attempts < 1:
            raise ValueError(f"attempts must be positive, got: {attempts}")
        self._lg = lg
        self._socket_path = socket_path
        self._attempts = attempts
        self._delay = delay
        self._sleep = sleep

    @property
    def socket_path(self) -> str:
        return self._socket_path

    def dial(self) -> socket.socket:
        """
        Connect to the back end.

        Returns:
            Connected AF_UNIX stream socket, owned by the caller

        Raises:
            DialTimeoutError: If the socket never appeared
            DialError: On any other connection failure
        """
        for attempt in range(1, self._attempts + 1):
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.connect(self._socket_path)
            except FileNotFoundError:
                sock.close()
                self._lg.trace(
                    "backend socket not there yet",
                    extra={"attempt": attempt, "path": self._socket_path},
                )
                self._sleep(self._delay)
                continue
            except OSError as e:
                sock.close()
                raise DialError(
                    f"cannot connect to backend: {e.strerror or e}",
                    socket_path=self._socket_path,
                ) from e

            if attempt > 1:
                self._lg.debug("backend socket appeared", extra={"attempt": attempt})
            return sock

        self._lg.error(
            "backend socket never appeared",
            extra={"attempts": self._attempts, "path": self._socket_path},
        )
        raise DialTimeoutError(self._socket_path, self._attempts)
