"""
Per-request orchestration.

For every gateway request: dial a fresh back-end connection, send the
translated request, relay the reply, close the connection and finish the
request. Failures are confined to the request that hit them, except for a
back end that never came up, which is fatal and re-raised to the server.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from .net.exceptions import DialTimeoutError, NetError

if TYPE_CHECKING:
    from .gateway.request import GatewayRequest, Writable
    from .log import Logger
    from .net import ConnectionDialer, ProtocolTranslator

BAD_GATEWAY = (
    b"Status: 502 Bad Gateway\r\n"
    b"Content-Type: text/plain\r\n"
    b"\r\n"
    b"502 Bad Gateway\n"
)


class _TrackingWriter:
    """Counts bytes passed to the gateway output."""

    def __init__(self, stream: Writable) -> None:
        self._stream = stream
        self.written = 0

    def write(self, data: bytes) -> Any:
        self.written += len(data)
        return self._stream.write(data)


class RequestLoop:
    """
    Serves gateway requests one at a time per calling thread.

    Holds no per-request state, so a threaded gateway may call ``handle``
    concurrently.

    Args:
        lg: Logger for request events
        dialer: Opens back-end connections
        translator: Moves bytes between gateway and back end
    """

    def __init__(
        self, lg: Logger, dialer: ConnectionDialer, translator: ProtocolTranslator
    ) -> None:
        self._lg = lg
        self._dialer = dialer
        self._translator = translator

    def handle(self, request: GatewayRequest) -> None:
        """
        Serve one request end to end.

        Raises:
            DialTimeoutError: If the back end never started listening; the
                request has already been answered with a 502
        """
        start_t = time.monotonic()
        environ = request.environ
        stdout = _TrackingWriter(request.stdout)
        context = {
            "id": request.request_id,
            "method": environ.get("REQUEST_METHOD"),
            "uri": environ.get("REQUEST_URI"),
        }

        try:
            sock = self._dialer.dial()
            try:
                self._translator.write_request(sock, environ, request.stdin)
                self._translator.relay_response(sock, stdout)
            finally:
                sock.close()
        except DialTimeoutError as e:
            self._fail(stdout, e, context)
            raise
        except (NetError, OSError) as e:
            self._fail(stdout, e, context)
        else:
            self._lg.debug(
                "request served",
                extra={
                    **context,
                    "bytes": stdout.written,
                    "after": time.monotonic() - start_t,
                },
            )
        finally:
            request.finish()

    def _fail(self, stdout: _TrackingWriter, error: Exception, context: dict) -> None:
        """Log a failed request and answer it with a 502 if still possible."""
        self._lg.error(
            "request failed",
            extra={**context, "exception": error, "sent": stdout.written},
        )
        if stdout.written:
            return
        try:
            stdout.write(BAD_GATEWAY)
        except OSError as e:
            self._lg.debug("could not send error reply", extra={"exception": e})
