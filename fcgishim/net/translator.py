"""
Request/response translation between the gateway and the back end.

Outbound, a CGI environment plus body stream becomes a plain HTTP/1.0
request. Inbound, the back end's reply is streamed to the gateway
unchanged except for its first line: ``HTTP/1.1 404 Not Found`` becomes
the CGI header ``Status: 404 Not Found``.

Example:
    translator = ProtocolTranslator(lg)
    translator.write_request(sock, request.environ, request.stdin)
    translator.relay_response(sock, request.stdout)
"""

from __future__ import annotations

import re
import socket
from collections.abc import Mapping
from typing import IO, TYPE_CHECKING

from .exceptions import GatewayRequestError, StatusLineError
from .headers import request_line, translate_headers

if TYPE_CHECKING:
    from ..gateway.request import Writable
    from ..log import Logger

CHUNK_SIZE = 4096

# Give up looking for the end of the status line after this many bytes
MAX_STATUS_LINE = 64 * 1024

_STATUS_LINE = re.compile(rb"\A\S+ (\d{3})(?: ([^\r\n]*))?(\r?\n|\Z)")


def rewrite_status_line(head: bytes) -> bytes:
    """
    Replace the leading status line with a CGI ``Status:`` header.

    Args:
        head: Start of the reply, holding at least the complete first line

    Returns:
        ``head`` with its first line rewritten; the line terminator and all
        following bytes are kept as they are

    Raises:
        StatusLineError: If ``head`` does not start with ``<token> <code> <reason>``

    >>> rewrite_status_line(b"HTTP/1.1 404 Not Found\\r\\nX: y\\r\\n")
    b'Status: 404 Not Found\\r\\nX: y\\r\\n'
    """
    match = _STATUS_LINE.match(head)
    if match is None:
        raise StatusLineError(
            "backend reply does not start with a status line", head=head[:40]
        )

    code, reason, eol = match.groups()
    status = b"Status: " + code
    if reason:
        status += b" " + reason
    return status + eol + head[match.end() :]


class ProtocolTranslator:
    """
    Streams one request to the back end and its reply to the gateway.

    Nothing is buffered on the way out: the request head is written line by
    line and each body chunk is sent as soon as it is read.

    Args:
        lg: Logger for translation events
        chunk_size: Read size for the request body and the reply
    """

    def __init__(self, lg: Logger, chunk_size: int = CHUNK_SIZE) -> None:
        self._lg = lg
        self._chunk_size = chunk_size

    def _send_line(self, sock: socket.socket, line: str) -> None:
        try:
            data = (line + "\r\n").encode("latin-1")
        except UnicodeEncodeError as e:
            raise GatewayRequestError("request head is not latin-1", line=line) from e
        sock.sendall(data)

    def write_request(
        self, sock: socket.socket, environ: Mapping[str, str], stdin: IO[bytes]
    ) -> int:
        """
        Send the translated request head and the body.

        Returns:
            Number of body bytes sent

        Raises:
            GatewayRequestError: If the environment cannot be translated
        """
        line = request_line(environ)
        headers = translate_headers(environ)

        self._send_line(sock, line)
        for name, value in headers:
            self._send_line(sock, f"{name}: {value}")
        self._send_line(sock, "")

        body = 0
        while True:
            chunk = stdin.read(self._chunk_size)
            if not chunk:
                break
            sock.sendall(chunk)
            body += len(chunk)

        self._lg.trace(
            "request sent",
            extra={"line": line, "headers": len(headers), "body": body},
        )
        return body

    def _read_status_head(self, sock: socket.socket) -> bytes:
        """Read until the first line is complete or the reply ends."""
        head = b""
        while b"\n" not in head:
            chunk = sock.recv(self._chunk_size)
            if not chunk:
                break
            head += chunk
            if len(head) > MAX_STATUS_LINE:
                raise StatusLineError("backend status line too long", size=len(head))

        if not head:
            raise StatusLineError("backend closed the connection without replying")
        return head

    def relay_response(self, sock: socket.socket, stdout: Writable) -> int:
        """
        Stream the back end's reply to the gateway output.

        Returns:
            Number of bytes written to ``stdout``

        Raises:
            StatusLineError: If the reply does not start with a status line;
                nothing has been written to ``stdout`` in that case
        """
        head = rewrite_status_line(self._read_status_head(sock))
        stdout.write(head)
        written = len(head)

        while True:
            chunk = sock.recv(self._chunk_size)
            if not chunk:
                break
            stdout.write(chunk)
            written += len(chunk)

        self._lg.trace("response relayed", extra={"bytes": written})
        return written
