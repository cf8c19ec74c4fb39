"""
Gateway request abstraction.

The request loop only needs an environment mapping, a body stream, an
output stream and a way to say "done". ``FlupRequest`` provides exactly
that on top of a flup FastCGI (or CGI fallback) request.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class Readable(Protocol):
    def read(self, size: int = -1) -> bytes: ...


class Writable(Protocol):
    def write(self, data: bytes) -> Any: ...


class GatewayRequest(Protocol):
    """One inbound request as seen by the request loop."""

    request_id: int | None
    environ: Mapping[str, str]
    stdin: Readable
    stdout: Writable

    def finish(self) -> None: ...


class FlupRequest:
    """
    Adapter from a flup request to GatewayRequest.

    flup ends the FastCGI request itself once the handler returns;
    ``finish()`` pushes out anything still buffered before that happens.
    """

    def __init__(self, req: Any) -> None:
        self._req = req
        self.environ: Mapping[str, str] = req.params
        # The CGI fallback hands over sys.stdin, which is a text stream
        self.stdin: Readable = getattr(req.stdin, "buffer", req.stdin)
        self.stdout: Writable = req.stdout
        self.finished = False

    @property
    def request_id(self) -> int | None:
        return getattr(self._req, "requestId", None)

    def finish(self) -> None:
        if self.finished:
            return
        self.finished = True
        flush = getattr(self.stdout, "flush", None)
        if flush is not None:
            flush()
