"""
FastCGI front end built on flup.

flup decodes the FastCGI records and hands each request to ``handler``;
instead of running a WSGI application there, the raw request goes to the
RequestLoop so the back end's reply bytes reach the web server untouched.

Without a bind address the server accepts on fd 0, the socket a web
server passes to FastCGI applications it spawns. When fd 0 is not a
socket (or FCGI_FORCE_CGI=Y is set) flup instead serves a single CGI
request from the process environment and exits.
"""

from __future__ import annotations

import os
import stat
from typing import TYPE_CHECKING, Any

from flup.server.fcgi import WSGIServer
from flup.server.fcgi_base import (
    FCGI_LISTENSOCK_FILENO,
    FCGI_REQUEST_COMPLETE,
    FCGI_UNKNOWN_ROLE,
)

from ..exceptions import ChildExitedError, StartupError
from ..net.exceptions import DialTimeoutError
from .request import FlupRequest

if TYPE_CHECKING:
    from ..log import Logger
    from ..loop import RequestLoop


def listen_fd_is_socket() -> bool:
    """
    Check whether fd 0 is the listening socket of a FastCGI parent.

    Raises:
        StartupError: If fd 0 is closed
    """
    try:
        mode = os.fstat(FCGI_LISTENSOCK_FILENO).st_mode
    except OSError as e:
        raise StartupError(
            "fd 0 is closed; use -b to listen on an address", errno=e.errno
        ) from e
    return stat.S_ISSOCK(mode)


class GatewayServer(WSGIServer):
    """
    FastCGI responder feeding the request loop.

    Args:
        lg: Logger for gateway events
        loop: Request loop serving each request
        bind_address: Optional (host, port) tuple or Unix socket path to
            listen on instead of fd 0
        multithreaded: Whether flup may serve requests concurrently
    """

    def __init__(
        self,
        lg: Logger,
        loop: RequestLoop,
        bind_address: str | tuple[str, int] | None = None,
        multithreaded: bool = True,
        **kw: Any,
    ) -> None:
        if bind_address is None:
            kw.setdefault(
                "forceCGI",
                os.environ.get("FCGI_FORCE_CGI", "N").upper().startswith("Y"),
            )
            if not kw["forceCGI"]:
                kw["forceCGI"] = not listen_fd_is_socket()
        super().__init__(
            None, bindAddress=bind_address, multithreaded=multithreaded, **kw
        )
        self._lg = lg
        self._loop = loop
        self._cgi = bool(kw.get("forceCGI", False))
        self._fatal: BaseException | None = None

    def handler(self, req: Any) -> tuple[int, int]:
        """Serve one flup request; returns (protocolStatus, appStatus)."""
        if req.role not in self.roles:
            self._lg.warning("unsupported FastCGI role", extra={"role": req.role})
            return FCGI_UNKNOWN_ROLE, 0

        try:
            self._loop.handle(FlupRequest(req))
        except (DialTimeoutError, ChildExitedError) as e:
            # A CGI request runs on the main thread, where SIGCHLD lands;
            # flup would swallow anything raised past this point.
            self.stop(e)
        return FCGI_REQUEST_COMPLETE, 0

    def stop(self, error: BaseException | None = None) -> None:
        """Ask the accept loop to exit, recording a fatal error if given."""
        if error is not None and self._fatal is None:
            self._fatal = error
            self._lg.error("stopping on fatal error", extra={"exception": error})
        # The accept loop only exists once flup's run() has set _keepGoing
        if getattr(self, "_keepGoing", False):
            self._exit()

    def run(self) -> int:  # type: ignore[override]
        """
        Serve until SIGINT/SIGTERM/SIGHUP or a fatal error.

        In CGI mode flup serves its one request and raises SystemExit,
        which ends the run here.

        Returns:
            0 on a clean stop, 1 after a fatal error
        """
        self._lg.info(
            "serving FastCGI" if not self._cgi else "serving CGI request",
            extra={"bind": self._bindAddress or "fd0", "threads": self.multithreaded},
        )
        try:
            super().run()
        except SystemExit:
            self._lg.debug("CGI request done")
        self._lg.debug("gateway stopped")
        return 1 if self._fatal is not None else 0
