"""
Wires the shim together and runs it to completion.

Startup order: allocate the socket path, spawn the child, then start
accepting FastCGI requests. Teardown always goes through the supervisor,
whichever way the run ends.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from ..exceptions import ChildExitedError, ShimError, StartupError
from ..gateway import GatewayServer
from ..log import LoggerFactory
from ..loop import RequestLoop
from ..net import ConnectionDialer, ProtocolTranslator
from ..subprocess import ProcessSupervisor, allocate_socket_path, release_socket_path
from .shutdown import ShutdownManager

if TYPE_CHECKING:
    from ..config import ShimConfig
    from ..log import Logger


class ShimApp:
    """
    One run of the shim for one back-end command.

    Args:
        lg: Root logger
        config: Resolved runtime configuration
        command: Back-end program name followed by its arguments
    """

    def __init__(self, lg: Logger, config: ShimConfig, command: Sequence[str]) -> None:
        self._lg = lg
        self._config = config
        self._command = list(command)
        self._shutdown = ShutdownManager()

    def run(self) -> int:
        """
        Run until the gateway stops, the child dies or a signal arrives.

        Returns:
            0 on a clean stop, 1 on a fatal error, 130/143 on SIGINT/SIGTERM
            received outside the accept loop
        """
        self._shutdown.register_signal_handlers()
        try:
            supervisor = self._create_supervisor()
            with supervisor:
                try:
                    supervisor.spinup()
                    return self._serve(supervisor.socket_path)
                finally:
                    # cleanup runs next; further signals must not interrupt it
                    self._shutdown.mark_shutting_down()
        except KeyboardInterrupt:
            code = self._shutdown.get_signal_return_code()
            self._lg.info("interrupted", extra={"code": code})
            return code
        except ChildExitedError:
            return 1
        except ShimError as e:
            self._lg.error("fatal error", extra={"exception": e})
            return 1
        finally:
            self._shutdown.restore_signal_handlers()

    def _create_supervisor(self) -> ProcessSupervisor:
        socket_path = allocate_socket_path(self._config.socket_dir)
        try:
            return ProcessSupervisor(
                LoggerFactory.derive(self._lg, "supervisor"),
                self._command,
                socket_path,
                kill_grace=self._config.kill_grace,
            )
        except StartupError:
            release_socket_path(socket_path, self._lg)
            raise

    def _serve(self, socket_path: str) -> int:
        config = self._config
        dialer = ConnectionDialer(
            LoggerFactory.derive(self._lg, ["net", "dialer"]),
            socket_path,
            attempts=config.dial_attempts,
            delay=config.dial_delay,
        )
        translator = ProtocolTranslator(
            LoggerFactory.derive(self._lg, ["net", "translator"]),
            chunk_size=config.chunk_size,
        )
        loop = RequestLoop(LoggerFactory.derive(self._lg, "loop"), dialer, translator)
        server = GatewayServer(
            LoggerFactory.derive(self._lg, "gateway"),
            loop,
            bind_address=config.bind_target(),
            multithreaded=config.multithreaded,
        )
        return server.run()
