"""
Supervision of the single back-end child process.

The supervisor owns the only two resources that must never outlive the
shim: the child process and its rendezvous socket. Whatever ends the run
(normal return, a signal, the child dying, a fatal error) goes through
``shutdown()``, which runs once and always unlinks the socket before
terminating the child.

Usage:
    with ProcessSupervisor(lg, command, socket_path) as supervisor:
        supervisor.spinup()
        server.run()
    # child terminated and socket removed here
"""

from __future__ import annotations

import enum
import signal
import subprocess
from collections.abc import Callable, Sequence
from types import FrameType
from typing import TYPE_CHECKING, Any

from ..exceptions import ChildExitedError, SpawnError, SupervisorError
from .arguments import substitute_arguments
from .socket_path import release_socket_path

if TYPE_CHECKING:
    from ..log import Logger


class SupervisorState(enum.Enum):
    """Lifecycle of the supervised child."""

    NOT_STARTED = "not-started"
    RUNNING = "running"
    TERMINATING = "terminating"
    TERMINATED = "terminated"


class ProcessSupervisor:
    """
    Spawns, watches and terminates the back-end process.

    Args:
        lg: Logger for supervisor events
        command: Back-end program name followed by its arguments
        socket_path: Rendezvous socket the child should listen on
        kill_grace: Seconds to wait after SIGTERM before sending SIGKILL
        popen: Process factory (subprocess.Popen)

    Raises:
        ArgumentSubstitutionError: If the command cannot take the socket path;
            raised here so nothing is spawned for a bad command line
    """

    def __init__(
        self,
        lg: Logger,
        command: Sequence[str],
        socket_path: str,
        kill_grace: float = 0.5,
        popen: Callable[..., Any] = subprocess.Popen,
    ) -> None:
        self._lg = lg
        self._command = list(command)
        self._socket_path = socket_path
        self._argv = substitute_arguments(self._command, socket_path)
        self._kill_grace = kill_grace
        self._popen = popen
        self._proc: Any = None
        self._state = SupervisorState.NOT_STARTED
        self._old_sigchld: Any = None
        self._handler_installed = False

    @property
    def state(self) -> SupervisorState:
        return self._state

    @property
    def pid(self) -> int | None:
        return self._proc.pid if self._proc is not None else None

    @property
    def argv(self) -> list[str]:
        """Substituted command line the child is started with."""
        return list(self._argv)

    @property
    def socket_path(self) -> str:
        return self._socket_path

    def __enter__(self) -> ProcessSupervisor:
        return self

    def __exit__(self, *args: object) -> None:
        self.shutdown()

    def spinup(self) -> int:
        """
        Start the child and arm the child-death handler.

        Returns:
            Child process id

        Raises:
            SupervisorError: If the child was already started
            SpawnError: If the program cannot be executed
            ChildExitedError: If the child died before spinup returned
        """
        if self._state is not SupervisorState.NOT_STARTED:
            raise SupervisorError("backend already started", state=self._state.value)

        try:
            # fd 0 may be the FastCGI listening socket and fd 1 the CGI
            # response, neither belongs to the child
            self._proc = self._popen(
                self._argv, stdin=subprocess.DEVNULL, stdout=2, close_fds=True
            )
        except OSError as e:
            raise SpawnError(
                f"cannot start backend: {e.strerror or e}", program=self._argv[0]
            ) from e

        self._state = SupervisorState.RUNNING
        self._install_child_handler()
        self._lg.info(
            "spawned backend",
            extra={"pid": self._proc.pid, "argv": " ".join(self._argv)},
        )

        # The child may have died before the handler was armed
        self.check_child()
        return self._proc.pid

    def check_child(self) -> None:
        """
        Raise ChildExitedError if the running child has exited.

        Called from the SIGCHLD handler; a no-op once shutdown started.
        """
        if self._state is not SupervisorState.RUNNING or self._proc is None:
            return

        returncode = self._proc.poll()
        if returncode is None:
            return

        self._lg.error(
            "backend exited unexpectedly",
            extra={"pid": self._proc.pid, "returncode": returncode},
        )
        raise ChildExitedError(self._proc.pid, returncode)

    def _handle_child_signal(self, signum: int, frame: FrameType | None) -> None:
        self.check_child()

    def _install_child_handler(self) -> None:
        self._old_sigchld = signal.signal(signal.SIGCHLD, self._handle_child_signal)
        self._handler_installed = True
        self._lg.trace("child-death handler installed")

    def _restore_child_handler(self) -> None:
        if not self._handler_installed:
            return
        self._handler_installed = False
        previous = self._old_sigchld if self._old_sigchld is not None else signal.SIG_DFL
        signal.signal(signal.SIGCHLD, previous)
        self._lg.trace("child-death handler removed")

    def shutdown(self) -> None:
        """
        Release the socket and terminate the child, exactly once.

        Later calls return immediately. Missing sockets and already dead
        children are logged, never raised.
        """
        if self._state in (SupervisorState.TERMINATING, SupervisorState.TERMINATED):
            self._lg.trace("shutdown already done", extra={"state": self._state.value})
            return

        self._state = SupervisorState.TERMINATING
        self._lg.debug("shutting down...", extra={"pid": self.pid})

        self._restore_child_handler()
        release_socket_path(self._socket_path, self._lg)
        if self._proc is not None:
            self._terminate_child()

        self._state = SupervisorState.TERMINATED
        self._lg.debug("shutdown complete")

    def _send(self, sig: signal.Signals) -> bool:
        """Send a signal to the child; False if it was already gone."""
        try:
            self._proc.send_signal(sig)
            return True
        except ProcessLookupError:
            self._lg.debug(
                "backend already dead", extra={"pid": self._proc.pid, "signal": sig.name}
            )
            return False

    def _terminate_child(self) -> None:
        """Send SIGTERM, wait up to kill_grace, then SIGKILL."""
        proc = self._proc
        returncode = proc.poll()
        if returncode is not None:
            self._lg.debug(
                "backend already exited",
                extra={"pid": proc.pid, "returncode": returncode},
            )
            return

        if not self._send(signal.SIGTERM):
            return

        try:
            returncode = proc.wait(timeout=self._kill_grace)
            self._lg.debug(
                "backend terminated", extra={"pid": proc.pid, "returncode": returncode}
            )
            return
        except subprocess.TimeoutExpired:
            pass

        self._lg.warning(
            "backend ignored SIGTERM, killing",
            extra={"pid": proc.pid, "after": float(self._kill_grace)},
        )
        if not self._send(signal.SIGKILL):
            return

        try:
            proc.wait(timeout=max(self._kill_grace, 1.0))
        except subprocess.TimeoutExpired:
            self._lg.error("backend did not die after SIGKILL", extra={"pid": proc.pid})
