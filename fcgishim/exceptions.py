"""
Unified exception hierarchy for fcgi-shim.

Startup errors abort the process before any request is served, supervisor
errors describe the child's lifetime, and network/protocol errors (see
``fcgishim.net.exceptions``) are scoped to a single request unless the
request loop decides otherwise.
"""

from typing import Any


class ShimError(Exception):
    """
    Base exception for all fcgi-shim errors.

    Example:
        try:
            supervisor.spinup()
        except ShimError as e:
            lg.error("startup failed", extra={"exception": e})
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(ShimError):
    """
    Configuration-related errors.

    Examples:
        - Config file not found or not valid YAML
        - Unknown configuration key
        - Value of the wrong type
    """

    pass


class StartupError(ShimError):
    """Fatal errors raised before the child process is running."""

    pass


class SocketPathError(StartupError):
    """Raised when no unique rendezvous socket path can be allocated."""

    pass


class ArgumentSubstitutionError(StartupError):
    """Raised when the child command cannot receive the socket path."""

    pass


class SpawnError(StartupError):
    """Raised when the child process cannot be started."""

    pass


class SupervisorError(ShimError):
    """Raised on invalid supervisor state transitions."""

    pass


class ChildExitedError(ShimError):
    """
    Raised in the main thread when the supervised child exits.

    A child death is fatal to the whole shim: there is no restart.
    """

    def __init__(self, pid: int, returncode: int | None) -> None:
        super().__init__("backend process exited", pid=pid, returncode=returncode)
        self.pid = pid
        self.returncode = returncode
