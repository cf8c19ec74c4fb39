"""Back-end process infrastructure.

Socket path allocation, command line substitution and the supervisor that
owns the child process for the lifetime of the shim.
"""

from .arguments import PLACEHOLDER, substitute_arguments
from .socket_path import allocate_socket_path, release_socket_path
from .supervisor import ProcessSupervisor, SupervisorState

__all__ = [
    "PLACEHOLDER",
    "ProcessSupervisor",
    "SupervisorState",
    "allocate_socket_path",
    "release_socket_path",
    "substitute_arguments",
]
