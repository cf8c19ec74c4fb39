"""
Rendezvous socket path allocation.

The path lives inside a private directory created with ``mkdtemp``: the
directory name is unique per run, so the socket path cannot collide with
another shim on the same host, and the socket file itself is left for the
child to bind.
"""

from __future__ import annotations

import os
import tempfile
from typing import TYPE_CHECKING

from ..exceptions import SocketPathError

if TYPE_CHECKING:
    from ..log import Logger

SOCKET_NAME = "backend.sock"
DIR_PREFIX = "fcgi-shim-"


def allocate_socket_path(directory: str | None = None, prefix: str = DIR_PREFIX) -> str:
    """
    Allocate a fresh socket path without creating the socket.

    Args:
        directory: Parent directory for the private socket directory
            (system temp dir by default)
        prefix: Prefix of the private directory name

    Returns:
        Absolute path to a not-yet-existing socket file

    Raises:
        SocketPathError: If the private directory cannot be created
    """
    try:
        private_dir = tempfile.mkdtemp(prefix=prefix, dir=directory)
    except OSError as e:
        raise SocketPathError(
            f"cannot allocate socket path: {e.strerror or e}", directory=directory
        ) from e
    return os.path.join(private_dir, SOCKET_NAME)


def release_socket_path(path: str, lg: Logger) -> bool:
    """
    Unlink the socket and remove its private directory.

    Missing files are expected (the child may never have bound the socket,
    or a previous shutdown already cleaned up) and only logged.

    Returns:
        True if the socket file was removed by this call
    """
    removed = False
    try:
        os.unlink(path)
        removed = True
        lg.debug("removed backend socket", extra={"path": path})
    except FileNotFoundError:
        lg.debug("backend socket already absent", extra={"path": path})
    except OSError as e:
        lg.warning("failed to remove backend socket", extra={"path": path, "exception": e})

    private_dir = os.path.dirname(path)
    if os.path.basename(private_dir).startswith(DIR_PREFIX):
        try:
            os.rmdir(private_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            lg.warning(
                "failed to remove socket directory",
                extra={"path": private_dir, "exception": e},
            )
    return removed
