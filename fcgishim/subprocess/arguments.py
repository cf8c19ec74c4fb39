"""
Child command line substitution.

The child learns where to listen through its command line: every argument
containing ``[fcgi-shim-socket]`` gets the socket path spliced in. Older
back ends expect the path as their last argument, so a command without the
placeholder has the path appended.
"""

from collections.abc import Sequence

from ..exceptions import ArgumentSubstitutionError

PLACEHOLDER = "[fcgi-shim-socket]"


def substitute_arguments(command: Sequence[str], socket_path: str) -> list[str]:
    """
    Insert the socket path into the child command.

    Args:
        command: Program name followed by its arguments
        socket_path: Allocated rendezvous socket path

    Returns:
        New argument vector; ``command`` is not modified

    Raises:
        ArgumentSubstitutionError: If the command is empty or more than one
            argument carries the placeholder
    """
    if not command:
        raise ArgumentSubstitutionError("no backend command given")

    argv = []
    matched = []
    for index, arg in enumerate(command):
        if PLACEHOLDER in arg:
            matched.append(index)
            arg = arg.replace(PLACEHOLDER, socket_path)
        argv.append(arg)

    if len(matched) > 1:
        raise ArgumentSubstitutionError(
            f"{PLACEHOLDER} may appear in at most one argument",
            arguments=",".join(str(i) for i in matched),
        )
    if not matched:
        argv.append(socket_path)
    return argv
