"""
Command line parsing.

    fcgi-shim [options] command [args...]

Everything from the first positional argument on belongs to the back-end
command, options included.
"""

import argparse

from ..subprocess.arguments import PLACEHOLDER

PROG = "fcgi-shim"


class DefaultsHelpFormatter(argparse.HelpFormatter):
    """Help formatter that appends non-empty default values to help text."""

    def _get_help_string(self, action: argparse.Action) -> str:
        help_text = action.help or ""
        if action.default not in (argparse.SUPPRESS, None, False, []):
            return help_text + f" (default: {action.default})"
        return help_text


def build_parser() -> argparse.ArgumentParser:
    """Build the fcgi-shim argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        usage="%(prog)s [options] command [args...]",
        description=(
            "Serve FastCGI requests by relaying them as plain HTTP/1.0 to a "
            "supervised back-end process listening on a Unix socket."
        ),
        epilog=(
            f"The token {PLACEHOLDER} in an argument is replaced by the back-end "
            "socket path. Without it, the path is appended as the last argument."
        ),
        formatter_class=DefaultsHelpFormatter,
        add_help=False,
    )
    parser.add_argument(
        "-h", "--help", action="store_true", help="show this help and exit"
    )
    parser.add_argument(
        "-V", "--version", action="store_true", help="show version and exit"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase log verbosity (repeatable)",
    )
    parser.add_argument("-c", "--config", metavar="FILE", help="YAML config file")
    parser.add_argument(
        "-b",
        "--bind",
        metavar="ADDRESS",
        help="listen on host:port or a Unix socket path instead of fd 0",
    )
    parser.add_argument(
        "--socket-dir",
        metavar="DIR",
        help="directory for the back-end socket (system temp dir if unset)",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="back-end program and its arguments",
    )
    return parser


def split_command(args: argparse.Namespace) -> list[str]:
    """Return the back-end command, dropping a leading ``--`` separator."""
    command = list(args.command or [])
    if command[:1] == ["--"]:
        command = command[1:]
    return command
