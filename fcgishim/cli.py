#!/usr/bin/env python3
"""
fcgi-shim command line.

Usage:
    fcgi-shim ./app --listen [fcgi-shim-socket]
    fcgi-shim -vv -b 127.0.0.1:9000 ./app
    fcgi-shim --help
"""

import sys
from collections.abc import Sequence
from typing import NoReturn

from .app import ShimApp, build_parser, split_command
from .config import load_config
from .exceptions import ConfigError
from .log import LoggerFactory
from .version import version_string


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # stdout may be the CGI response channel, so usage goes to stderr
    if args.help:
        parser.print_help(sys.stderr)
        return 2

    if args.version:
        print(version_string(parser.prog), file=sys.stderr)
        return 0

    command = split_command(args)
    if not command:
        parser.print_usage(sys.stderr)
        return 0

    try:
        config = load_config(
            args.config,
            verbosity=args.verbose or None,
            bind_address=args.bind,
            socket_dir=args.socket_dir,
        )
    except ConfigError as e:
        print(f"{parser.prog}: {e}", file=sys.stderr)
        return 1

    lg = LoggerFactory.create_root(config.log_config())
    return ShimApp(lg, config, command).run()


def exit_code(result: object) -> int:
    """Map a run result to a process exit code; anything but an int is 0."""
    return result if isinstance(result, int) else 0


def console_main() -> NoReturn:
    sys.exit(exit_code(main()))


if __name__ == "__main__":
    console_main()
