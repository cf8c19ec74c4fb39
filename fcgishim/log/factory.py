"""
Factory for creating and configuring loggers.

The root logger owns the only handler; every component gets a derived
"view" logger (``/supervisor``, ``/net/dialer`` ...) that shares it.
"""

import logging
import sys
from typing import IO, Any

from .config import LogConfig
from .formatters import LogFormatter
from .logger import Logger


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def create_root(
        config: LogConfig,
        stream: IO[str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> Logger:
        """
        Create the root logger ("/") writing to ``stream``.

        Args:
            config: Logger configuration
            stream: Output stream, stderr by default (stdout may carry the
                CGI response)
            extra: Pre-populated extra fields to include in all log records

        Example:
            >>> config = LogConfig.from_verbosity(2)
            >>> lg = LoggerFactory.create_root(config)
            >>> lg.info("spawned backend", extra={"pid": 4242})
            [12:34:56,789] [I] spawned backend    [pid:4242] [4241] [/]
        """
        lg = Logger("/", config, extra)

        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setLevel(lg.level)
        handler.setFormatter(LogFormatter(config))
        lg.addHandler(handler)
        lg.propagate = False
        lg.parent = logging.root

        lg.trace(
            "created logger",
            extra={"level": logging.getLevelName(lg.level), "colors": config.colors},
        )
        return lg

    @staticmethod
    def derive(parent: Logger, tags: str | list[str]) -> Logger:
        """
        Derive a "view" logger that delegates to root's handlers.

        Examples:
            >>> LoggerFactory.derive(root, "supervisor").name
            '/supervisor'
            >>> LoggerFactory.derive(root, ["net", "dialer"]).name
            '/net/dialer'

        Args:
            parent: Parent logger instance
            tags: Single tag string OR list of tag strings to form hierarchy

        Returns:
            Derived logger inheriting the parent's level
        """
        if isinstance(tags, str):
            tags = [tags]

        prefix = parent.name if parent.name == "/" else parent.name + "/"
        name = prefix + "/".join(tags)

        lg = parent.__class__(name, parent.config)
        lg.setLevel(logging.NOTSET)
        lg._root_logger = parent._root_logger or parent
        lg.parent = parent
        lg.propagate = False

        lg.trace("derived logger", extra={"root": lg._root_logger.name})
        return lg
