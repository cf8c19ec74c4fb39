"""
Log formatter for the logging system.

Renders one line per record: timestamp, level letter, message, then the
structured extra fields as ``[key:value]`` pairs and finally the process
id and logger name, e.g.::

    [12:34:56,789] [I] dialed backend            [attempt:3] [4242] [/net/dialer]
"""

import collections
import logging
import time
from typing import Any

from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants

EXTRA_ATTR = "__shim__extra"


def _format_value(key: str, value: Any) -> str:
    """Format a single extra value."""
    if key == "exception" and isinstance(value, BaseException):
        return f"{value.__class__.__name__}: {value}"
    if key == "after" and isinstance(value, float):
        return f"{value:.3f}s"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def format_extra(extra: dict[str, Any] | None) -> str:
    """Format extra fields as a space separated ``[key:value]`` sequence."""
    if not extra:
        return ""

    keys = list(extra.keys())
    if not isinstance(extra, collections.OrderedDict):
        keys.sort()

    return " ".join(f"[{key}:{_format_value(key, extra[key])}]" for key in keys)


class LogFormatter(logging.Formatter):
    """Formatter producing the shim's single-line structured output."""

    def __init__(self, config: LogConfig) -> None:
        super().__init__(LogConstants.DEFAULT_FORMAT)
        self._config = config

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = time.strftime("%H:%M:%S", self.converter(record.created))
        if self._config.micros:
            return f"{stamp}.{int((record.created % 1) * 1_000_000):06d}"
        return f"{stamp},{int(record.msecs):03d}"

    def format(self, record: logging.LogRecord) -> str:
        head = (
            f"[{self.formatTime(record)}] [{record.levelname[:1]}] "
            f"{record.getMessage()}"
        )
        rule = (
            LogConstants.MICRO_RULE_WIDTH
            if self._config.micros
            else LogConstants.DEFAULT_RULE_WIDTH
        )
        padding = " " * max(1, rule - len(head))
        fields = format_extra(getattr(record, EXTRA_ATTR, None))
        meta = f"[{record.process}] [{record.name}]"

        if self._config.colors:
            col = ColorManager.get_color_for_level(record.levelno) + "m"
            gray = ColorManager.create_gray_level(9) + "m"
            head = col + head + ColorManager.RESET
            fields = col + fields + ColorManager.RESET if fields else ""
            meta = gray + meta + ColorManager.RESET

        line = head + padding + (fields + " " if fields else "") + meta

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line
