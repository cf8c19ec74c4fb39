"""
Logger class for the logging system.

Extends the standard logger with a TRACE level, pre-populated extra fields
merged into every record, and "view" loggers that share the root logger's
handlers.
"""

import collections
import logging
import sys
from typing import Any

from .config import LogConfig
from .constants import LogConstants
from .formatters import EXTRA_ATTR


class Logger(logging.Logger):
    """
    Enhanced logger with structured extra fields.

    Extends the standard Python logger with:
    - Extra fields attached to the record for the formatter to render
    - A trace() method below DEBUG
    - Delegation to the root logger's handlers for derived loggers
    """

    def __init__(
        self,
        name: str,
        config: LogConfig | None = None,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
    ):
        """
        Initialize the enhanced logger.

        Args:
            name: Logger name
            config: Logger configuration, defaults to LogConfig()
            extra: Pre-populated extra fields to include in all log records
        """
        if config is None:
            config = LogConfig()

        if config.level is False:
            super().__init__(name, logging.CRITICAL + 1)
            self._logging_disabled = True
        else:
            super().__init__(name, config.level)
            self._logging_disabled = False

        self._config = config
        self._extra = extra or {}
        self._root_logger: Logger | None = None  # Set for derived "view" loggers

    @property
    def config(self) -> LogConfig:
        """Get logger configuration."""
        return self._config

    def isEnabledFor(self, level: int) -> bool:
        """Check if enabled, respecting ancestor loggers' levels."""
        if self._logging_disabled or not super().isEnabledFor(level):
            return False

        if self.parent and hasattr(self.parent, "_root_logger"):
            return self.parent.isEnabledFor(level)

        return True

    def makeRecord(  # type: ignore[override]
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: str,
        args: tuple,
        exc_info: Any | None,
        func: str | None = None,
        extra: dict[str, Any] | None = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        """Create log record with merged extra fields."""
        merged: dict[str, Any] | collections.OrderedDict
        if isinstance(self._extra, collections.OrderedDict):
            merged = collections.OrderedDict(self._extra)
        else:
            merged = self._extra.copy()
        if extra:
            merged.update(extra)

        record = super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func=func, sinfo=sinfo
        )
        # setattr avoids name mangling of the double underscore prefix
        setattr(record, EXTRA_ATTR, merged)
        return record

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """
        Log a TRACE level message.

        Args:
            msg: Log message
            *args: Message format arguments
            **kwargs: Additional keyword arguments including 'extra' for structured data
        """
        trace_level = LogConstants.CUSTOM_LEVELS["TRACE"]
        if self.isEnabledFor(trace_level):
            self._log(trace_level, msg, args, **kwargs)

    def _log(self, level: int, msg: str, args: tuple, **kwargs: Any) -> None:  # type: ignore[override]
        if self._logging_disabled:
            return

        try:
            super()._log(level, msg, args, **kwargs)
        except (TypeError, ValueError) as e:
            msg_preview = msg[:80] + "..." if len(msg) > 80 else msg
            sys.stderr.write(
                f"LOG_FORMAT_ERROR [{self.name}]: {e.__class__.__name__}: {e} "
                f"| msg={msg_preview!r} args={args!r}\n"
            )

    def callHandlers(self, record: logging.LogRecord) -> None:
        """
        Pass a record to all relevant handlers.

        Derived "view" loggers delegate to the root logger's handlers.
        """
        if self._root_logger is not None:
            for handler in self._root_logger.handlers:
                if record.levelno >= handler.level:
                    handler.handle(record)
        else:
            super().callHandlers(record)
