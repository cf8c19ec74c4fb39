"""
Configuration classes for the logging system.

Logger configuration is immutable and passed explicitly from ``main`` to
every component; there is no process-wide logging singleton.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .constants import LogConstants
from .exceptions import InvalidLogLevelError


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable configuration for the root logger.

    Derived loggers only carry their own level; display settings
    (colors, micros) come from the root's config.
    """

    level: int | bool = logging.WARNING  # int for normal levels, False to disable
    micros: bool = False
    colors: bool = False

    @staticmethod
    def _resolve_level(level: str | int | bool) -> int | bool:
        """Resolve level parameter to int or False."""
        if isinstance(level, bool):
            return False if not level else logging.INFO
        if isinstance(level, str):
            if level.isnumeric():
                return int(level)
            if level.lower() in LogConstants.LEVEL_NAMES:
                return LogConstants.LEVEL_NAMES[level.lower()]
            raise InvalidLogLevelError(level)
        return level

    @classmethod
    def from_params(
        cls,
        level: str | int | bool,
        micros: bool = False,
        colors: bool = False,
    ) -> LogConfig:
        """
        Create LogConfig from individual parameters.

        Args:
            level: Log level (string name, numeric value, or False to disable logging)
            micros: Whether to show microsecond precision
            colors: Whether to enable colored output

        Returns:
            LogConfig instance
        """
        return cls(level=cls._resolve_level(level), micros=micros, colors=colors)

    @classmethod
    def from_verbosity(
        cls, verbosity: int, micros: bool = False, colors: bool = False
    ) -> LogConfig:
        """
        Create LogConfig from a ``-v`` count.

        Zero shows warnings and errors, each increment lowers the threshold
        one step down to TRACE.
        """
        levels = LogConstants.VERBOSITY_LEVELS
        index = max(0, min(verbosity, len(levels) - 1))
        return cls(level=levels[index], micros=micros, colors=colors)
