"""
Structured logging for fcgi-shim.

Usage:
    from fcgishim.log import LogConfig, LoggerFactory

    lg = LoggerFactory.create_root(LogConfig.from_verbosity(args.verbose))
    dialer_lg = LoggerFactory.derive(lg, ["net", "dialer"])
    dialer_lg.debug("dialing backend", extra={"path": path})
"""

from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .factory import LoggerFactory
from .formatters import LogFormatter, format_extra
from .logger import Logger

__all__ = [
    "ColorManager",
    "InvalidLogLevelError",
    "LogConfig",
    "LogConstants",
    "LogError",
    "LogFormatter",
    "Logger",
    "LoggerFactory",
    "format_extra",
]
