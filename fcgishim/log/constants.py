"""
Constants and configuration values for the logging system.
"""

import logging


class LogConstants:
    """Constants for the logging system."""

    # Default format strings
    DEFAULT_FORMAT: str = "[%(asctime)s] [%(levelname).1s] %(message)s"

    # Column at which extra fields start
    DEFAULT_RULE_WIDTH: int = 70
    MICRO_RULE_WIDTH: int = 74

    # Custom log levels
    CUSTOM_LEVELS: dict[str, int] = {"TRACE": 5}

    LEVEL_NAMES: dict[str, int | bool] = {
        "error": logging.ERROR,
        "warning": logging.WARNING,
        "info": logging.INFO,
        "debug": logging.DEBUG,
        "trace": 5,
        "false": False,  # Special value to disable all logging
    }

    # Level selected by each -v on the command line, starting at zero
    VERBOSITY_LEVELS: tuple[int, ...] = (
        logging.WARNING,
        logging.INFO,
        logging.DEBUG,
        5,
    )

    # ANSI escape sequences
    RESET: str = "\x1b[0m"

    # Gray level range for trace logging
    GRAY_BASE: int = 232
    GRAY_MAX_LEVELS: int = 24


logging.addLevelName(LogConstants.CUSTOM_LEVELS["TRACE"], "TRACE")
