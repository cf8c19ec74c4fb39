"""
Color management for the logging system.
"""

import logging

from .constants import LogConstants


class ColorManager:
    """Centralized ANSI color code management."""

    RED = "\x1b[31"
    YELLOW = "\x1b[33"
    MAGENTA = "\x1b[35"
    CYAN = "\x1b[36"
    DEFAULT = "\x1b[38"

    RESET = LogConstants.RESET

    COLORS: dict[int, str] = {
        logging.DEBUG: "\x1b[38;5;32",
        logging.INFO: CYAN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: MAGENTA,
    }

    @staticmethod
    def get_color_for_level(level: int) -> str:
        """Get color escape prefix for a log level (gray for trace)."""
        color = ColorManager.COLORS.get(level)
        if color is not None:
            return color
        if level < logging.DEBUG:
            return ColorManager.create_gray_level(12)
        return ColorManager.DEFAULT

    @staticmethod
    def create_gray_level(level: int) -> str:
        """
        Create gray color for trace levels.

        Args:
            level: Gray level (0-23 range)
        """
        level = max(0, min(level, LogConstants.GRAY_MAX_LEVELS - 1))
        return f"\x1b[38;5;{LogConstants.GRAY_BASE + level}"
