"""Application layer: argument parsing, signal handling and the run itself."""

from .args import DefaultsHelpFormatter, build_parser, split_command
from .shim import ShimApp
from .shutdown import ShutdownManager

__all__ = [
    "DefaultsHelpFormatter",
    "ShimApp",
    "ShutdownManager",
    "build_parser",
    "split_command",
]
