from importlib.metadata import PackageNotFoundError, version

from .config import ShimConfig, load_config
from .exceptions import (
    ArgumentSubstitutionError,
    ChildExitedError,
    ConfigError,
    ShimError,
    SocketPathError,
    SpawnError,
    StartupError,
    SupervisorError,
)

try:
    __version__ = version("fcgi-shim")
except PackageNotFoundError:
    # Package not installed, use fallback (development mode)
    __version__ = "0.1.0-dev"

# Explicit public API
__all__ = [
    # Version
    "__version__",
    # Configuration
    "ShimConfig",
    "load_config",
    # Exceptions
    "ArgumentSubstitutionError",
    "ChildExitedError",
    "ConfigError",
    "ShimError",
    "SocketPathError",
    "SpawnError",
    "StartupError",
    "SupervisorError",
]
