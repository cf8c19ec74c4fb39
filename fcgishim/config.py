"""
Configuration for fcgi-shim.

Values are resolved with the precedence (lowest first):

1. ``ShimConfig`` defaults
2. the ``shim:`` section of an optional YAML file
3. ``FCGI_SHIM_<KEY>`` environment variables
4. explicit overrides (the command line)

Example YAML file::

    shim:
      dial_attempts: 40
      dial_delay: 0.1
      kill_grace: 0.5
      socket_dir: /run/fcgi-shim
    logging:
      level: info
      colors: false
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigError
from .log import InvalidLogLevelError, LogConfig

ENV_PREFIX = "FCGI_SHIM_"

# Refuse absurdly large config files
MAX_CONFIG_SIZE_BYTES = 1024 * 1024


@dataclass(frozen=True)
class ShimConfig:
    """Immutable runtime configuration passed to every component."""

    verbosity: int = 0
    log_level: str | None = None  # overrides verbosity when set
    colors: bool = False
    micros: bool = False
    dial_attempts: int = 40
    dial_delay: float = 0.1
    kill_grace: float = 0.5
    chunk_size: int = 4096
    socket_dir: str | None = None
    bind_address: str | None = None
    multithreaded: bool = True

    def log_config(self) -> LogConfig:
        """Build the root LogConfig for this configuration."""
        if self.log_level is not None:
            return LogConfig.from_params(
                self.log_level, micros=self.micros, colors=self.colors
            )
        return LogConfig.from_verbosity(
            self.verbosity, micros=self.micros, colors=self.colors
        )

    def bind_target(self) -> str | tuple[str, int] | None:
        """
        Translate ``bind_address`` into flup's bindAddress form.

        ``host:port`` becomes a tuple, anything else is a Unix socket path.
        """
        if not self.bind_address:
            return None
        host, sep, port = self.bind_address.rpartition(":")
        if sep and port.isdigit() and "/" not in self.bind_address:
            return (host or "0.0.0.0", int(port))
        return self.bind_address


_FIELDS = {f.name: f for f in dataclasses.fields(ShimConfig)}


def _coerce(name: str, value: Any) -> Any:
    """Coerce a raw value (YAML scalar or env string) to the field's type."""
    if value is None:
        return None

    default = _FIELDS[name].default
    try:
        if isinstance(default, bool):
            if isinstance(value, str):
                return value.strip().lower() in ("1", "true", "yes", "on", "y")
            return bool(value)
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
        return str(value)
    except (TypeError, ValueError) as e:
        raise ConfigError("invalid configuration value", key=name, value=value) from e


def _read_yaml(path: str | Path) -> dict[str, Any]:
    """Load the YAML file and merge its ``shim`` and ``logging`` sections."""
    path = Path(path)
    try:
        if path.stat().st_size > MAX_CONFIG_SIZE_BYTES:
            raise ConfigError("configuration file too large", path=str(path))
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError("cannot read configuration file", path=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML: {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigError("configuration root must be a mapping", path=str(path))

    values: dict[str, Any] = dict(data.get("shim") or {})
    logging_section = data.get("logging") or {}
    if "level" in logging_section:
        values.setdefault("log_level", logging_section["level"])
    for key in ("colors", "micros"):
        if key in logging_section:
            values.setdefault(key, logging_section[key])
    return values


def _read_env(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``FCGI_SHIM_<KEY>`` overrides for known keys."""
    values = {}
    for name in _FIELDS:
        env_key = ENV_PREFIX + name.upper()
        if env_key in environ:
            values[name] = environ[env_key]
    return values


def _validate(config: ShimConfig) -> None:
    if config.dial_attempts < 1:
        raise ConfigError("dial_attempts must be at least 1", value=config.dial_attempts)
    if config.dial_delay < 0 or config.kill_grace < 0:
        raise ConfigError("delays must not be negative")
    if config.chunk_size < 1:
        raise ConfigError("chunk_size must be positive", value=config.chunk_size)
    config.log_config()


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ShimConfig:
    """
    Resolve the runtime configuration.

    Args:
        path: Optional YAML config file
        environ: Environment to read overrides from (os.environ by default)
        **overrides: Explicit values; None means "not given"

    Returns:
        ShimConfig instance

    Raises:
        ConfigError: On unreadable files, unknown keys or invalid values
    """
    values: dict[str, Any] = {}
    if path is not None:
        values.update(_read_yaml(path))
    values.update(_read_env(os.environ if environ is None else environ))
    values.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(set(values) - set(_FIELDS))
    if unknown:
        raise ConfigError("unknown configuration keys", keys=",".join(unknown))

    config = ShimConfig(**{k: _coerce(k, v) for k, v in values.items()})
    try:
        _validate(config)
    except InvalidLogLevelError as e:
        raise ConfigError(str(e), key="log_level") from e
    return config
