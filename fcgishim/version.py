"""
Version reporting.

Installed builds carry a ``_build_info.py`` generated by setup.py with the
git commit they were built from; source checkouts do not.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass

from . import __version__


@dataclass(frozen=True)
class BuildInfo:
    """Commit metadata recorded at build time."""

    commit_short: str
    commit_hash: str = ""
    build_time: str = ""
    modified: bool = False

    @classmethod
    def load(cls) -> BuildInfo | None:
        """Read the generated build info module, if this is a built package."""
        try:
            mod = importlib.import_module("fcgishim._build_info")
        except ImportError:
            return None
        short = getattr(mod, "COMMIT_SHORT", "")
        if not short:
            return None
        return cls(
            commit_short=short,
            commit_hash=getattr(mod, "COMMIT_HASH", ""),
            build_time=getattr(mod, "BUILD_TIME", ""),
            modified=bool(getattr(mod, "MODIFIED", False)),
        )


def version_string(prog: str = "fcgi-shim", build: BuildInfo | None = None) -> str:
    """
    Format the version line printed by ``--version``.

    Example:
        >>> version_string(build=BuildInfo("1a2b3c4", modified=True))
        'fcgi-shim 0.1.0 (1a2b3c4, modified)'
    """
    if build is None:
        build = BuildInfo.load()
    if build is None:
        return f"{prog} {__version__}"
    suffix = ", modified" if build.modified else ""
    return f"{prog} {__version__} ({build.commit_short}{suffix})"
