"""User-level path lookup.

The working copy lives under the home directory of whoever runs the job
(``$HOME/<workdir_name>``), so HOME is checked first for CI containers.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

__all__ = ["clear_caches", "home"]


@lru_cache(maxsize=1)
def home() -> Path:
    """Get the user's home directory.

    Uses HOME when set, otherwise falls back to Path.home().
    """
    home_env = os.environ.get("HOME")
    if home_env:
        return Path(home_env)
    return Path.home()


def clear_caches() -> None:
    """Clear cached paths (tests change HOME)."""
    home.cache_clear()
