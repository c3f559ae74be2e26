"""Locate the almanac.toml that applies to a working directory."""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "almanac.toml"
CONFIG_ENV_VAR = "ALMANAC_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """The nearest almanac.toml at or above *start* (default: cwd).

    ``ALMANAC_CONFIG`` wins over the walk; when it names a file that does
    not exist, no config is used at all.
    """
    if override := os.environ.get(CONFIG_ENV_VAR):
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    candidates = (directory / CONFIG_FILENAME for directory in (here, *here.parents))
    return next((candidate for candidate in candidates if candidate.is_file()), None)
