"""Resolution modes and strategies."""

from __future__ import annotations

from enum import StrEnum


class SeedMode(StrEnum):
    """How the initial record is read."""

    IDS = "ids"
    RANGES = "ranges"


class Strategy(StrEnum):
    """How range mode is resolved."""

    SPLIT = "split"
    ENUMERATE = "enumerate"
