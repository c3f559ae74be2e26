"""almanac: seed almanac resolver CLI."""

__version__ = "0.1.0"
