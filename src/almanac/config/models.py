"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, almanac.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from almanac.domain.types import SeedMode, Strategy


class ResolverConfig(BaseModel):
    """[resolver] section."""

    model_config = {"frozen": True}

    mode: SeedMode = SeedMode.IDS
    strategy: Strategy = Strategy.SPLIT
    workers: int = Field(default=1, ge=1)
    enumerate_limit: int = Field(default=10_000_000, ge=1)


class InputConfig(BaseModel):
    """[input] section."""

    model_config = {"frozen": True}

    path: str = "data/day05.txt"


class AlmanacConfig(BaseModel):
    """Root of an almanac.toml file."""

    model_config = {"frozen": True}

    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    input: InputConfig = Field(default_factory=InputConfig)
