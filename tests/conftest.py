"""Shared pytest fixtures and test helpers for almanac tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from almanac.config.settings import AlmanacSettings
from almanac.domain.parser import parse_text
from almanac.domain.tables import Almanac
from almanac.domain.types import SeedMode
from almanac.services.telemetry import disable_telemetry

EXAMPLE = """\
seeds: 79 14 55 13

seed-to-soil map:
50 98 2
52 50 48

soil-to-fertilizer map:
0 15 37
37 52 2
39 0 15

fertilizer-to-water map:
49 53 8
0 11 42
42 0 7
57 7 4

water-to-light map:
88 18 7
18 25 70

light-to-temperature map:
45 77 23
81 45 19
68 64 13

temperature-to-humidity map:
0 69 1
1 0 69

humidity-to-location map:
60 56 37
56 93 4
"""


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """``-v`` enables telemetry for the current context; undo it per test."""
    yield
    disable_telemetry()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """CLI runs attach handlers bound to CliRunner streams; drop them afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("almanac").setLevel(logging.NOTSET)
    structlog.reset_defaults()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def example_text() -> str:
    return EXAMPLE


@pytest.fixture
def example_ids() -> Almanac:
    return parse_text(EXAMPLE, SeedMode.IDS)


@pytest.fixture
def example_ranges() -> Almanac:
    return parse_text(EXAMPLE, SeedMode.RANGES)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated CWD with no almanac.toml above it and no ALMANAC_* env vars."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ALMANAC_CONFIG", raising=False)
    for name in ("ALMANAC_JSON_OUTPUT", "ALMANAC_QUIET", "ALMANAC_VERBOSE", "ALMANAC_ROOT"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def example_file(workdir: Path) -> Path:
    """The reference puzzle written to ``data/day05.txt`` under the work dir."""
    path = workdir / "data" / "day05.txt"
    path.parent.mkdir()
    path.write_text(EXAMPLE, encoding="utf-8")
    return path


@pytest.fixture
def settings(workdir: Path) -> AlmanacSettings:
    return AlmanacSettings.from_cli(root=workdir)

