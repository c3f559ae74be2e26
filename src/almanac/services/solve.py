"""SolveService: read an almanac file and answer questions about it.

Operations:
- ``lowest``: minimum location over all seeds (ids or ranges mode).
- ``trace``: every intermediate value for one seed.
- ``verify``: run both range strategies and check they agree.

Domain errors stop here: they are turned into a failed ServiceResult
carrying the offending line. Nothing else in the CLI catches them.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from almanac.domain.errors import AlmanacError, FormatError
from almanac.domain.parser import parse_almanac
from almanac.domain.resolver import (
    fold_minimum,
    lowest_by_enumeration,
    lowest_by_splitting,
    resolve,
    stage_pieces,
    trace as trace_values,
)
from almanac.domain.types import SeedMode, Strategy
from almanac.services.result import ServiceResult
from almanac.services.telemetry import get_current_span, trace_span, traced

if TYPE_CHECKING:
    from almanac.config.settings import AlmanacSettings
    from almanac.domain.intervals import Interval
    from almanac.domain.tables import Almanac, CategoryTable

logger = structlog.get_logger(__name__)


class _Failed(Exception):
    """Internal short-circuit carrying a failed ServiceResult."""

    def __init__(self, result: ServiceResult) -> None:
        super().__init__(result.error.message if result.error else result.op)
        self.result = result


class SolveService:
    """Answers almanac questions for a single input file."""

    def __init__(self, settings: AlmanacSettings) -> None:
        self._settings = settings

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @traced
    def lowest(
        self,
        path: Path | None = None,
        *,
        mode: SeedMode | None = None,
        strategy: Strategy | None = None,
        workers: int | None = None,
    ) -> ServiceResult:
        """Lowest location reachable from the initial record."""
        op = "lowest"
        cfg = self._settings.resolver
        mode = SeedMode(mode or cfg.mode)
        strategy = Strategy(strategy or cfg.strategy)
        workers = workers or cfg.workers

        try:
            almanac = self._load(op, path, mode)
            if mode is SeedMode.RANGES and strategy is Strategy.ENUMERATE:
                self._check_enumerable(op, almanac)
            with trace_span("resolve") as span:
                answer = self._resolve_lowest(almanac, strategy, workers)
                if span is not None:
                    span.annotate("initial_count", almanac.initial_count)
                    if mode is SeedMode.RANGES and strategy is Strategy.SPLIT:
                        span.annotate("pieces", _piece_counts(almanac))
        except _Failed as failed:
            return failed.result
        except AlmanacError as exc:
            return self._domain_failure(op, exc)

        data: dict[str, Any] = {
            "answer": answer,
            "mode": mode.value,
            "strategy": strategy.value if mode is SeedMode.RANGES else "lookup",
            "stages": len(almanac.tables),
            "initial_count": almanac.initial_count,
        }
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def trace(self, seed: int, path: Path | None = None) -> ServiceResult:
        """Value of *seed* after each stage, ending with its location."""
        op = "trace"
        try:
            almanac = self._load(op, path, SeedMode.IDS)
        except _Failed as failed:
            return failed.result
        except AlmanacError as exc:
            return self._domain_failure(op, exc)

        values = trace_values(seed, almanac.tables)
        stages = almanac.categories
        steps = [
            {"stage": stage, "value": value} for stage, value in zip(stages, values, strict=True)
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"seed": seed, "location": values[-1], "path": steps},
        )

    @traced
    def verify(self, path: Path | None = None) -> ServiceResult:
        """Resolve range mode with both strategies and compare."""
        op = "verify"
        try:
            almanac = self._load(op, path, SeedMode.RANGES)
            self._check_enumerable(op, almanac)
            with trace_span("split") as span:
                split = lowest_by_splitting(almanac.seed_ranges, almanac.tables)
                if span is not None:
                    span.annotate("pieces", _piece_counts(almanac))
            with trace_span("enumerate"):
                enumerated = lowest_by_enumeration(almanac.seed_ranges, almanac.tables)
        except _Failed as failed:
            return failed.result
        except AlmanacError as exc:
            return self._domain_failure(op, exc)

        if split != enumerated:
            return ServiceResult.failure(
                op,
                "STRATEGY_MISMATCH",
                f"interval splitting found {split} but enumeration found {enumerated}",
                {"split": split, "enumerate": enumerated},
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"answer": split, "split": split, "enumerate": enumerated},
        )

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load(self, op: str, path: Path | None, mode: SeedMode) -> Almanac:
        source = self._settings.input_path(path)
        try:
            raw = source.read_bytes()
        except OSError as exc:
            raise _Failed(
                ServiceResult.failure(
                    op,
                    "INPUT_UNREADABLE",
                    f"cannot read {source}: {exc.strerror or exc}",
                    {"path": str(source)},
                )
            ) from exc

        text = _decode(raw)
        with trace_span("parse") as span:
            almanac = parse_almanac(text.splitlines(), mode)
            if span is not None:
                span.annotate("stages", len(almanac.tables))
        logger.debug(
            "almanac.parsed",
            path=str(source),
            mode=mode.value,
            stages=len(almanac.tables),
            initial_count=almanac.initial_count,
        )
        return almanac

    @staticmethod
    def _domain_failure(op: str, exc: AlmanacError) -> ServiceResult:
        logger.debug("almanac.rejected", op=op, code=exc.code, reason=exc.reason)
        return ServiceResult.failure(op, exc.code, str(exc), exc.to_detail())

    def _check_enumerable(self, op: str, almanac: Almanac) -> None:
        limit = self._settings.resolver.enumerate_limit
        if almanac.total_span > limit:
            raise _Failed(
                ServiceResult.failure(
                    op,
                    "ENUMERATION_TOO_LARGE",
                    f"seed ranges cover {almanac.total_span} values; "
                    f"enumeration is limited to {limit}",
                    {"total_span": almanac.total_span, "limit": limit},
                )
            )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _resolve_lowest(self, almanac: Almanac, strategy: Strategy, workers: int) -> int:
        """Minimum over the initial record, optionally fanned out over threads.

        Workers share the immutable almanac and each returns its own
        minimum, so completion order is irrelevant.
        """
        solve: Callable[[Any], int]
        items: Sequence[Any]
        if almanac.mode is SeedMode.IDS:
            solve = partial(resolve, tables=almanac.tables)
            items = almanac.seeds
        else:
            solve = partial(_lowest_for_range, tables=almanac.tables, strategy=strategy)
            items = almanac.seed_ranges

        if workers <= 1:
            return fold_minimum(map(solve, items))

        span = get_current_span()
        if span is not None:
            span.annotate("workers", workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return fold_minimum(executor.map(solve, items))


def _lowest_for_range(
    interval: Interval, tables: tuple[CategoryTable, ...], strategy: Strategy
) -> int:
    started = time.perf_counter()
    if strategy is Strategy.ENUMERATE:
        answer = lowest_by_enumeration([interval], tables)
    else:
        answer = lowest_by_splitting([interval], tables)
    logger.debug(
        "range.resolved",
        start=interval.start,
        length=interval.length,
        strategy=strategy.value,
        lowest=answer,
        elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return answer


def _decode(raw: bytes) -> str:
    """UTF-8 text of *raw*; an undecodable byte is reported on its line."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(
            f"byte 0x{raw[exc.start]:02x} at offset {exc.start} is not valid UTF-8",
            line_number=raw.count(b"\n", 0, exc.start) + 1,
            expected="UTF-8 text",
        ) from None


def _piece_counts(almanac: Almanac) -> dict[str, int]:
    """Intervals alive after each stage, summed over every seed range."""
    counts = dict.fromkeys(almanac.categories[1:], 0)
    for interval in almanac.seed_ranges:
        for table, pieces in zip(
            almanac.tables, stage_pieces(interval, almanac.tables), strict=True
        ):
            counts[table.destination_category] += len(pieces)
    return counts
