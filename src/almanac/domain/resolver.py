"""Resolve identifiers and intervals through an ordered pipeline of tables.

Every function here is pure: tables and intervals are immutable, and each
call builds new values. Results for one seed never depend on another, so
callers may fan seeds out over workers and combine with
:func:`fold_minimum`.

Two range strategies are provided and must agree:

- :func:`lowest_by_splitting` cuts each interval at rule boundaries and
  shifts whole pieces. Cost depends on the number of rules, not on the
  number of integers covered.
- :func:`lowest_by_enumeration` resolves every integer one by one. Only
  usable on small inputs; kept as the correctness oracle.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator, Sequence
from functools import reduce

from almanac.domain.errors import ValidationError
from almanac.domain.intervals import Interval, MappingRule
from almanac.domain.tables import CategoryTable

# ---------------------------------------------------------------------------
# Reduction
# ---------------------------------------------------------------------------


def fold_minimum(values: Iterable[int]) -> int:
    """Minimum of *values* as an explicit accumulator fold.

    Raises:
        ValidationError: *values* is empty.
    """
    it = iter(values)
    first = next(it, None)
    if first is None:
        raise ValidationError("nothing to resolve", expected="at least one seed")
    return reduce(min, it, first)


# ---------------------------------------------------------------------------
# Identifier mode
# ---------------------------------------------------------------------------


def resolve(value: int, tables: Sequence[CategoryTable]) -> int:
    """Translate *value* through every table in pipeline order."""
    return reduce(lambda current, table: table.lookup(current), tables, value)


def trace(value: int, tables: Sequence[CategoryTable]) -> list[int]:
    """Every intermediate value from the seed through to the final location."""
    path = [value]
    for table in tables:
        path.append(table.lookup(path[-1]))
    return path


def lowest_location(seeds: Iterable[int], tables: Sequence[CategoryTable]) -> int:
    """Smallest resolved value over all *seeds*."""
    return fold_minimum(resolve(seed, tables) for seed in seeds)


# ---------------------------------------------------------------------------
# Range mode: interval splitting
# ---------------------------------------------------------------------------


def split_interval(
    interval: Interval, table: CategoryTable
) -> list[tuple[Interval, MappingRule | None]]:
    """Partition *interval* into maximal pieces each covered by at most one rule.

    Pieces are returned in ascending order, touch end to end, and their
    lengths sum to ``interval.length``. Pieces outside every rule are
    paired with None.
    """
    pieces: list[tuple[Interval, MappingRule | None]] = []
    cursor = interval.start
    for rule in table.rules:
        if rule.source.start >= interval.end:
            break
        if rule.source.end <= cursor:
            continue
        if rule.source.start > cursor:
            pieces.append((Interval.from_bounds(cursor, rule.source.start), None))
            cursor = rule.source.start
        end = min(rule.source.end, interval.end)
        pieces.append((Interval.from_bounds(cursor, end), rule))
        cursor = end
    if cursor < interval.end:
        pieces.append((Interval.from_bounds(cursor, interval.end), None))
    return pieces


def translate_interval(interval: Interval, table: CategoryTable) -> list[Interval]:
    """Map *interval* through one table; unmatched pieces pass through unchanged."""
    return [
        piece if rule is None else piece.shift(rule.offset)
        for piece, rule in split_interval(interval, table)
    ]


def stage_pieces(
    interval: Interval, tables: Sequence[CategoryTable]
) -> Iterator[list[Interval]]:
    """The collection *interval* has become after each stage, in pipeline order.

    Pieces are neither merged nor deduplicated between stages.
    """
    current = [interval]
    for table in tables:
        current = [out for piece in current for out in translate_interval(piece, table)]
        yield current


def resolve_interval(interval: Interval, tables: Sequence[CategoryTable]) -> list[Interval]:
    """All intervals *interval* becomes after the last stage."""
    last = deque(stage_pieces(interval, tables), maxlen=1)
    return last[0] if last else [interval]


def lowest_by_splitting(intervals: Iterable[Interval], tables: Sequence[CategoryTable]) -> int:
    return fold_minimum(
        piece.start for interval in intervals for piece in resolve_interval(interval, tables)
    )


# ---------------------------------------------------------------------------
# Range mode: enumeration
# ---------------------------------------------------------------------------


def enumerate_interval(interval: Interval, tables: Sequence[CategoryTable]) -> Iterable[int]:
    """Resolved value of every integer in *interval*, in order."""
    return (resolve(value, tables) for value in interval)


def lowest_by_enumeration(intervals: Iterable[Interval], tables: Sequence[CategoryTable]) -> int:
    return fold_minimum(
        value for interval in intervals for value in enumerate_interval(interval, tables)
    )
