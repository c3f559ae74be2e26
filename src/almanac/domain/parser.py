"""Parse almanac text into an :class:`~almanac.domain.tables.Almanac`.

Input layout::

    seeds: 79 14 55 13

    seed-to-soil map:
    50 98 2
    52 50 48

    soil-to-fertilizer map:
    ...

The seed mode is chosen by the caller. In ``ranges`` mode the values of
the first record are read as ``start length`` pairs. Every failure names
the 1-based line number and the expected shape.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from almanac.domain.errors import FormatError, ValidationError
from almanac.domain.intervals import Interval, MappingRule
from almanac.domain.tables import MAP_SUFFIX, Almanac, CategoryTable
from almanac.domain.types import SeedMode

SEEDS_LABEL = "seeds:"

_SEEDS_SHAPE = "'seeds: <int> <int> ...'"
_RANGES_SHAPE = "'seeds: <start> <length> <start> <length> ...'"
_HEADER_SHAPE = "'<name> map:'"
_RULE_SHAPE = "'<destination> <source> <length>'"


def parse_almanac(lines: Iterable[str], mode: SeedMode = SeedMode.IDS) -> Almanac:
    """Build an Almanac from ordered text lines.

    Raises:
        FormatError: a line does not have the expected shape.
        ValidationError: a line is well-formed but describes an empty range
            or an odd number of range values.
    """
    numbered = ((number, line.rstrip("\r\n")) for number, line in enumerate(lines, start=1))
    stream = _Lines(numbered)

    first = stream.next()
    if first is None:
        raise FormatError("missing initial record", line_number=1, expected=_seeds_shape(mode))
    seeds, seed_ranges = _parse_initial(first[0], first[1], mode)

    separator = stream.next()
    if separator is not None and separator[1].strip():
        raise FormatError(
            "initial record must be followed by a blank line",
            line_number=separator[0],
            line=separator[1],
            expected="an empty line",
        )

    tables: list[CategoryTable] = []
    while (header := stream.next_non_blank()) is not None:
        number, text = header
        name = _parse_header(number, text)
        rules: list[MappingRule] = []
        while (row := stream.next()) is not None and row[1].strip():
            rules.append(_parse_rule(*row))
        tables.append(CategoryTable(name, tuple(rules)))

    return Almanac(
        tables=tuple(tables),
        mode=mode,
        seeds=seeds,
        seed_ranges=seed_ranges,
    )


def parse_text(text: str, mode: SeedMode = SeedMode.IDS) -> Almanac:
    """Convenience wrapper over :func:`parse_almanac` for a whole document."""
    return parse_almanac(text.splitlines(), mode)


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------


class _Lines:
    """Single-pass line cursor over ``(number, text)`` pairs."""

    def __init__(self, numbered: Iterator[tuple[int, str]]) -> None:
        self._it = numbered

    def next(self) -> tuple[int, str] | None:
        return next(self._it, None)

    def next_non_blank(self) -> tuple[int, str] | None:
        for number, text in self._it:
            if text.strip():
                return number, text
        return None


def _seeds_shape(mode: SeedMode) -> str:
    return _RANGES_SHAPE if mode is SeedMode.RANGES else _SEEDS_SHAPE


def _is_digits(token: str) -> bool:
    return token.isascii() and token.isdigit()


def _to_int(token: str, number: int, line: str, expected: str) -> int:
    """Plain ASCII decimal digits only; ``int()`` alone would take ``1_000`` or ``+5``."""
    if _is_digits(token):
        return int(token)
    if token.startswith("-") and _is_digits(token[1:]):
        reason = f"{token!r} is negative"
    else:
        reason = f"{token!r} is not an integer"
    raise FormatError(reason, line_number=number, line=line, expected=expected)


def _parse_initial(
    number: int, line: str, mode: SeedMode
) -> tuple[tuple[int, ...], tuple[Interval, ...]]:
    shape = _seeds_shape(mode)
    tokens = line.split()
    if tokens and tokens[0] == SEEDS_LABEL:
        tokens = tokens[1:]
    if not tokens:
        raise FormatError("initial record is empty", line_number=number, line=line, expected=shape)
    values = [_to_int(token, number, line, shape) for token in tokens]

    if mode is SeedMode.IDS:
        return tuple(values), ()

    if len(values) % 2:
        raise ValidationError(
            f"range mode needs start/length pairs, got {len(values)} values",
            line_number=number,
            line=line,
            expected=shape,
        )
    ranges: list[Interval] = []
    for start, length in zip(values[::2], values[1::2], strict=True):
        if length == 0:
            raise ValidationError(
                f"seed range starting at {start} has zero length",
                line_number=number,
                line=line,
                expected=shape,
            )
        ranges.append(Interval(start, length))
    return (), tuple(ranges)


def _parse_header(number: int, line: str) -> str:
    text = line.rstrip()
    if not text.endswith(MAP_SUFFIX):
        raise FormatError(
            "stage header does not end with ' map:'",
            line_number=number,
            line=line,
            expected=_HEADER_SHAPE,
        )
    name = text[: -len(MAP_SUFFIX)].strip()
    if not name:
        raise FormatError(
            "stage header has no name", line_number=number, line=line, expected=_HEADER_SHAPE
        )
    return name


def _parse_rule(number: int, line: str) -> MappingRule:
    tokens = line.split()
    if len(tokens) != 3:
        raise FormatError(
            f"rule line has {len(tokens)} values",
            line_number=number,
            line=line,
            expected=_RULE_SHAPE,
        )
    destination, source, length = (_to_int(token, number, line, _RULE_SHAPE) for token in tokens)
    if length == 0:
        raise ValidationError(
            "rule has zero length", line_number=number, line=line, expected=_RULE_SHAPE
        )
    return MappingRule.from_triple(destination, source, length)
