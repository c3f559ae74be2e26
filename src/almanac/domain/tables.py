"""Category tables and the Almanac that orders them into a pipeline.

A CategoryTable is one pipeline stage. Rule order inside a table carries
no meaning, so rules are stored sorted by source start; that ordering is
what lets lookups bisect and lets interval splitting walk rules left to
right. Table order inside the Almanac is the pipeline order.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable
from dataclasses import dataclass, field

from almanac.domain.intervals import Interval, MappingRule
from almanac.domain.types import SeedMode

MAP_SUFFIX = " map:"


@dataclass(frozen=True, slots=True)
class CategoryTable:
    """An immutable set of mapping rules forming one stage."""

    name: str
    rules: tuple[MappingRule, ...] = ()
    _starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.rules, key=lambda rule: rule.source.start))
        object.__setattr__(self, "rules", ordered)
        object.__setattr__(self, "_starts", tuple(rule.source.start for rule in ordered))

    @classmethod
    def of(cls, name: str, triples: Iterable[tuple[int, int, int]]) -> CategoryTable:
        """Build a table from ``(dest, src, len)`` triples."""
        return cls(name, tuple(MappingRule.from_triple(*triple) for triple in triples))

    @property
    def source_category(self) -> str:
        return self.name.split("-to-", 1)[0]

    @property
    def destination_category(self) -> str:
        parts = self.name.split("-to-", 1)
        return parts[1] if len(parts) == 2 else self.name

    def rule_for(self, value: int) -> MappingRule | None:
        """The rule whose source contains *value*, if any."""
        index = bisect_right(self._starts, value) - 1
        if index >= 0 and value in self.rules[index].source:
            return self.rules[index]
        return None

    def lookup(self, value: int) -> int:
        """Translate *value* through this stage.

        Values outside every rule pass through unchanged.
        """
        rule = self.rule_for(value)
        if rule is None:
            return value
        return rule.translate(value)


@dataclass(frozen=True, slots=True)
class Almanac:
    """Ordered category tables plus the initial values to resolve.

    ``seeds`` is populated in identifier mode, ``seed_ranges`` in range mode.
    """

    tables: tuple[CategoryTable, ...]
    mode: SeedMode = SeedMode.IDS
    seeds: tuple[int, ...] = ()
    seed_ranges: tuple[Interval, ...] = ()

    @property
    def initial_count(self) -> int:
        return len(self.seeds) if self.mode is SeedMode.IDS else len(self.seed_ranges)

    @property
    def total_span(self) -> int:
        """Number of identifiers the initial record covers."""
        if self.mode is SeedMode.IDS:
            return len(self.seeds)
        return sum(interval.length for interval in self.seed_ranges)


    @property
    def categories(self) -> tuple[str, ...]:
        """Category names along the pipeline, starting with the initial record's.

        An almanac with no tables is still a single ``seed`` category.
        """
        if not self.tables:
            return ("seed",)
        first = self.tables[0].source_category
        return (first, *(table.destination_category for table in self.tables))
