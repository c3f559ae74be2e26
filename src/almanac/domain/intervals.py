"""Half-open integer intervals and the mapping rules built on them.

INVARIANT: an Interval is never empty. ``length > 0`` is checked at
construction, so every Interval flowing through the resolver is valid.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from almanac.domain.errors import ValidationError


@dataclass(frozen=True, slots=True)
class Interval:
    """The integers ``[start, start + length)``."""

    start: int
    length: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValidationError(f"interval start must be non-negative, got {self.start}")
        if self.length <= 0:
            raise ValidationError(
                f"interval length must be positive, got {self.length}",
                expected="a length greater than zero",
            )

    @classmethod
    def from_bounds(cls, start: int, end: int) -> Interval:
        """Build ``[start, end)``; ``end`` must be greater than ``start``."""
        return cls(start, end - start)

    @property
    def end(self) -> int:
        """Exclusive upper bound."""
        return self.start + self.length

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.start <= value < self.end

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end))

    def shift(self, offset: int) -> Interval:
        return Interval(self.start + offset, self.length)


@dataclass(frozen=True, slots=True)
class MappingRule:
    """Redirects ``source`` onto ``[destination_start, destination_start + len)``."""

    source: Interval
    destination_start: int

    @classmethod
    def from_triple(cls, destination_start: int, source_start: int, length: int) -> MappingRule:
        """Build a rule from the ``dest src len`` order used in rule lines."""
        return cls(Interval(source_start, length), destination_start)

    @property
    def offset(self) -> int:
        return self.destination_start - self.source.start

    def translate(self, value: int) -> int:
        """Translate a value the caller already knows is inside ``source``."""
        return value + self.offset
