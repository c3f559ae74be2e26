"""Tests for identifier and range resolution."""

from __future__ import annotations

import random

import pytest

from almanac.domain.errors import ValidationError
from almanac.domain.intervals import Interval
from almanac.domain.resolver import (
    fold_minimum,
    lowest_by_enumeration,
    lowest_by_splitting,
    lowest_location,
    resolve,
    resolve_interval,
    split_interval,
    stage_pieces,
    trace,
    translate_interval,
)
from almanac.domain.tables import Almanac, CategoryTable


def _random_table(rng: random.Random, name: str, *, span: int = 120) -> CategoryTable:
    """Disjoint rules scattered over ``[0, span)`` with random destinations."""
    cuts = sorted(rng.sample(range(1, span), rng.randint(0, 8)))
    bounds = [0, *cuts, span]
    triples = []
    for start, end in zip(bounds, bounds[1:], strict=False):
        if rng.random() < 0.6:
            triples.append((rng.randint(0, span), start, end - start))
    return CategoryTable.of(name, triples)


def _random_pipeline(rng: random.Random) -> list[CategoryTable]:
    return [_random_table(rng, f"s{i}-to-s{i + 1}") for i in range(rng.randint(0, 5))]


# ── fold_minimum ──────────────────────────────────────────────────────


class TestFoldMinimum:
    def test_minimum(self) -> None:
        assert fold_minimum([5, 3, 9]) == 3

    def test_accepts_generators(self) -> None:
        assert fold_minimum(x * 2 for x in (4, 1, 7)) == 2

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValidationError, match="nothing to resolve"):
            fold_minimum([])

    def test_large_input_does_not_recurse(self) -> None:
        assert fold_minimum(range(500_000, 0, -1)) == 1


# ── Identifier mode ───────────────────────────────────────────────────


class TestResolve:
    @pytest.mark.parametrize("value", [0, 1, 97, 10**12])
    def test_empty_pipeline_is_identity(self, value: int) -> None:
        assert resolve(value, []) == value

    def test_identity_fallback_composes_across_stages(self) -> None:
        tables = [
            CategoryTable.of("a-to-b", [(0, 10, 5)]),
            CategoryTable.of("b-to-c", [(100, 50, 5)]),
        ]
        for value in (0, 9, 15, 49, 55, 1000):
            assert resolve(value, tables) == value

    def test_single_rule(self) -> None:
        d, s, length = 500, 20, 10
        tables = [CategoryTable.of("a-to-b", [(d, s, length)])]
        for value in range(s, s + length):
            assert resolve(value, tables) == value - s + d
        for value in (s - 1, s + length, 0, 1000):
            assert resolve(value, tables) == value

    def test_stages_apply_in_order(self) -> None:
        first = CategoryTable.of("a-to-b", [(10, 0, 1)])
        second = CategoryTable.of("b-to-c", [(20, 10, 1)])
        assert resolve(0, [first, second]) == 20
        assert resolve(0, [second, first]) == 10

    @pytest.mark.parametrize(
        ("seed", "location"), [(79, 82), (14, 43), (55, 86), (13, 35)]
    )
    def test_example_seeds(self, example_ids: Almanac, seed: int, location: int) -> None:
        assert resolve(seed, example_ids.tables) == location

    def test_example_lowest(self, example_ids: Almanac) -> None:
        assert lowest_location(example_ids.seeds, example_ids.tables) == 35


class TestTrace:
    def test_example_path(self, example_ids: Almanac) -> None:
        assert trace(79, example_ids.tables) == [79, 81, 81, 81, 74, 78, 78, 82]

    def test_empty_pipeline(self) -> None:
        assert trace(5, []) == [5]

    def test_ends_at_resolved_value(self, example_ids: Almanac) -> None:
        for seed in example_ids.seeds:
            assert trace(seed, example_ids.tables)[-1] == resolve(seed, example_ids.tables)


# ── Range mode ────────────────────────────────────────────────────────


class TestSplitInterval:
    def test_no_rules_passes_through_whole(self) -> None:
        interval = Interval(5, 10)
        assert split_interval(interval, CategoryTable("a-to-b")) == [(interval, None)]

    def test_disjoint_rule_passes_through_whole(self) -> None:
        table = CategoryTable.of("a-to-b", [(0, 100, 5)])
        assert translate_interval(Interval(5, 10), table) == [Interval(5, 10)]

    def test_straddling_rule_boundary(self) -> None:
        table = CategoryTable.of("a-to-b", [(100, 10, 5)])
        pieces = split_interval(Interval(8, 10), table)
        assert [piece for piece, _ in pieces] == [
            Interval(8, 2),
            Interval(10, 5),
            Interval(15, 3),
        ]
        assert [rule is not None for _, rule in pieces] == [False, True, False]
        assert translate_interval(Interval(8, 10), table) == [
            Interval(8, 2),
            Interval(100, 5),
            Interval(15, 3),
        ]

    def test_inside_single_rule(self) -> None:
        table = CategoryTable.of("a-to-b", [(0, 10, 100)])
        assert translate_interval(Interval(20, 5), table) == [Interval(10, 5)]

    def test_adjacent_rules(self) -> None:
        table = CategoryTable.of("a-to-b", [(50, 0, 5), (60, 5, 5)])
        assert translate_interval(Interval(3, 4), table) == [Interval(53, 2), Interval(60, 2)]

    def test_coverage_is_conserved(self) -> None:
        rng = random.Random(1205)
        for _ in range(300):
            table = _random_table(rng, "a-to-b")
            start = rng.randint(0, 130)
            interval = Interval(start, rng.randint(1, 60))
            pieces = [piece for piece, _ in split_interval(interval, table)]
            assert sum(piece.length for piece in pieces) == interval.length
            assert pieces[0].start == interval.start
            assert pieces[-1].end == interval.end
            for left, right in zip(pieces, pieces[1:], strict=False):
                assert left.end == right.start

    def test_each_piece_within_one_rule(self) -> None:
        rng = random.Random(77)
        for _ in range(200):
            table = _random_table(rng, "a-to-b")
            interval = Interval(rng.randint(0, 100), rng.randint(1, 40))
            for piece, rule in split_interval(interval, table):
                for value in piece:
                    assert table.rule_for(value) == rule

    def test_billions_wide_interval(self) -> None:
        table = CategoryTable.of("a-to-b", [(0, 1_000_000_000, 10)])
        pieces = translate_interval(Interval(0, 4_000_000_000), table)
        assert len(pieces) == 3
        assert sum(piece.length for piece in pieces) == 4_000_000_000
        assert min(piece.start for piece in pieces) == 0


class TestResolveInterval:
    def test_empty_pipeline(self) -> None:
        assert resolve_interval(Interval(3, 4), []) == [Interval(3, 4)]

    def test_total_length_preserved_across_stages(self, example_ranges: Almanac) -> None:
        for interval in example_ranges.seed_ranges:
            resolved = resolve_interval(interval, example_ranges.tables)
            assert sum(piece.length for piece in resolved) == interval.length

    def test_pieces_are_not_merged(self) -> None:
        table = CategoryTable.of("a-to-b", [(5, 0, 5), (0, 5, 5)])
        assert resolve_interval(Interval(0, 10), [table]) == [Interval(5, 5), Interval(0, 5)]

    def test_stage_pieces_one_collection_per_stage(self, example_ranges: Almanac) -> None:
        tables = example_ranges.tables
        for interval in example_ranges.seed_ranges:
            stages = list(stage_pieces(interval, tables))
            assert len(stages) == len(tables)
            assert stages[-1] == resolve_interval(interval, tables)
            for pieces in stages:
                assert sum(piece.length for piece in pieces) == interval.length

    def test_stage_pieces_without_tables(self) -> None:
        assert list(stage_pieces(Interval(3, 4), [])) == []


class TestRangeStrategies:
    def test_example_split(self, example_ranges: Almanac) -> None:
        assert lowest_by_splitting(example_ranges.seed_ranges, example_ranges.tables) == 46

    def test_example_enumerate(self, example_ranges: Almanac) -> None:
        assert lowest_by_enumeration(example_ranges.seed_ranges, example_ranges.tables) == 46

    def test_strategies_agree_on_random_pipelines(self) -> None:
        rng = random.Random(2023)
        for _ in range(150):
            tables = _random_pipeline(rng)
            intervals = [
                Interval(rng.randint(0, 150), rng.randint(1, 30))
                for _ in range(rng.randint(1, 3))
            ]
            assert lowest_by_splitting(intervals, tables) == lowest_by_enumeration(
                intervals, tables
            )

    def test_split_matches_identifier_resolution(self) -> None:
        rng = random.Random(5)
        for _ in range(100):
            tables = _random_pipeline(rng)
            interval = Interval(rng.randint(0, 150), rng.randint(1, 25))
            resolved = {
                value for piece in resolve_interval(interval, tables) for value in piece
            }
            assert resolved == {resolve(value, tables) for value in interval}

    def test_split_scales_to_billions(self) -> None:
        tables = [
            CategoryTable.of("a-to-b", [(7, 3_000_000_000, 1_000_000_000)]),
            CategoryTable.of("b-to-c", [(4_000_000_000, 0, 10)]),
        ]
        intervals = [Interval(2_000_000_000, 2_500_000_000)]
        assert lowest_by_splitting(intervals, tables) == 10
