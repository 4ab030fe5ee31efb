"""Tests for BruteForceTransferSelector and the partition search."""

import itertools
from types import SimpleNamespace

import pytest

from libero_transfer_picker.domain.models.player import PlayerDomain, Position
from libero_transfer_picker.domain.models.transfer_plan import (
    PlanStatus,
    SelectionStrategy,
    TransferOption,
)
from libero_transfer_picker.domain.services.optimization import transfer_bruteforce
from libero_transfer_picker.domain.services.optimization.optimization_base import (
    TIMEOUT_REASON,
    ZERO_LIMIT_REASON,
)
from libero_transfer_picker.domain.services.optimization.transfer_bruteforce import (
    BruteForceTransferSelector,
    search_partition,
)
from libero_transfer_picker.domain.services.optimization.transfer_greedy import (
    GreedyTransferSelector,
)

M = 1_000_000


def player(pid, position, value):
    return PlayerDomain(player_id=pid, position=position, market_value=value)


def option(out_id, in_id, gain, cost, position):
    return TransferOption(
        out_id=out_id, in_id=in_id, position=position, point_gain=gain, cost_delta=cost
    )


@pytest.fixture
def players():
    return [
        player("A", Position.DEFENDER, 10 * M),
        player("C", Position.FORWARD, 8 * M),
        player("E", Position.MIDFIELDER, 6 * M),
        player("B", Position.DEFENDER, 12 * M),
        player("D", Position.FORWARD, 9 * M),
        player("F", Position.MIDFIELDER, 7 * M),
        player("G", Position.DEFENDER, 10 * M),
    ]


@pytest.fixture
def roster():
    return ["A", "C", "E"]


@pytest.fixture
def options():
    return [
        option("A", "B", 5, 2 * M, Position.DEFENDER),
        option("C", "D", 3, 1 * M, Position.FORWARD),
        option("E", "F", 3, 1 * M, Position.MIDFIELDER),
    ]


class TestBruteForceSelection:
    def test_beats_greedy_on_budget_coupling(self, players, options, roster):
        """Greedy grabs A→B and blocks the better C→D + E→F pair."""
        greedy = GreedyTransferSelector(players).select(
            options, roster, budget_cap=26 * M, max_transfers=3
        )
        exact = BruteForceTransferSelector(players).select(
            options, roster, budget_cap=26 * M, max_transfers=3
        )

        assert greedy.total_gain == 5
        assert exact.total_gain == 6
        assert {t.key for t in exact.transfers} == {("C", "D"), ("E", "F")}
        assert exact.budget_after == 26 * M
        assert exact.is_optimal is True
        assert exact.strategy == SelectionStrategy.BRUTE_FORCE
        assert exact.status == PlanStatus.IMPROVED

    def test_smaller_subsets_considered(self, players, options, roster):
        plan = BruteForceTransferSelector(players).select(
            options, roster, budget_cap=25 * M, max_transfers=3
        )

        # Only one 1M upgrade fits; C→D wins the tie on IDs
        assert [t.key for t in plan.transfers] == [("C", "D")]

    def test_tie_prefers_lower_cost(self, players, roster):
        tied = [
            option("A", "B", 4, 2 * M, Position.DEFENDER),
            option("A", "G", 4, 0, Position.DEFENDER),
        ]

        plan = BruteForceTransferSelector(players).select(
            tied, roster, budget_cap=100 * M, max_transfers=1
        )

        assert [t.key for t in plan.transfers] == [("A", "G")]

    def test_tie_prefers_fewer_transfers(self, players, roster):
        # {A→B} and {C→D, E→F} both gain 6 for 2M
        tied = [
            option("A", "B", 6, 2 * M, Position.DEFENDER),
            option("C", "D", 3, 1 * M, Position.FORWARD),
            option("E", "F", 3, 1 * M, Position.MIDFIELDER),
        ]

        plan = BruteForceTransferSelector(players).select(
            tied, roster, budget_cap=26 * M, max_transfers=3
        )

        assert [t.key for t in plan.transfers] == [("A", "B")]

    def test_uniqueness_respected(self, players, roster):
        clashing = [
            option("A", "B", 5, 0, Position.DEFENDER),
            option("A", "G", 5, 0, Position.DEFENDER),
        ]

        plan = BruteForceTransferSelector(players).select(
            clashing, roster, budget_cap=100 * M, max_transfers=2
        )

        assert plan.num_transfers == 1

    def test_per_position_cap(self, players, options, roster):
        plan = BruteForceTransferSelector(players).select(
            options,
            roster,
            budget_cap=100 * M,
            max_transfers=3,
            per_position_cap={Position.FORWARD: 0},
        )

        assert {t.key for t in plan.transfers} == {("A", "B"), ("E", "F")}

    def test_duplicate_options_deduplicated(self, players, options, roster):
        plan = BruteForceTransferSelector(players).select(
            options + options, roster, budget_cap=100 * M, max_transfers=3
        )

        assert plan.num_transfers == 3
        assert plan.total_gain == 11

    def test_zero_k(self, players, options, roster):
        plan = BruteForceTransferSelector(players).select(
            options, roster, budget_cap=100 * M, max_transfers=0
        )

        assert plan.is_empty
        assert plan.reason == ZERO_LIMIT_REASON

    def test_negative_k_rejected(self, players, options, roster):
        with pytest.raises(ValueError):
            BruteForceTransferSelector(players).select(
                options, roster, budget_cap=100 * M, max_transfers=-2
            )


class TestExhaustiveAgainstEnumeration:
    """Compare against a direct itertools enumeration."""

    @pytest.fixture
    def market(self):
        roster = [player(f"r{i}", Position.MIDFIELDER, (5 + i) * M) for i in range(4)]
        outside = [player(f"o{i}", Position.MIDFIELDER, (4 + 2 * i) * M) for i in range(5)]
        return roster, outside

    def test_matches_enumeration(self, market):
        roster, outside = market
        options = [
            option(r.player_id, o.player_id, 1 + (i * 3 + j * 5) % 7, o.market_value - r.market_value, Position.MIDFIELDER)
            for i, r in enumerate(roster)
            for j, o in enumerate(outside)
        ]
        roster_ids = [p.player_id for p in roster]
        budget_before = sum(p.market_value for p in roster)
        cap = budget_before + 3 * M

        best_gain = 0
        for size in range(1, 4):
            for combo in itertools.combinations(options, size):
                outs = {c.out_id for c in combo}
                ins = {c.in_id for c in combo}
                if len(outs) < size or len(ins) < size:
                    continue
                if budget_before + sum(c.cost_delta for c in combo) > cap:
                    continue
                best_gain = max(best_gain, sum(c.point_gain for c in combo))

        plan = BruteForceTransferSelector(roster + outside).select(
            options, roster_ids, budget_cap=cap, max_transfers=3
        )

        assert plan.total_gain == best_gain
        assert plan.within_budget


class TestParallelSearch:
    def test_parallel_matches_sequential(self, players, options, roster):
        sequential = BruteForceTransferSelector(players, workers=1).select(
            options, roster, budget_cap=26 * M, max_transfers=3
        )
        parallel = BruteForceTransferSelector(players, workers=2).select(
            options, roster, budget_cap=26 * M, max_transfers=3
        )

        assert [t.key for t in parallel.transfers] == [t.key for t in sequential.transfers]
        assert parallel.is_optimal is True


class TestDeadline:
    def test_expired_deadline_returns_timed_out(self, players, options, roster, monkeypatch):
        clock = itertools.count(start=0, step=100)
        monkeypatch.setattr(
            transfer_bruteforce, "time", SimpleNamespace(time=lambda: next(clock))
        )

        plan = BruteForceTransferSelector(players, time_limit_seconds=1).select(
            options, roster, budget_cap=26 * M, max_transfers=3
        )

        assert plan.status == PlanStatus.TIMED_OUT
        assert plan.reason == TIMEOUT_REASON
        assert plan.is_optimal is False
        assert plan.within_budget


class TestSearchPartition:
    def test_partition_returns_best_subset_starting_at_first(self):
        items = [
            ("a", "x", "DEFENDER", 5, 2),
            ("b", "y", "FORWARD", 3, 1),
            ("c", "z", "MIDFIELDER", 3, 1),
        ]

        key, chosen, timed_out = search_partition(1, items, 0, 2, 3, {})

        assert chosen == (1, 2)
        assert key[0] == -6
        assert timed_out is False

    def test_partition_respects_position_cap_of_first(self):
        items = [("a", "x", "DEFENDER", 5, 0)]

        key, chosen, _ = search_partition(0, items, 0, 10, 1, {"DEFENDER": 0})

        assert key is None
        assert chosen == ()
