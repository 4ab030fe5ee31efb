"""Tests for TransferOption, TransferPlan and TransferAnalysis models."""

import pytest
from pydantic import ValidationError

from libero_transfer_picker.domain.models.formation import Formation
from libero_transfer_picker.domain.models.player import Position
from libero_transfer_picker.domain.models.transfer_plan import (
    Lineup,
    PlanStatus,
    SelectionStrategy,
    TransferAnalysis,
    TransferOption,
    TransferPlan,
)


def make_option(out_id, in_id, gain=1, cost=0, position=Position.DEFENDER):
    return TransferOption(
        out_id=out_id,
        in_id=in_id,
        position=position,
        point_gain=gain,
        cost_delta=cost,
    )


def make_plan(transfers, budget_before=100, budget_cap=100):
    return TransferPlan(
        transfers=transfers,
        status=PlanStatus.IMPROVED if transfers else PlanStatus.NO_IMPROVEMENT,
        strategy=SelectionStrategy.GREEDY,
        budget_before=budget_before,
        budget_cap=budget_cap,
    )


class TestTransferOption:
    def test_option_is_hashable(self):
        """Test frozen options can be used in sets and as dict keys."""
        a = make_option("a", "b", gain=4, cost=-2)
        same = make_option("a", "b", gain=4, cost=-2)

        assert {a, same} == {a}
        assert a.key == ("a", "b")

    def test_self_swap_rejected(self):
        with pytest.raises(ValidationError):
            make_option("a", "a")

    def test_string_form(self):
        option = make_option("C", "D", gain=4, cost=-2_000_000, position=Position.FORWARD)

        assert str(option) == "C → D (FORWARD, +4 pts, -2000000)"


class TestTransferPlan:
    """Test plan invariants and derived values."""

    def test_repeated_out_rejected(self):
        with pytest.raises(ValidationError, match="out twice"):
            make_plan([make_option("a", "b"), make_option("a", "c")])

    def test_repeated_in_rejected(self):
        with pytest.raises(ValidationError, match="in twice"):
            make_plan([make_option("a", "c"), make_option("b", "c")])

    def test_out_and_in_overlap_rejected(self):
        with pytest.raises(ValidationError, match="both as outgoing and incoming"):
            make_plan([make_option("a", "b"), make_option("b", "c")])

    def test_totals_and_budget(self):
        plan = make_plan(
            [make_option("a", "b", gain=4, cost=2), make_option("c", "d", gain=3, cost=-5)],
            budget_before=18,
            budget_cap=20,
        )

        assert plan.num_transfers == 2
        assert plan.total_gain == 7
        assert plan.total_cost_delta == -3
        assert plan.budget_after == 15
        assert plan.within_budget is True
        assert plan.is_empty is False

    def test_empty_plan(self):
        plan = make_plan([], budget_before=18, budget_cap=20)

        assert plan.is_empty is True
        assert plan.total_gain == 0
        assert plan.budget_after == 18

    def test_apply_to_keeps_roster_order(self):
        plan = make_plan([make_option("c", "x")])

        assert plan.apply_to(["a", "c", "b"]) == ["a", "x", "b"]


class TestTransferAnalysis:
    def test_lineup_gain(self):
        formation = Formation.from_label("4-4-2")
        analysis = TransferAnalysis(
            plan=make_plan([]),
            lineup_before=Lineup(formation=formation, score=40),
            lineup_after=Lineup(formation=formation, score=47),
            reference_lineup=Lineup(score=35),
        )

        assert analysis.lineup_gain == 7
        assert analysis.lineup_before.formation_label == "4-4-2"
        assert analysis.reference_lineup.formation_label == "-"
