"""Tests for display utilities and the logging report sink."""

import pytest
from loguru import logger

from libero_transfer_picker.domain.models.player import PlayerDomain, Position
from libero_transfer_picker.domain.models.transfer_plan import (
    Lineup,
    PlanStatus,
    SelectionStrategy,
    TransferAnalysis,
    TransferOption,
    TransferPlan,
)
from libero_transfer_picker.interfaces.display_utils import (
    PLAN_COLUMNS,
    LoggingReportSink,
    format_money,
    plan_to_dataframe,
)

M = 1_000_000


@pytest.fixture
def log_messages():
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def players():
    return {
        "C": PlayerDomain(player_id="C", display_name="Müller", position=Position.FORWARD, market_value=8 * M),
        "D": PlayerDomain(player_id="D", position=Position.FORWARD, market_value=6 * M),
    }


def make_plan(status, transfers=(), reason=None):
    return TransferPlan(
        transfers=list(transfers),
        status=status,
        strategy=SelectionStrategy.GREEDY,
        reason=reason,
        budget_before=18 * M,
        budget_cap=20 * M,
    )


def make_analysis(plan):
    return TransferAnalysis(
        plan=plan,
        roster_before=["A", "C"],
        roster_after=plan.apply_to(["A", "C"]),
        lineup_before=Lineup(score=10),
        lineup_after=Lineup(score=14),
        reference_lineup=Lineup(score=8),
    )


@pytest.fixture
def swap():
    return TransferOption(
        out_id="C", in_id="D", position=Position.FORWARD, point_gain=4, cost_delta=-2 * M
    )


class TestPlanToDataFrame:
    def test_rows_and_names(self, swap, players):
        df = plan_to_dataframe(make_plan(PlanStatus.IMPROVED, [swap]), players)

        assert list(df.columns) == PLAN_COLUMNS
        row = df.iloc[0]
        assert row["out_name"] == "Müller"
        # No display name falls back to the ID
        assert row["in_name"] == "D"
        assert row["position"] == "FORWARD"
        assert row["cost_delta"] == -2 * M

    def test_empty_plan(self):
        df = plan_to_dataframe(make_plan(PlanStatus.NO_IMPROVEMENT, reason="no improving candidate"))

        assert df.empty
        assert list(df.columns) == PLAN_COLUMNS


class TestLoggingReportSink:
    def test_improved(self, swap, players, log_messages):
        sink = LoggingReportSink(players)

        sink.publish(make_analysis(make_plan(PlanStatus.IMPROVED, [swap])))

        text = "\n".join(log_messages)
        assert "1 transfers via greedy" in text
        assert "Müller" in text
        assert "18.0M → 16.0M" in text
        assert "Lineup 10 → 14 pts" in text

    def test_names_from_analysis_metadata(self, swap, players, log_messages):
        analysis = make_analysis(make_plan(PlanStatus.IMPROVED, [swap])).model_copy(
            update={"players": players}
        )

        LoggingReportSink().publish(analysis)

        assert "Müller" in "\n".join(log_messages)

    @pytest.mark.parametrize(
        "status, expected",
        [
            (PlanStatus.NO_IMPROVEMENT, "No transfer recommended"),
            (PlanStatus.INFEASIBLE, "Constraints cannot be satisfied"),
            (PlanStatus.TIMED_OUT, "Optimizer timed out"),
        ],
    )
    def test_status_messages_differ(self, status, expected, log_messages):
        LoggingReportSink().publish(make_analysis(make_plan(status, reason="why")))

        assert any(expected in m for m in log_messages)


def test_format_money():
    assert format_money(42_000_000) == "42.0M"
    assert format_money(1_500_000) == "1.5M"
