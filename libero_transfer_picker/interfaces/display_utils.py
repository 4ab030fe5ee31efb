"""
Display utilities for the presentation layer.

Helpers for turning transfer plans into tables and publishing finished
analyses to the log.
"""

from typing import Mapping, Optional

import pandas as pd
from loguru import logger

from libero_transfer_picker.domain.models.player import PlayerDomain
from libero_transfer_picker.domain.models.transfer_plan import (
    PlanStatus,
    TransferAnalysis,
    TransferPlan,
)
from libero_transfer_picker.domain.repositories.player_repository import ReportSink

PLAN_COLUMNS = [
    "out_id",
    "out_name",
    "in_id",
    "in_name",
    "position",
    "point_gain",
    "cost_delta",
]


def plan_to_dataframe(
    plan: TransferPlan, players: Optional[Mapping[str, PlayerDomain]] = None
) -> pd.DataFrame:
    """
    Tabulate a plan, one row per transfer.

    Args:
        plan: Transfer plan to display
        players: Optional metadata used to resolve display names

    Returns:
        DataFrame with PLAN_COLUMNS (empty with those columns for an empty plan)
    """
    players = players or {}

    def name_of(player_id: str) -> str:
        player = players.get(player_id)
        return player.display_name if player is not None and player.display_name else player_id

    rows = [
        {
            "out_id": t.out_id,
            "out_name": name_of(t.out_id),
            "in_id": t.in_id,
            "in_name": name_of(t.in_id),
            "position": t.position.value,
            "point_gain": t.point_gain,
            "cost_delta": t.cost_delta,
        }
        for t in plan.transfers
    ]
    return pd.DataFrame(rows, columns=PLAN_COLUMNS)


def format_money(value: int) -> str:
    """Market values are whole currency units; show them in millions."""
    return f"{value / 1_000_000:.1f}M"


class LoggingReportSink(ReportSink):
    """Report sink writing the analysis to the loguru logger.

    Display names come from ``players`` when given, otherwise from the
    metadata carried by the analysis.
    """

    def __init__(self, players: Optional[Mapping[str, PlayerDomain]] = None):
        self.players = players

    def publish(self, analysis: TransferAnalysis) -> None:
        plan = analysis.plan

        if plan.status == PlanStatus.IMPROVED:
            logger.info(
                f"✅ {plan.num_transfers} transfers via {plan.strategy.value}: "
                f"+{plan.total_gain} pts"
            )
            table = plan_to_dataframe(plan, self.players or analysis.players)
            logger.info("\n" + table.to_string(index=False))
        elif plan.status == PlanStatus.NO_IMPROVEMENT:
            logger.info(f"ℹ️ No transfer recommended: {plan.reason}")
        elif plan.status == PlanStatus.INFEASIBLE:
            logger.warning(f"❌ Constraints cannot be satisfied: {plan.reason}")
        else:
            logger.warning(
                f"⏱️ Optimizer timed out, showing best plan found "
                f"({plan.num_transfers} transfers): {plan.reason}"
            )

        logger.info(
            f"💰 Budget {format_money(plan.budget_before)} → "
            f"{format_money(plan.budget_after)} (cap {format_money(plan.budget_cap)})"
        )
        logger.info(
            f"📈 Lineup {analysis.lineup_before.score} → {analysis.lineup_after.score} pts "
            f"({analysis.lineup_before.formation_label} → "
            f"{analysis.lineup_after.formation_label}), "
            f"source period reference {analysis.reference_lineup.score} pts"
        )
