"""Domain models with strict data contracts."""

from .formation import Formation, Roster
from .player import OUTFIELD_POSITIONS, PlayerDomain, Position, ScoreEvent
from .score import ScoreMap
from .transfer_plan import (
    Lineup,
    PlanStatus,
    SelectionStrategy,
    TransferAnalysis,
    TransferOption,
    TransferPlan,
)

__all__ = [
    "Formation",
    "Roster",
    "PlayerDomain",
    "Position",
    "OUTFIELD_POSITIONS",
    "ScoreEvent",
    "ScoreMap",
    "Lineup",
    "PlanStatus",
    "SelectionStrategy",
    "TransferAnalysis",
    "TransferOption",
    "TransferPlan",
]
