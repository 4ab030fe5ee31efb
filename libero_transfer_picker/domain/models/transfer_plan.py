"""Transfer option and transfer plan domain models."""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .formation import Formation
from .player import PlayerDomain, Position


class SelectionStrategy(str, Enum):
    """Interchangeable transfer selection strategies."""

    GREEDY = "greedy"
    BRUTE_FORCE = "brute_force"
    ILP = "ilp"


class PlanStatus(str, Enum):
    """Outcome of a selection run.

    An empty plan is always accompanied by one of the non-improving statuses
    so a report can tell the cases apart.
    """

    IMPROVED = "improved"
    NO_IMPROVEMENT = "no_improvement"
    INFEASIBLE = "infeasible"
    TIMED_OUT = "timed_out"


class TransferOption(BaseModel):
    """A single swap of a roster member for an outside player."""

    model_config = ConfigDict(frozen=True)

    out_id: str = Field(..., min_length=1, description="Roster player leaving")
    in_id: str = Field(..., min_length=1, description="Outside player joining")
    position: Position = Field(..., description="Shared position of both players")
    point_gain: int = Field(..., description="In-player points minus out-player points")
    cost_delta: int = Field(..., description="In-player cost minus out-player cost")

    @model_validator(mode="after")
    def validate_distinct_players(self) -> "TransferOption":
        if self.out_id == self.in_id:
            raise ValueError(f"Player {self.out_id} cannot be swapped for itself")
        return self

    @property
    def key(self) -> Tuple[str, str]:
        return (self.out_id, self.in_id)

    def __str__(self) -> str:
        sign = "+" if self.cost_delta >= 0 else ""
        return (
            f"{self.out_id} → {self.in_id} ({self.position.value}, "
            f"+{self.point_gain} pts, {sign}{self.cost_delta})"
        )


class TransferPlan(BaseModel):
    """A bounded set of simultaneous transfers plus how it was obtained."""

    transfers: List[TransferOption] = Field(default_factory=list)
    status: PlanStatus = Field(..., description="Outcome of the selection run")
    strategy: SelectionStrategy = Field(..., description="Strategy that built the plan")
    reason: Optional[str] = Field(
        None, description="Human-readable explanation when the plan is empty or partial"
    )
    budget_before: int = Field(..., description="Roster budget before transfers")
    budget_cap: int = Field(..., description="Budget cap the plan was checked against")
    is_optimal: bool = Field(
        False, description="Whether the strategy proved optimality over its search space"
    )
    solve_time: float = Field(0.0, ge=0.0, description="Wall-clock seconds spent")

    @model_validator(mode="after")
    def validate_transfer_uniqueness(self) -> "TransferPlan":
        out_ids = [t.out_id for t in self.transfers]
        in_ids = [t.in_id for t in self.transfers]
        if len(out_ids) != len(set(out_ids)):
            raise ValueError("A player cannot be transferred out twice in one plan")
        if len(in_ids) != len(set(in_ids)):
            raise ValueError("A player cannot be transferred in twice in one plan")
        overlap = set(out_ids) & set(in_ids)
        if overlap:
            raise ValueError(
                f"Players appear both as outgoing and incoming: {sorted(overlap)}"
            )
        return self

    @property
    def num_transfers(self) -> int:
        return len(self.transfers)

    @property
    def is_empty(self) -> bool:
        return not self.transfers

    @property
    def total_gain(self) -> int:
        return sum(t.point_gain for t in self.transfers)

    @property
    def total_cost_delta(self) -> int:
        return sum(t.cost_delta for t in self.transfers)

    @property
    def budget_after(self) -> int:
        return self.budget_before + self.total_cost_delta

    @property
    def within_budget(self) -> bool:
        return self.budget_after <= self.budget_cap

    def apply_to(self, roster_ids: List[str]) -> List[str]:
        """Roster after the plan, incoming players taking the outgoing slots."""
        replacements: Dict[str, str] = {t.out_id: t.in_id for t in self.transfers}
        return [replacements.get(pid, pid) for pid in roster_ids]


class Lineup(BaseModel):
    """Best starting lineup for a roster under a score map."""

    players: List[PlayerDomain] = Field(default_factory=list)
    formation: Optional[Formation] = None
    score: int = 0

    @property
    def formation_label(self) -> str:
        return self.formation.label if self.formation is not None else "-"


class TransferAnalysis(BaseModel):
    """End-to-end result handed to a report sink."""

    plan: TransferPlan
    roster_before: List[str] = Field(default_factory=list)
    roster_after: List[str] = Field(default_factory=list)
    lineup_before: Lineup = Field(
        ..., description="Current roster scored on the target period"
    )
    lineup_after: Lineup = Field(
        ..., description="Roster after transfers scored on the target period"
    )
    reference_lineup: Lineup = Field(
        ..., description="Current roster scored on the source period"
    )
    players: Dict[str, PlayerDomain] = Field(
        default_factory=dict,
        description="Metadata of the players on either roster, keyed by ID",
    )

    @property
    def lineup_gain(self) -> int:
        return self.lineup_after.score - self.lineup_before.score
