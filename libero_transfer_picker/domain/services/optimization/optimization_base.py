"""Base utilities and data contracts for transfer optimization.

This module contains functionality shared by every selection strategy:
- Input validation contract (pydantic model)
- Deterministic option ordering
- Player indexing and per-position cap lookup
- Plan assembly with a status that explains empty results
"""

import time
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from loguru import logger
from pydantic import BaseModel, Field, field_validator

from ...models.formation import Roster
from ...models.player import PlayerDomain, Position
from ...models.transfer_plan import (
    PlanStatus,
    SelectionStrategy,
    TransferOption,
    TransferPlan,
)

NO_CANDIDATE_REASON = "no improving candidate"
ZERO_LIMIT_REASON = "maximum transfer count is 0, no transfer can be made"
INFEASIBLE_REASON = (
    "constraints are contradictory: no combination of candidates satisfies "
    "the budget, transfer-count and position limits"
)
TIMEOUT_REASON = "optimizer timed out before proving the best plan"

PlayerCollection = Union[Mapping[str, PlayerDomain], Iterable[PlayerDomain]]


class TransferSelectionInput(BaseModel):
    """Data contract for the limits every strategy receives."""

    budget_cap: int = Field(..., description="Maximum roster value after transfers")
    max_transfers: int = Field(..., ge=0, description="Maximum number of transfers")
    per_position_cap: Dict[Position, int] = Field(default_factory=dict)

    @field_validator("per_position_cap", mode="before")
    @classmethod
    def normalise_caps(cls, v):
        if v is None:
            return {}
        return v

    @field_validator("per_position_cap")
    @classmethod
    def validate_caps(cls, v: Dict[Position, int]) -> Dict[Position, int]:
        for position, cap in v.items():
            if cap < 0:
                raise ValueError(f"Per-position cap for {position.value} must be >= 0")
        return v


def option_sort_key(option: TransferOption) -> Tuple[int, int, str, str]:
    """Greedy order: gain descending, then cheaper, then IDs ascending."""
    return (-option.point_gain, option.cost_delta, option.out_id, option.in_id)


def index_players(players: PlayerCollection) -> Dict[str, PlayerDomain]:
    """Key players by ID, accepting either a mapping or a sequence."""
    if isinstance(players, Mapping):
        return dict(players)
    return {p.player_id: p for p in players}


class OptimizationBaseMixin:
    """Mixin providing shared selection utilities."""

    def _validate_selection_input(
        self,
        budget_cap: int,
        max_transfers: int,
        per_position_cap: Optional[Mapping] = None,
    ) -> TransferSelectionInput:
        return TransferSelectionInput(
            budget_cap=budget_cap,
            max_transfers=max_transfers,
            per_position_cap=dict(per_position_cap or {}),
        )

    def _usable_options(
        self, options: Sequence[TransferOption], roster: Roster
    ) -> List[TransferOption]:
        """Improving options that really swap a roster member for an outsider.

        Repeated (out, in) pairs are dropped; the result is in greedy order.
        """
        unique: Dict[Tuple[str, str], TransferOption] = {}
        for option in sorted(options, key=option_sort_key):
            if option.point_gain <= 0:
                continue
            if option.out_id not in roster or option.in_id in roster:
                continue
            unique.setdefault(option.key, option)
        return list(unique.values())

    def _build_plan(
        self,
        selected: Sequence[TransferOption],
        options: Sequence[TransferOption],
        budget_before: int,
        limits: TransferSelectionInput,
        strategy: SelectionStrategy,
        start_time: float,
        is_optimal: bool = False,
        timed_out: bool = False,
        reason: Optional[str] = None,
        status: Optional[PlanStatus] = None,
    ) -> TransferPlan:
        """Assemble a TransferPlan and pick the status that explains it.

        Args:
            selected: Transfers chosen by the strategy
            options: Candidate pool the strategy searched
            budget_before: Roster budget before transfers
            limits: Validated selection limits
            strategy: Strategy that produced the plan
            start_time: time.time() at the start of the run
            is_optimal: Whether optimality was proven
            timed_out: Whether the deadline expired
            reason: Explicit reason overriding the default one
            status: Explicit status for strategies that already know the outcome

        Returns:
            TransferPlan with status and reason filled in
        """
        if status is not None:
            if status == PlanStatus.TIMED_OUT:
                is_optimal = False
                reason = reason or TIMEOUT_REASON
        elif timed_out:
            status = PlanStatus.TIMED_OUT
            reason = reason or TIMEOUT_REASON
            is_optimal = False
        elif selected:
            status = PlanStatus.IMPROVED
        elif reason is not None:
            status = PlanStatus.INFEASIBLE
        elif not options:
            status = PlanStatus.NO_IMPROVEMENT
            reason = NO_CANDIDATE_REASON
        elif limits.max_transfers == 0:
            status = PlanStatus.INFEASIBLE
            reason = ZERO_LIMIT_REASON
        else:
            status = PlanStatus.INFEASIBLE
            reason = INFEASIBLE_REASON

        plan = TransferPlan(
            transfers=list(selected),
            status=status,
            strategy=strategy,
            reason=reason,
            budget_before=budget_before,
            budget_cap=limits.budget_cap,
            is_optimal=is_optimal,
            solve_time=max(0.0, time.time() - start_time),
        )

        if plan.is_empty:
            logger.info(f"🔎 {strategy.value}: empty plan ({status.value}: {reason})")
        else:
            logger.info(
                f"✅ {strategy.value}: {plan.num_transfers} transfers, "
                f"+{plan.total_gain} pts, budget {plan.budget_before} → {plan.budget_after}"
            )
        return plan


class TransferSelector(OptimizationBaseMixin, ABC):
    """Common contract of the selection strategies.

    Every strategy is constructed with the player metadata it needs to price
    the roster and answers ``select`` with a TransferPlan. Inputs are never
    mutated and an empty plan is returned instead of raising when nothing
    improving and feasible exists.
    """

    strategy: SelectionStrategy

    def __init__(self, players: PlayerCollection):
        self.players = index_players(players)

    @abstractmethod
    def select(
        self,
        options: Sequence[TransferOption],
        roster: Union[Roster, Sequence[str]],
        budget_cap: int,
        max_transfers: int,
        per_position_cap: Optional[Mapping] = None,
    ) -> TransferPlan:
        """Choose a set of simultaneous transfers.

        Args:
            options: Candidate single swaps
            roster: Current roster
            budget_cap: Maximum roster value after all transfers
            max_transfers: Maximum number of transfers (K)
            per_position_cap: Optional max transfers per position

        Returns:
            TransferPlan (possibly empty, with a status explaining why)
        """
