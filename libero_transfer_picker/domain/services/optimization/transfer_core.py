"""Core transfer optimization entry point.

This module provides:
- Strategy construction (greedy, brute force, ILP) behind one contract
- Main select_transfers() entry point with config defaults
"""

from typing import Iterable, Mapping, Optional, Sequence, Union

from loguru import logger

from libero_transfer_picker.config import config

from ...models.formation import Roster
from ...models.transfer_plan import SelectionStrategy, TransferOption, TransferPlan
from .candidate_generation import CandidateGenerationMixin
from .integer_program import IntegerProgramBackend
from .optimization_base import PlayerCollection, TransferSelector
from .transfer_bruteforce import BruteForceTransferSelector
from .transfer_greedy import GreedyTransferSelector
from .transfer_ilp import ILPTransferSelector


class TransferOptimizationMixin(CandidateGenerationMixin):
    """Mixin dispatching transfer selection to the chosen strategy."""

    def create_selector(
        self,
        strategy: Union[SelectionStrategy, str],
        players: PlayerCollection,
        score_map: Optional[Mapping[str, int]] = None,
        workers: Optional[int] = None,
        time_limit_seconds: Optional[float] = None,
        backend: Optional[IntegerProgramBackend] = None,
    ) -> TransferSelector:
        """Build the selector for ``strategy``.

        Args:
            strategy: Strategy enum or its value ("greedy", "brute_force", "ilp")
            players: Player metadata
            score_map: Target-period points (required for ILP)
            workers: Brute-force worker processes
            time_limit_seconds: Deadline for brute force and ILP
            backend: Integer program backend for ILP

        Returns:
            A TransferSelector
        """
        strategy = SelectionStrategy(strategy)
        if time_limit_seconds is None:
            time_limit_seconds = config.optimization.time_limit_seconds

        if strategy == SelectionStrategy.GREEDY:
            return GreedyTransferSelector(players)
        if strategy == SelectionStrategy.BRUTE_FORCE:
            return BruteForceTransferSelector(
                players, workers=workers, time_limit_seconds=time_limit_seconds
            )
        if score_map is None:
            raise ValueError("The ILP strategy needs the target-period score map")
        return ILPTransferSelector(
            players,
            score_map,
            backend=backend,
            time_limit_seconds=time_limit_seconds,
        )

    def select_transfers(
        self,
        options: Sequence[TransferOption],
        roster: Union[Roster, Sequence[str]],
        players: PlayerCollection,
        strategy: Optional[Union[SelectionStrategy, str]] = None,
        budget_cap: Optional[int] = None,
        max_transfers: Optional[int] = None,
        per_position_cap: Optional[Mapping] = None,
        score_map: Optional[Mapping[str, int]] = None,
        workers: Optional[int] = None,
        time_limit_seconds: Optional[float] = None,
        backend: Optional[IntegerProgramBackend] = None,
    ) -> TransferPlan:
        """Select transfers with the requested strategy.

        Unset limits come from ``config.optimization``. All strategies
        answer with a TransferPlan whose status explains an empty result.
        """
        opt = config.optimization
        strategy = SelectionStrategy(strategy or opt.default_strategy)
        budget_cap = opt.budget_cap if budget_cap is None else budget_cap
        max_transfers = opt.max_transfers if max_transfers is None else max_transfers
        if per_position_cap is None:
            per_position_cap = opt.per_position_cap

        logger.info(
            f"🔄 Selecting transfers: strategy={strategy.value}, K={max_transfers}, "
            f"cap={budget_cap}, {len(options)} options"
        )
        selector = self.create_selector(
            strategy,
            players,
            score_map=score_map,
            workers=workers,
            time_limit_seconds=time_limit_seconds,
            backend=backend,
        )
        return selector.select(
            options,
            roster,
            budget_cap=budget_cap,
            max_transfers=max_transfers,
            per_position_cap=per_position_cap,
        )

    def candidate_pool_for(
        self,
        score_map: Mapping[str, int],
        players: PlayerCollection,
        roster: Union[Roster, Sequence[str]],
        size: Optional[int] = None,
    ) -> Optional[Iterable[str]]:
        """Configured top-N incoming pool, or None for the whole market."""
        size = config.optimization.candidate_pool_size if size is None else size
        if size is None:
            return None
        return self.top_candidate_pool(
            score_map, players, size, exclude=Roster.coerce(roster).player_ids
        )
