"""Integer-program transfer optimization.

Unlike the greedy and exhaustive strategies this one searches the whole
eligible market rather than a list of single-swap candidates:

    maximize   Σ x_i · score_i
    subject to Σ x_i · value_i          <= budget cap
               Σ x_i                    == roster size
               Σ x_i  (i not in roster) <= K
               Σ x_i  (position p)      == roster count at p
               Σ x_i  (new, position p) <= per-position cap (optional)

The chosen roster is diffed against the current one and outgoing/incoming
players are paired per position to report swaps. Gains are measured on the
objective scores, so the plan total is the objective improvement. A swap may
individually lose points when it frees budget for a bigger upgrade elsewhere.
"""

import time
from typing import Dict, List, Mapping, Optional, Sequence, Union

from loguru import logger

from libero_transfer_picker.config import config

from ...models.formation import Roster
from ...models.player import PlayerDomain, Position
from ...models.transfer_plan import (
    PlanStatus,
    SelectionStrategy,
    TransferOption,
    TransferPlan,
)
from .integer_program import (
    ConstraintSense,
    IntegerProgram,
    IntegerProgramBackend,
    PulpIntegerProgramBackend,
    SolverStatus,
)
from .optimization_base import (
    NO_CANDIDATE_REASON,
    PlayerCollection,
    TransferSelectionInput,
    TransferSelector,
    option_sort_key,
)


class ILPTransferSelector(TransferSelector):
    """Optimal roster under the target-period scores via an integer program."""

    strategy = SelectionStrategy.ILP

    def __init__(
        self,
        players: PlayerCollection,
        score_map: Mapping[str, int],
        backend: Optional[IntegerProgramBackend] = None,
        time_limit_seconds: Optional[float] = None,
    ):
        """
        Args:
            players: Player metadata (the whole market)
            score_map: Target-period points, the objective and the reported gains
            backend: Solver backend, PuLP/CBC by default
            time_limit_seconds: Solver time limit
        """
        super().__init__(players)
        self.score_map = score_map
        self.backend = backend or PulpIntegerProgramBackend()
        self.time_limit_seconds = (
            time_limit_seconds
            if time_limit_seconds is not None
            else config.optimization.time_limit_seconds
        )

    def build_program(
        self, roster: Roster, limits: TransferSelectionInput
    ) -> IntegerProgram:
        """Formulate the transfer problem for ``roster`` under ``limits``."""
        eligible = {pid: p for pid, p in self.players.items() if p.is_eligible}
        members = [pid for pid in roster.player_ids if pid in eligible]
        member_set = set(members)
        variables = sorted(eligible)

        # One point of score outweighs every keep bonus combined, so the bonus
        # only decides between equal-score rosters
        weight = len(members) + 1
        objective = {
            pid: self.score_map.get(pid, 0) * weight + (1 if pid in member_set else 0)
            for pid in variables
        }

        program = IntegerProgram(
            name="Libero_Transfer_Optimization",
            variables=variables,
            objective=objective,
        )
        program.add_constraint(
            "Budget_Limit",
            {pid: eligible[pid].market_value for pid in variables},
            ConstraintSense.LESS_EQUAL,
            limits.budget_cap,
        )
        program.add_constraint(
            "Roster_Size",
            {pid: 1 for pid in variables},
            ConstraintSense.EQUAL,
            len(members),
        )
        program.add_constraint(
            "Transfer_Limit",
            {pid: 1 for pid in variables if pid not in member_set},
            ConstraintSense.LESS_EQUAL,
            limits.max_transfers,
        )

        for position in Position:
            position_ids = [pid for pid in variables if eligible[pid].position == position]
            current_count = sum(1 for pid in members if eligible[pid].position == position)
            program.add_constraint(
                f"Position_{position.value}",
                {pid: 1 for pid in position_ids},
                ConstraintSense.EQUAL,
                current_count,
            )
            cap = limits.per_position_cap.get(position)
            if cap is not None:
                program.add_constraint(
                    f"Position_Transfer_Cap_{position.value}",
                    {pid: 1 for pid in position_ids if pid not in member_set},
                    ConstraintSense.LESS_EQUAL,
                    cap,
                )
        return program

    def select(
        self,
        options: Sequence[TransferOption],
        roster: Union[Roster, Sequence[str]],
        budget_cap: int,
        max_transfers: int,
        per_position_cap: Optional[Mapping] = None,
    ) -> TransferPlan:
        """Solve the integer program and report its roster as swaps.

        ``options`` is accepted for contract compatibility; the program
        searches every eligible player instead.
        """
        start_time = time.time()
        roster = Roster.coerce(roster)
        limits = self._validate_selection_input(
            budget_cap, max_transfers, per_position_cap
        )
        budget_before = roster.budget(self.players)

        if limits.max_transfers == 0:
            return self._build_plan(
                [],
                self._usable_options(options, roster),
                budget_before,
                limits,
                self.strategy,
                start_time,
            )

        program = self.build_program(roster, limits)
        logger.info(
            f"🎯 ILP: {len(program.variables)} players, K={limits.max_transfers}, "
            f"cap {limits.budget_cap}"
        )
        solution = self.backend.solve(program, self.time_limit_seconds)

        if solution.status in (SolverStatus.INFEASIBLE, SolverStatus.UNBOUNDED):
            logger.warning(f"❌ ILP reported {solution.status.value}")
            return self._build_plan(
                [],
                options,
                budget_before,
                limits,
                self.strategy,
                start_time,
                reason=f"integer program is {solution.status.value}: no roster satisfies "
                "the budget, transfer-count and position constraints",
                status=PlanStatus.INFEASIBLE,
            )

        if not solution.has_solution:
            timed_out = self.time_limit_seconds is not None
            if timed_out:
                logger.warning("⏱️ ILP hit its time limit without a feasible roster")
            return self._build_plan(
                [],
                options,
                budget_before,
                limits,
                self.strategy,
                start_time,
                reason=None if timed_out else "solver returned no solution",
                status=PlanStatus.TIMED_OUT if timed_out else PlanStatus.INFEASIBLE,
            )

        chosen = {pid for pid, value in solution.values.items() if value == 1}
        transfers = self._diff_rosters(roster, chosen)
        proven = solution.status == SolverStatus.OPTIMAL

        if not proven:
            status = PlanStatus.TIMED_OUT
        elif transfers:
            status = PlanStatus.IMPROVED
        else:
            status = PlanStatus.NO_IMPROVEMENT

        return self._build_plan(
            transfers,
            options,
            budget_before,
            limits,
            self.strategy,
            start_time,
            is_optimal=proven,
            reason=NO_CANDIDATE_REASON if status == PlanStatus.NO_IMPROVEMENT else None,
            status=status,
        )

    def _diff_rosters(self, roster: Roster, chosen: set) -> List[TransferOption]:
        """Pair outgoing and incoming players of the same position."""
        outgoing: Dict[Position, List[PlayerDomain]] = {p: [] for p in Position}
        incoming: Dict[Position, List[PlayerDomain]] = {p: [] for p in Position}

        for pid in roster.player_ids:
            player = self.players.get(pid)
            if player is not None and player.is_eligible and pid not in chosen:
                outgoing[player.position].append(player)
        for pid in chosen:
            if pid not in roster:
                player = self.players[pid]
                incoming[player.position].append(player)

        transfers: List[TransferOption] = []
        for position in Position:
            outs = sorted(
                outgoing[position],
                key=lambda p: (self.score_map.get(p.player_id, 0), p.player_id),
            )
            ins = sorted(
                incoming[position],
                key=lambda p: (-self.score_map.get(p.player_id, 0), p.player_id),
            )
            if len(outs) != len(ins):
                raise ValueError(
                    f"ILP solution changed the {position.value} count "
                    f"({len(outs)} out, {len(ins)} in)"
                )
            for out_player, in_player in zip(outs, ins):
                transfers.append(
                    TransferOption(
                        out_id=out_player.player_id,
                        in_id=in_player.player_id,
                        position=position,
                        point_gain=self.score_map.get(in_player.player_id, 0)
                        - self.score_map.get(out_player.player_id, 0),
                        cost_delta=in_player.market_value - out_player.market_value,
                    )
                )

        transfers.sort(key=option_sort_key)
        return transfers
