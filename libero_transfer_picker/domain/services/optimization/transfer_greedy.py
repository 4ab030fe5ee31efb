"""Greedy K-best transfer selection.

Fast local-optimum heuristic: walk the candidates best-first and keep every
one that still fits. An early pick can block a better later combination when
budget constraints interact, so the result is not guaranteed optimal.
"""

import time
from collections import Counter
from typing import List, Mapping, Optional, Sequence, Set, Union

from ...models.formation import Roster
from ...models.transfer_plan import SelectionStrategy, TransferOption, TransferPlan
from .budget_ledger import BudgetLedger
from .optimization_base import TransferSelector


class GreedyTransferSelector(TransferSelector):
    """Best-first selection under uniqueness, position and budget limits."""

    strategy = SelectionStrategy.GREEDY

    def select(
        self,
        options: Sequence[TransferOption],
        roster: Union[Roster, Sequence[str]],
        budget_cap: int,
        max_transfers: int,
        per_position_cap: Optional[Mapping] = None,
    ) -> TransferPlan:
        start_time = time.time()
        roster = Roster.coerce(roster)
        limits = self._validate_selection_input(
            budget_cap, max_transfers, per_position_cap
        )
        candidates = self._usable_options(options, roster)
        budget_before = roster.budget(self.players)

        ledger = BudgetLedger(total=budget_before, cap=limits.budget_cap)
        used_ids: Set[str] = set()
        position_counts: Counter = Counter()
        selected: List[TransferOption] = []

        for option in candidates:
            if len(selected) >= limits.max_transfers:
                break
            if option.out_id in used_ids or option.in_id in used_ids:
                continue
            cap = limits.per_position_cap.get(option.position)
            if cap is not None and position_counts[option.position] >= cap:
                continue
            if not ledger.can_apply(option.cost_delta):
                continue

            ledger = ledger.apply(option.cost_delta)
            used_ids.update(option.key)
            position_counts[option.position] += 1
            selected.append(option)

        return self._build_plan(
            selected,
            candidates,
            budget_before,
            limits,
            self.strategy,
            start_time,
        )
