"""Exhaustive transfer combination search.

Guarantees the best plan over the given candidate pool. The cost is
combinatorial in the pool size and K, so the pool should be pre-filtered
(e.g. top 50 incoming players) before calling.

Search space partitioning: every subset is visited exactly once in the
partition of its lowest-index option, so partitions can run in separate
worker processes and be merged with a max-reduce.
"""

import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from loguru import logger

from libero_transfer_picker.config import config

from ...models.formation import Roster
from ...models.player import Position
from ...models.transfer_plan import SelectionStrategy, TransferOption, TransferPlan
from .optimization_base import PlayerCollection, TransferSelector

# (out_id, in_id, position, point_gain, cost_delta)
OptionTuple = Tuple[str, str, str, int, int]
# (-gain, total cost delta, size, sorted (out, in) pairs): smaller is better
RankKey = Tuple[int, int, int, Tuple[Tuple[str, str], ...]]

DEADLINE_CHECK_INTERVAL = 512


def _rank_key(items: Sequence[OptionTuple], chosen: Sequence[int], gain: int, cost: int) -> RankKey:
    pairs = tuple(sorted((items[i][0], items[i][1]) for i in chosen))
    return (-gain, cost, len(chosen), pairs)


def search_partition(
    first: int,
    items: Sequence[OptionTuple],
    budget_before: int,
    budget_cap: int,
    max_transfers: int,
    caps: Dict[str, int],
    deadline: Optional[float] = None,
    incumbent_gain: Optional[int] = None,
) -> Tuple[Optional[RankKey], Tuple[int, ...], bool]:
    """Best feasible subset whose lowest option index is ``first``.

    ``items`` must be ordered by gain descending; this is what makes the
    remaining-slots bound valid for pruning.

    Args:
        first: Index of the option every subset in this partition starts with
        items: Candidate options as plain tuples
        budget_before: Roster budget before transfers
        budget_cap: Maximum roster value after transfers
        max_transfers: Maximum subset size
        caps: Max transfers per position value
        deadline: Absolute time.time() deadline, None for no limit
        incumbent_gain: Gain already achieved elsewhere; branches that cannot
            reach it are pruned

    Returns:
        (rank key or None, chosen indices, timed_out)
    """
    n = len(items)
    best_key: Optional[RankKey] = None
    best_chosen: Tuple[int, ...] = ()
    timed_out = False
    visits = 0

    first_out, first_in, first_position, first_gain, first_cost = items[first]
    if caps.get(first_position, max_transfers) < 1 or max_transfers < 1:
        return None, (), False
    if deadline is not None and time.time() > deadline:
        return None, (), True

    def target_gain() -> Optional[int]:
        if best_key is not None:
            return -best_key[0]
        return incumbent_gain

    def visit(chosen: List[int], used_ids: set, counts: Dict[str, int], gain: int, cost: int):
        nonlocal best_key, best_chosen, timed_out, visits
        visits += 1
        if deadline is not None and visits % DEADLINE_CHECK_INTERVAL == 0:
            if time.time() > deadline:
                timed_out = True
        if timed_out:
            return

        if budget_before + cost <= budget_cap:
            to_beat = target_gain()
            if to_beat is None or gain >= to_beat:
                key = _rank_key(items, chosen, gain, cost)
                if best_key is None or key < best_key:
                    best_key = key
                    best_chosen = tuple(chosen)

        slots = max_transfers - len(chosen)
        if slots == 0:
            return

        for j in range(chosen[-1] + 1, n):
            to_beat = target_gain()
            if to_beat is not None and gain + slots * items[j][3] < to_beat:
                # Gains only decrease from here on
                break
            out_id, in_id, position, option_gain, option_cost = items[j]
            if out_id in used_ids or in_id in used_ids:
                continue
            cap = caps.get(position)
            if cap is not None and counts.get(position, 0) >= cap:
                continue

            used_ids.add(out_id)
            used_ids.add(in_id)
            counts[position] = counts.get(position, 0) + 1
            chosen.append(j)
            visit(chosen, used_ids, counts, gain + option_gain, cost + option_cost)
            chosen.pop()
            counts[position] -= 1
            used_ids.discard(out_id)
            used_ids.discard(in_id)
            if timed_out:
                return

    visit(
        [first],
        {first_out, first_in},
        {first_position: 1},
        first_gain,
        first_cost,
    )
    return best_key, best_chosen, timed_out


class BruteForceTransferSelector(TransferSelector):
    """Optimal selection over the candidate pool by exhaustive enumeration."""

    strategy = SelectionStrategy.BRUTE_FORCE

    def __init__(
        self,
        players: PlayerCollection,
        workers: Optional[int] = None,
        time_limit_seconds: Optional[float] = None,
    ):
        super().__init__(players)
        self.workers = workers if workers is not None else config.optimization.bruteforce_workers
        self.time_limit_seconds = time_limit_seconds

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
        deadline = (
            start_time + self.time_limit_seconds
            if self.time_limit_seconds is not None
            else None
        )

        items: List[OptionTuple] = [
            (o.out_id, o.in_id, o.position.value, o.point_gain, o.cost_delta)
            for o in candidates
        ]
        caps = {
            position.value if isinstance(position, Position) else str(position): cap
            for position, cap in limits.per_position_cap.items()
        }
        max_size = min(limits.max_transfers, len(items))

        logger.info(
            f"🧮 Exhaustive search: {len(items)} candidates, up to {max_size} transfers"
            + (f", {self.workers} workers" if self.workers > 1 else "")
        )

        if self.workers > 1 and len(items) > 1 and max_size > 0:
            results = self._search_parallel(items, budget_before, limits.budget_cap, max_size, caps, deadline)
        else:
            results = self._search_sequential(items, budget_before, limits.budget_cap, max_size, caps, deadline)

        best_key: Optional[RankKey] = None
        best_chosen: Tuple[int, ...] = ()
        timed_out = False
        for key, chosen, partition_timed_out in results:
            timed_out = timed_out or partition_timed_out
            if key is not None and (best_key is None or key < best_key):
                best_key, best_chosen = key, chosen

        if timed_out:
            logger.warning(
                f"⏱️ Exhaustive search hit its {self.time_limit_seconds}s limit, "
                "returning best plan found so far"
            )

        selected = [candidates[i] for i in sorted(best_chosen)]
        return self._build_plan(
            selected,
            candidates,
            budget_before,
            limits,
            self.strategy,
            start_time,
            is_optimal=not timed_out,
            timed_out=timed_out,
        )

    def _search_sequential(self, items, budget_before, budget_cap, max_size, caps, deadline):
        results = []
        incumbent: Optional[int] = None
        for first in range(len(items)):
            if incumbent is not None and items[first][3] * max_size < incumbent:
                break
            key, chosen, timed_out = search_partition(
                first, items, budget_before, budget_cap, max_size, caps, deadline, incumbent
            )
            results.append((key, chosen, timed_out))
            if key is not None and (incumbent is None or -key[0] > incumbent):
                incumbent = -key[0]
            if timed_out:
                break
        return results

    def _search_parallel(self, items, budget_before, budget_cap, max_size, caps, deadline):
        results = []
        with ProcessPoolExecutor(max_workers=self.workers) as executor:
            futures = {
                executor.submit(
                    search_partition,
                    first,
                    items,
                    budget_before,
                    budget_cap,
                    max_size,
                    caps,
                    deadline,
                ): first
                for first in range(len(items))
            }
            for future in as_completed(futures):
                results.append(future.result())
        return results
