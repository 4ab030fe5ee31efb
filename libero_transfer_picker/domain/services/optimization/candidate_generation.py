"""Single-swap transfer candidate generation.

Each candidate is checked for budget feasibility on its own, assuming the
rest of the roster stays unchanged. Joint feasibility of several swaps is the
selector's job.
"""

from typing import Iterable, List, Mapping, Optional, Sequence, Set, Union

from loguru import logger

from ...models.formation import Formation, Roster
from ...models.player import PlayerDomain
from ...models.transfer_plan import TransferOption
from .formation_scoring import FormationScoringMixin
from .optimization_base import PlayerCollection, index_players


class CandidateGenerationMixin(FormationScoringMixin):
    """Mixin enumerating same-position swaps with a positive gain."""

    def top_candidate_pool(
        self,
        score_map: Mapping[str, int],
        players: PlayerCollection,
        size: int,
        exclude: Iterable[str] = (),
    ) -> List[str]:
        """Top ``size`` eligible players by score, highest first.

        Args:
            score_map: Points per player for the target period
            players: Player metadata
            size: Pool size
            exclude: IDs never to include (usually the current roster)

        Returns:
            Player IDs ordered by score descending, ID ascending on ties
        """
        excluded = set(exclude)
        eligible = [
            p
            for p in index_players(players).values()
            if p.is_eligible and p.player_id not in excluded
        ]
        eligible.sort(key=lambda p: (-score_map.get(p.player_id, 0), p.player_id))
        return [p.player_id for p in eligible[:size]]

    def _incoming_players(
        self,
        player_index: Mapping[str, PlayerDomain],
        roster: Roster,
        candidate_pool: Optional[Iterable[str]],
    ) -> List[PlayerDomain]:
        pool: Optional[Set[str]] = set(candidate_pool) if candidate_pool is not None else None
        incoming = [
            p
            for pid, p in player_index.items()
            if pid not in roster
            and p.is_eligible
            and (pool is None or pid in pool)
        ]
        incoming.sort(key=lambda p: p.player_id)
        return incoming

    def generate_candidates(
        self,
        roster: Union[Roster, Sequence[str]],
        out_score_map: Mapping[str, int],
        in_score_map: Mapping[str, int],
        players: PlayerCollection,
        budget_cap: int,
        candidate_pool: Optional[Iterable[str]] = None,
    ) -> List[TransferOption]:
        """Enumerate improving, budget-feasible single swaps.

        Args:
            roster: Current roster (duplicate IDs raise a ValidationError)
            out_score_map: Points judging the outgoing roster members
            in_score_map: Points judging the incoming players
            players: Player metadata; ineligible players are skipped
            budget_cap: Maximum roster value after the single swap
            candidate_pool: Optional restriction of incoming player IDs

        Returns:
            TransferOptions in roster order, then incoming ID ascending
        """
        roster = Roster.coerce(roster)
        player_index = index_players(players)
        roster_budget = roster.budget(player_index)
        incoming = self._incoming_players(player_index, roster, candidate_pool)

        options: List[TransferOption] = []
        for out_id in roster.player_ids:
            out_player = player_index.get(out_id)
            if out_player is None or not out_player.is_eligible:
                logger.debug(f"Skipping roster member {out_id} without valid metadata")
                continue
            out_points = out_score_map.get(out_id, 0)

            for in_player in incoming:
                if in_player.position != out_player.position:
                    continue
                gain = in_score_map.get(in_player.player_id, 0) - out_points
                if gain <= 0:
                    continue
                if (
                    roster_budget - out_player.market_value + in_player.market_value
                    > budget_cap
                ):
                    continue
                options.append(
                    TransferOption(
                        out_id=out_id,
                        in_id=in_player.player_id,
                        position=out_player.position,
                        point_gain=gain,
                        cost_delta=in_player.market_value - out_player.market_value,
                    )
                )

        logger.info(
            f"🔄 Generated {len(options)} transfer candidates "
            f"({len(roster)} roster players x {len(incoming)} market players)"
        )
        return options

    def generate_lineup_aware_candidates(
        self,
        roster: Union[Roster, Sequence[str]],
        score_map: Mapping[str, int],
        players: PlayerCollection,
        budget_cap: int,
        formations: Optional[Sequence[Formation]] = None,
        candidate_pool: Optional[Iterable[str]] = None,
    ) -> List[TransferOption]:
        """Enumerate swaps that raise the best starting-lineup score.

        The gain of a swap is the lineup score of the swapped roster minus
        the lineup score of the current roster, both under ``score_map``.
        A bench-only upgrade therefore has no gain.
        """
        roster = Roster.coerce(roster)
        player_index = index_players(players)
        roster_budget = roster.budget(player_index)
        members = roster.members(player_index)
        base_score = self.best_lineup_score(members, score_map, formations)
        incoming = self._incoming_players(player_index, roster, candidate_pool)

        options: List[TransferOption] = []
        for index, out_player in enumerate(members):
            if not out_player.is_eligible:
                continue
            others = members[:index] + members[index + 1 :]
            for in_player in incoming:
                if in_player.position != out_player.position:
                    continue
                if (
                    roster_budget - out_player.market_value + in_player.market_value
                    > budget_cap
                ):
                    continue
                gain = (
                    self.best_lineup_score(others + [in_player], score_map, formations)
                    - base_score
                )
                if gain <= 0:
                    continue
                options.append(
                    TransferOption(
                        out_id=out_player.player_id,
                        in_id=in_player.player_id,
                        position=out_player.position,
                        point_gain=gain,
                        cost_delta=in_player.market_value - out_player.market_value,
                    )
                )

        logger.info(
            f"🔄 Generated {len(options)} lineup-aware candidates "
            f"(baseline lineup {base_score} pts)"
        )
        return options
