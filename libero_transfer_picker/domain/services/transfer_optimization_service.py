"""Transfer optimization service.

End-to-end run: providers → score aggregation → candidate generation →
transfer selection → before/after lineup scores → report sink.
"""

from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union

from loguru import logger

from libero_transfer_picker.config import config

from ..common.result import DomainError, Result
from ..models.formation import Formation, Roster
from ..models.player import PlayerDomain
from ..models.score import ScoreMap
from ..models.transfer_plan import SelectionStrategy, TransferAnalysis
from ..repositories.player_repository import (
    MatchdayScoreProvider,
    PlayerMetadataProvider,
    ReportSink,
    RosterStore,
)
from .optimization.integer_program import IntegerProgramBackend
from .optimization.optimization_base import index_players
from .optimization_service import OptimizationService
from .score_aggregation_service import RawEvent, ScoreAggregationService

RoundRange = Tuple[int, int]


class TransferOptimizationService:
    """Service for recommending transfers between two scoring periods."""

    def __init__(
        self,
        player_provider: Optional[PlayerMetadataProvider] = None,
        score_provider: Optional[MatchdayScoreProvider] = None,
        roster_store: Optional[RosterStore] = None,
        report_sink: Optional[ReportSink] = None,
        optimization_service: Optional[OptimizationService] = None,
        aggregation_service: Optional[ScoreAggregationService] = None,
    ):
        """Initialize the service with its collaborators.

        Args:
            player_provider: Source of player metadata (needed by ``run``)
            score_provider: Source of per-round score events (needed by ``run``)
            roster_store: Source of the current roster (needed by ``run``)
            report_sink: Optional consumer of finished analyses
            optimization_service: Engine facade, created when omitted
            aggregation_service: Score aggregation, created when omitted
        """
        self.player_provider = player_provider
        self.score_provider = score_provider
        self.roster_store = roster_store
        self.report_sink = report_sink
        self.optimization_service = optimization_service or OptimizationService()
        self.aggregation_service = aggregation_service or ScoreAggregationService()

    def analyze(
        self,
        players: Union[Mapping[str, PlayerDomain], Iterable[PlayerDomain]],
        score_events: Iterable[RawEvent],
        roster: Union[Roster, Sequence[str]],
        source_range: Optional[RoundRange] = None,
        target_range: Optional[RoundRange] = None,
        strategy: Optional[Union[SelectionStrategy, str]] = None,
        budget_cap: Optional[int] = None,
        max_transfers: Optional[int] = None,
        per_position_cap: Optional[Mapping] = None,
        lineup_aware: Optional[bool] = None,
        candidate_pool_size: Optional[int] = None,
        formations: Optional[Sequence[Formation]] = None,
        workers: Optional[int] = None,
        time_limit_seconds: Optional[float] = None,
        backend: Optional[IntegerProgramBackend] = None,
    ) -> TransferAnalysis:
        """Recommend transfers and score the roster before and after.

        The current roster is judged on the source period, incoming players
        on the target period. Unset options come from the global config.

        Args:
            players: Player metadata (whole market)
            score_events: Events covering both periods
            roster: Current roster
            source_range: Inclusive source rounds (default config season split)
            target_range: Inclusive target rounds (default config season split)
            strategy: "greedy", "brute_force" or "ilp"
            budget_cap: Maximum roster value after transfers
            max_transfers: Maximum transfers (K)
            per_position_cap: Optional max transfers per position
            lineup_aware: Judge swaps by starting-lineup improvement
            candidate_pool_size: Top-N incoming players by target score
            formations: Formation templates for lineup scoring
            workers: Brute-force worker processes
            time_limit_seconds: Deadline for brute force and ILP
            backend: Integer program backend for ILP

        Returns:
            TransferAnalysis with the plan and lineup scores

        Raises:
            ValueError: for malformed input (duplicate roster IDs, inverted
                round ranges, negative limits)
        """
        opt = config.optimization
        source_range = source_range or config.season.source_range
        target_range = target_range or config.season.target_range
        budget_cap = opt.budget_cap if budget_cap is None else budget_cap
        lineup_aware = opt.lineup_aware_candidates if lineup_aware is None else lineup_aware
        if formations is None:
            formations = config.lineup.formation_models()

        roster = Roster.coerce(roster)
        player_index = index_players(players)
        events = list(score_events)
        source_scores = self.aggregation_service.aggregate(events, source_range)
        target_scores = self.aggregation_service.aggregate(events, target_range)

        logger.info(
            f"🔄 Analyzing roster of {len(roster)}: source rounds "
            f"{source_range[0]}-{source_range[1]}, target rounds "
            f"{target_range[0]}-{target_range[1]}"
        )

        engine = self.optimization_service
        pool = engine.candidate_pool_for(
            target_scores, player_index, roster, size=candidate_pool_size
        )
        if lineup_aware:
            options = engine.generate_lineup_aware_candidates(
                roster,
                target_scores,
                player_index,
                budget_cap,
                formations=formations,
                candidate_pool=pool,
            )
        else:
            options = engine.generate_candidates(
                roster,
                source_scores,
                target_scores,
                player_index,
                budget_cap,
                candidate_pool=pool,
            )

        plan = engine.select_transfers(
            options,
            roster,
            player_index,
            strategy=strategy,
            budget_cap=budget_cap,
            max_transfers=max_transfers,
            per_position_cap=per_position_cap,
            score_map=target_scores,
            workers=workers,
            time_limit_seconds=time_limit_seconds,
            backend=backend,
        )

        roster_after = plan.apply_to(list(roster.player_ids))
        involved = set(roster.player_ids) | set(roster_after)
        return TransferAnalysis(
            plan=plan,
            roster_before=list(roster.player_ids),
            roster_after=roster_after,
            lineup_before=self._lineup(roster.player_ids, player_index, target_scores, formations),
            lineup_after=self._lineup(roster_after, player_index, target_scores, formations),
            reference_lineup=self._lineup(
                roster.player_ids, player_index, source_scores, formations
            ),
            players={pid: p for pid, p in player_index.items() if pid in involved},
        )

    def run(
        self,
        source_range: Optional[RoundRange] = None,
        target_range: Optional[RoundRange] = None,
        **options,
    ) -> Result[TransferAnalysis]:
        """Load inputs from the providers, analyze and publish.

        Provider failures are returned, not raised. Keyword options are
        passed through to ``analyze``.
        """
        if self.player_provider is None or self.score_provider is None or self.roster_store is None:
            return Result.failure(
                DomainError.malformed_input(
                    "run() needs a player provider, a score provider and a roster store"
                )
            )

        source_range = source_range or config.season.source_range
        target_range = target_range or config.season.target_range

        players_result = self.player_provider.get_players()
        if players_result.is_failure:
            return Result.failure(players_result.error)

        roster_result = self.roster_store.load_roster()
        if roster_result.is_failure:
            return Result.failure(roster_result.error)

        # One fetch covering both periods; aggregation filters per period
        covering = (
            min(source_range[0], target_range[0]),
            max(source_range[1], target_range[1]),
        )
        events_result = self.score_provider.get_score_events(covering)
        if events_result.is_failure:
            return Result.failure(events_result.error)

        try:
            analysis = self.analyze(
                players_result.value,
                events_result.value,
                roster_result.value,
                source_range=source_range,
                target_range=target_range,
                **options,
            )
        except ValueError as e:
            return Result.failure(
                DomainError.malformed_input(f"Invalid optimization input: {e}")
            )

        if self.report_sink is not None:
            self.report_sink.publish(analysis)
        return Result.success(analysis)

    def _lineup(self, player_ids, player_index, score_map: ScoreMap, formations):
        members = Roster.coerce(player_ids).members(player_index)
        return self.optimization_service.best_lineup(members, score_map, formations)

