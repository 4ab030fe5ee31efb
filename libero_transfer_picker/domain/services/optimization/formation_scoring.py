"""Starting-lineup scoring across formation templates.

For a fixed formation the lineup objective is additively separable by
position, so taking the top-k players per position is optimal; trying every
formation covers the outer choice of quotas.
"""

from typing import Dict, List, Mapping, Optional, Sequence

from loguru import logger

from libero_transfer_picker.config import config

from ...models.formation import Formation
from ...models.player import OUTFIELD_POSITIONS, PlayerDomain, Position
from ...models.transfer_plan import Lineup


class FormationScoringMixin:
    """Mixin providing best-lineup selection for a roster."""

    def _rank_by_position(
        self, roster_players: Sequence[PlayerDomain], score_map: Mapping[str, int]
    ) -> Dict[Position, List[PlayerDomain]]:
        """Group players by position, best score first, lower ID on ties."""
        by_position: Dict[Position, List[PlayerDomain]] = {p: [] for p in Position}
        for player in roster_players:
            by_position[player.position].append(player)
        for position in by_position:
            by_position[position].sort(
                key=lambda p: (-score_map.get(p.player_id, 0), p.player_id)
            )
        return by_position

    def best_lineup(
        self,
        roster_players: Sequence[PlayerDomain],
        score_map: Mapping[str, int],
        formations: Optional[Sequence[Formation]] = None,
    ) -> Lineup:
        """Find the highest-scoring starting lineup over all formations.

        Args:
            roster_players: Roster members with metadata
            score_map: Points per player ID (unknown IDs score 0)
            formations: Formation templates; defaults to the configured set

        Returns:
            Lineup with the chosen players, formation and score. An empty
            Lineup (score 0) when there is no goalkeeper or no formation fits.
        """
        if formations is None:
            formations = config.lineup.formation_models()

        by_position = self._rank_by_position(roster_players, score_map)
        goalkeepers = by_position[Position.GOALKEEPER]
        if not goalkeepers:
            logger.debug("No goalkeeper in roster, lineup score is 0")
            return Lineup()

        goalkeeper = goalkeepers[0]
        best: Optional[Lineup] = None

        for formation in formations:
            quotas = formation.quotas()
            if any(
                len(by_position[position]) < quotas[position]
                for position in OUTFIELD_POSITIONS
            ):
                continue

            starters = [goalkeeper]
            for position in OUTFIELD_POSITIONS:
                starters.extend(by_position[position][: quotas[position]])
            score = sum(score_map.get(p.player_id, 0) for p in starters)

            if best is None or score > best.score:
                best = Lineup(players=starters, formation=formation, score=score)

        if best is None:
            logger.debug("No formation can be filled from this roster")
            return Lineup()
        return best

    def best_lineup_score(
        self,
        roster_players: Sequence[PlayerDomain],
        score_map: Mapping[str, int],
        formations: Optional[Sequence[Formation]] = None,
    ) -> int:
        """Maximum starting-lineup score; 0 when no lineup can be fielded."""
        return self.best_lineup(roster_players, score_map, formations).score
