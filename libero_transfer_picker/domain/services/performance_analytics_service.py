"""Performance analytics service for points-per-million efficiency analysis."""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd
from loguru import logger

from ..models.formation import Roster
from ..models.player import PlayerDomain
from .optimization.optimization_base import PlayerCollection, index_players

EFFICIENCY_COLUMNS = [
    "player_id",
    "display_name",
    "club",
    "position",
    "market_value",
    "points_first_half",
    "points_second_half",
    "points_first_half_per_million",
    "points_second_half_per_million",
]


class PerformanceAnalyticsService:
    """Service for comparing player output against market value."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize the service with configuration.

        Args:
            config: Configuration dictionary for performance analytics
        """
        self.config = config or {
            "top_n": 100,  # Rows kept in the market-wide table
            "decimals": 2,  # Rounding of the per-million columns
        }

    def _efficiency_row(
        self,
        player: PlayerDomain,
        first_half: Mapping[str, int],
        second_half: Mapping[str, int],
    ) -> Dict[str, Any]:
        millions = player.market_value / 1_000_000
        decimals = self.config.get("decimals", 2)
        points_first = first_half.get(player.player_id, 0)
        points_second = second_half.get(player.player_id, 0)
        return {
            "player_id": player.player_id,
            "display_name": player.display_name,
            "club": player.club,
            "position": player.position.value,
            "market_value": player.market_value,
            "points_first_half": points_first,
            "points_second_half": points_second,
            "points_first_half_per_million": round(points_first / millions, decimals),
            "points_second_half_per_million": round(points_second / millions, decimals),
        }

    def _to_frame(self, rows: List[Dict[str, Any]]) -> pd.DataFrame:
        df = pd.DataFrame(rows, columns=EFFICIENCY_COLUMNS)
        if df.empty:
            return df
        # Stable sort keeps input order among equal second-half scores
        return df.sort_values(
            "points_second_half", ascending=False, kind="mergesort"
        ).reset_index(drop=True)

    def efficiency_table(
        self,
        players: PlayerCollection,
        first_half: Mapping[str, int],
        second_half: Mapping[str, int],
        top_n: Optional[int] = None,
    ) -> pd.DataFrame:
        """Points per million market value for every scoring player.

        Args:
            players: Player metadata; ineligible players are skipped
            first_half: Source-period score map
            second_half: Target-period score map
            top_n: Rows to keep (defaults to config ``top_n``)

        Returns:
            DataFrame of EFFICIENCY_COLUMNS, players with any points only,
            sorted by second-half points descending
        """
        top_n = top_n if top_n is not None else self.config.get("top_n", 100)
        index = index_players(players)
        scored_ids = sorted(set(first_half.keys()) | set(second_half.keys()))

        rows = []
        for player_id in scored_ids:
            player = index.get(player_id)
            if player is None or not player.is_eligible:
                continue
            row = self._efficiency_row(player, first_half, second_half)
            if row["points_first_half"] > 0 or row["points_second_half"] > 0:
                rows.append(row)

        df = self._to_frame(rows).head(top_n)
        logger.info(f"💸 Efficiency table: {len(df)} of {len(rows)} scoring players")
        return df

    def roster_efficiency_table(
        self,
        roster: Union[Roster, Sequence[str]],
        players: PlayerCollection,
        first_half: Mapping[str, int],
        second_half: Mapping[str, int],
    ) -> pd.DataFrame:
        """Efficiency of the roster members, sorted by second-half points."""
        index = index_players(players)
        rows = [
            self._efficiency_row(index[pid], first_half, second_half)
            for pid in Roster.coerce(roster).player_ids
            if pid in index and index[pid].is_eligible
        ]
        return self._to_frame(rows)
