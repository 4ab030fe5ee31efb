"""Repository interfaces for player, score and roster data access."""

from abc import ABC, abstractmethod
from typing import List, Tuple, TYPE_CHECKING

from ..common.result import Result
from ..models.formation import Roster
from ..models.player import PlayerDomain, ScoreEvent

if TYPE_CHECKING:
    from ..models.transfer_plan import TransferAnalysis


class PlayerMetadataProvider(ABC):
    """
    Abstract provider of player metadata.

    Provides a consistent interface for the player catalogue regardless of
    the underlying source (persisted JSON, a remote provider, a cache, etc.).
    """

    @abstractmethod
    def get_players(self) -> Result[List[PlayerDomain]]:
        """
        Get every known player.

        Ineligible players (missing or non-positive market value) may be
        included; the engine excludes them itself.

        Returns:
            Result containing list of players or error information
        """
        pass


class MatchdayScoreProvider(ABC):
    """Abstract provider of per-round scoring events."""

    @abstractmethod
    def get_score_events(
        self, round_range: Tuple[int, int]
    ) -> Result[List[ScoreEvent]]:
        """
        Get the scoring events of rounds ``start..end`` (both inclusive).

        A round without data is skipped, not an error.

        Args:
            round_range: (start, end) inclusive round numbers

        Returns:
            Result containing list of score events or error information
        """
        pass


class RosterStore(ABC):
    """Abstract store of the manager's current roster."""

    @abstractmethod
    def load_roster(self) -> Result[Roster]:
        """
        Load the current roster.

        Returns:
            Result containing the roster, or a failure for unreadable data
            and duplicate player IDs
        """
        pass


class ReportSink(ABC):
    """Abstract consumer of finished transfer analyses."""

    @abstractmethod
    def publish(self, analysis: "TransferAnalysis") -> None:
        """
        Publish a finished analysis.

        Args:
            analysis: Plan plus before/after lineup scores
        """
        pass
