"""Repository interfaces for data access abstraction."""

from .player_repository import (
    MatchdayScoreProvider,
    PlayerMetadataProvider,
    ReportSink,
    RosterStore,
)

__all__ = [
    "PlayerMetadataProvider",
    "MatchdayScoreProvider",
    "RosterStore",
    "ReportSink",
]
