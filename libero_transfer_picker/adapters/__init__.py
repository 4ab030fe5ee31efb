"""Infrastructure adapters for repository pattern implementations."""

from .json_repositories import (
    JsonMatchdayScoreRepository,
    JsonPlayerRepository,
    JsonRosterStore,
)

__all__ = ["JsonPlayerRepository", "JsonMatchdayScoreRepository", "JsonRosterStore"]
