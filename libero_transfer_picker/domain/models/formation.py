"""Formation and roster domain models."""

from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .player import PlayerDomain, Position

STARTING_LINEUP_SIZE = 11


class Formation(BaseModel):
    """Outfield quotas of a starting lineup; exactly one goalkeeper is implied."""

    model_config = ConfigDict(frozen=True)

    defenders: int = Field(..., ge=0, description="Starting defenders")
    midfielders: int = Field(..., ge=0, description="Starting midfielders")
    forwards: int = Field(..., ge=0, description="Starting forwards")

    @model_validator(mode="after")
    def validate_lineup_size(self) -> "Formation":
        total = 1 + self.defenders + self.midfielders + self.forwards
        if total != STARTING_LINEUP_SIZE:
            raise ValueError(
                f"Formation {self.label} must field {STARTING_LINEUP_SIZE} players "
                f"including the goalkeeper, got {total}"
            )
        return self

    @classmethod
    def from_label(cls, label: str) -> "Formation":
        """Parse a label such as ``"4-4-2"``."""
        parts = label.strip().split("-")
        if len(parts) != 3 or not all(p.strip().isdigit() for p in parts):
            raise ValueError(f"Formation label must look like 'D-M-F', got {label!r}")
        defenders, midfielders, forwards = (int(p) for p in parts)
        return cls(defenders=defenders, midfielders=midfielders, forwards=forwards)

    @property
    def label(self) -> str:
        return f"{self.defenders}-{self.midfielders}-{self.forwards}"

    def quotas(self) -> Dict[Position, int]:
        return {
            Position.DEFENDER: self.defenders,
            Position.MIDFIELDER: self.midfielders,
            Position.FORWARD: self.forwards,
        }


class Roster(BaseModel):
    """Ordered set of owned player IDs."""

    model_config = ConfigDict(frozen=True)

    player_ids: Tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("player_ids", mode="before")
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return tuple(str(pid) if isinstance(pid, int) else pid for pid in v)
        return v

    @field_validator("player_ids")
    @classmethod
    def validate_unique(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        seen = set()
        duplicates = []
        for pid in v:
            if pid in seen and pid not in duplicates:
                duplicates.append(pid)
            seen.add(pid)
        if duplicates:
            raise ValueError(f"Duplicate player IDs in roster: {duplicates}")
        return v

    @classmethod
    def coerce(cls, roster: Union["Roster", Iterable[str]]) -> "Roster":
        """Accept an existing Roster or any iterable of player IDs."""
        if isinstance(roster, Roster):
            return roster
        return cls(player_ids=list(roster))

    def __contains__(self, player_id: object) -> bool:
        return player_id in self.player_ids

    def __len__(self) -> int:
        return len(self.player_ids)

    def budget(self, players: Mapping[str, PlayerDomain]) -> int:
        """Sum of market values over members with eligible metadata."""
        total = 0
        for pid in self.player_ids:
            player = players.get(pid)
            if player is not None and player.is_eligible:
                total += player.market_value
        return total

    def members(self, players: Mapping[str, PlayerDomain]) -> List[PlayerDomain]:
        """Roster members that have metadata, in roster order."""
        return [players[pid] for pid in self.player_ids if pid in players]
