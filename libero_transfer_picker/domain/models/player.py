"""Player and scoring-event domain models."""

from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Position(str, Enum):
    """Player positions as delivered by the provider."""

    GOALKEEPER = "GOALKEEPER"
    DEFENDER = "DEFENDER"
    MIDFIELDER = "MIDFIELDER"
    FORWARD = "FORWARD"


OUTFIELD_POSITIONS = (Position.DEFENDER, Position.MIDFIELDER, Position.FORWARD)


class PlayerDomain(BaseModel):
    """
    Domain model for a player in the transfer market.

    Accepts both the canonical field names and the provider's original
    German column names. Unknown fields are ignored so persisted fixtures
    with extra columns load unchanged.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    player_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("player_id", "id", "ID"),
        description="Provider player ID",
    )
    display_name: str = Field(
        default="",
        validation_alias=AliasChoices(
            "display_name", "displayName", "Angezeigter Name", "name"
        ),
        description="Display name",
    )
    club: str = Field(
        default="",
        validation_alias=AliasChoices("club", "Verein", "team"),
        description="Club name",
    )
    position: Position = Field(
        ...,
        validation_alias=AliasChoices("position", "Position"),
        description="Player position",
    )
    market_value: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("market_value", "marketValue", "Marktwert"),
        description="Market value in currency units (None when missing)",
    )

    @field_validator("player_id", mode="before")
    @classmethod
    def coerce_player_id(cls, v: Any) -> Any:
        """Provider IDs arrive as strings or integers."""
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("display_name", "club", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("market_value", mode="before")
    @classmethod
    def parse_market_value(cls, v: Any) -> Optional[int]:
        """Parse numeric strings; anything unparseable counts as missing."""
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return int(v)
        text = str(v).strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            try:
                return int(float(text))
            except ValueError:
                return None

    @property
    def is_eligible(self) -> bool:
        """Only players with a positive market value take part in optimization."""
        return self.market_value is not None and self.market_value > 0


class ScoreEvent(BaseModel):
    """Points a player earned in one round."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    player_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("player_id", "playerId", "id"),
    )
    round_number: int = Field(
        ...,
        ge=1,
        validation_alias=AliasChoices("round_number", "roundNumber", "round"),
    )
    points: int = Field(default=0)

    @field_validator("player_id", mode="before")
    @classmethod
    def coerce_player_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("points", mode="before")
    @classmethod
    def missing_points_are_zero(cls, v: Any) -> Any:
        if v is None:
            return 0
        if isinstance(v, float):
            return int(v)
        return v
