"""
Global Configuration System for Libero Transfer Picker

Centralized configuration for budget rules, season splits, lineup formations,
solver limits and data locations. Type-safe via pydantic, with JSON file and
environment variable overrides.
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field, field_validator, model_validator

from ..domain.models.formation import Formation
from ..domain.models.transfer_plan import SelectionStrategy


class OptimizationConfig(BaseModel):
    """Transfer Optimization Configuration"""

    budget_cap: int = Field(
        default=42_000_000,
        description="Maximum total market value of the roster after transfers",
        gt=0,
    )
    max_transfers: int = Field(
        default=4, description="Maximum simultaneous transfers per window", ge=0, le=15
    )
    default_strategy: SelectionStrategy = Field(
        default=SelectionStrategy.GREEDY,
        description="Strategy used when the caller does not pick one",
    )
    candidate_pool_size: Optional[int] = Field(
        default=50,
        description="Restrict incoming players to the top-N scorers of the target period "
        "(None = whole market). Keeps brute force tractable.",
        ge=1,
    )
    per_position_cap: Dict[str, int] = Field(
        default_factory=dict,
        description="Optional max transfers per position, e.g. {'GOALKEEPER': 1}",
    )
    bruteforce_workers: int = Field(
        default=1,
        description="Worker processes for exhaustive search (1 = in-process)",
        ge=1,
        le=64,
    )
    time_limit_seconds: Optional[float] = Field(
        default=None,
        description="Deadline for brute force and ILP solves; best-so-far is returned on expiry",
        gt=0,
    )
    lineup_aware_candidates: bool = Field(
        default=False,
        description="Score candidates by starting-lineup improvement instead of raw point difference",
    )

    @field_validator("per_position_cap")
    @classmethod
    def validate_per_position_cap(cls, v: Dict[str, int]) -> Dict[str, int]:
        valid = {"GOALKEEPER", "DEFENDER", "MIDFIELDER", "FORWARD"}
        for position, cap in v.items():
            if position not in valid:
                raise ValueError(f"Unknown position in per_position_cap: {position}")
            if cap < 0:
                raise ValueError(f"per_position_cap for {position} must be >= 0")
        return v


class SeasonConfig(BaseModel):
    """Season Split Configuration

    Rounds are closed, inclusive ranges. The source period is what the
    current roster is judged on; the target period is what incoming players
    are judged on.
    """

    total_rounds: int = Field(default=34, description="Rounds per season", ge=1, le=60)
    source_start: int = Field(default=1, ge=1)
    source_end: int = Field(default=17, ge=1)
    target_start: int = Field(default=18, ge=1)
    target_end: int = Field(default=34, ge=1)

    @model_validator(mode="after")
    def validate_ranges(self):
        if self.source_start > self.source_end:
            raise ValueError("source_start must not exceed source_end")
        if self.target_start > self.target_end:
            raise ValueError("target_start must not exceed target_end")
        if max(self.source_end, self.target_end) > self.total_rounds:
            raise ValueError("round ranges must lie within total_rounds")
        return self

    @property
    def source_range(self) -> tuple:
        return (self.source_start, self.source_end)

    @property
    def target_range(self) -> tuple:
        return (self.target_start, self.target_end)


class LineupConfig(BaseModel):
    """Starting Lineup Configuration"""

    formations: List[str] = Field(
        default_factory=lambda: [
            "3-4-3",
            "3-5-2",
            "4-3-3",
            "4-4-2",
            "4-5-1",
            "5-3-2",
            "5-4-1",
        ],
        description="Allowed formations as D-M-F labels",
    )

    @field_validator("formations")
    @classmethod
    def validate_formations(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one formation is required")
        for label in v:
            Formation.from_label(label)
        return v

    def formation_models(self) -> List[Formation]:
        return [Formation.from_label(label) for label in self.formations]


class DataLoadingConfig(BaseModel):
    """Data Location Configuration"""

    players_path: Path = Field(
        default=Path("data/players/players.json"),
        description="Player metadata (JSON array or JSON Lines)",
    )
    matchday_dir: Path = Field(
        default=Path("data/combined"),
        description="Directory of per-round score files named ...NN.json",
    )
    roster_path: Path = Field(
        default=Path("data/squad/roster.json"),
        description="Current roster as a JSON array of player IDs",
    )


class LiberoConfig(BaseModel):
    """Master Configuration Container"""

    optimization: OptimizationConfig = Field(
        default_factory=OptimizationConfig, description="Optimization Configuration"
    )
    season: SeasonConfig = Field(
        default_factory=SeasonConfig, description="Season Split Configuration"
    )
    lineup: LineupConfig = Field(
        default_factory=LineupConfig, description="Starting Lineup Configuration"
    )
    data: DataLoadingConfig = Field(
        default_factory=DataLoadingConfig, description="Data Location Configuration"
    )


def _parse_env_value(value: str):
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    if value.startswith("{") or value.startswith("["):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    try:
        if "." in value:
            return float(value)
    except ValueError:
        pass
    return value


def load_config(
    config_path: Optional[Path] = None, config_data: Optional[Dict] = None
) -> LiberoConfig:
    """
    Load configuration with environment variable overrides and optional config file

    Args:
        config_path: Optional path to a JSON configuration file
        config_data: Optional dictionary of configuration data

    Environment variables can override any config value using the pattern:
    LIBERO_{SECTION}_{FIELD} = value

    Example: LIBERO_OPTIMIZATION_MAX_TRANSFERS=3
    """
    config_dict: Dict = {}

    if config_path and config_path.exists():
        try:
            with open(config_path, "r") as f:
                if config_path.suffix.lower() == ".json":
                    config_dict = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"⚠️ Failed to load config file {config_path}: {e}")

    if config_data:
        for section, fields in config_data.items():
            if isinstance(fields, dict):
                config_dict.setdefault(section, {}).update(fields)
            else:
                config_dict[section] = fields

    env_overrides: Dict[str, Dict] = {}
    for env_var, value in os.environ.items():
        if not env_var.startswith("LIBERO_"):
            continue
        parts = env_var.split("_")[1:]
        if len(parts) >= 2:
            section = parts[0].lower()
            field = "_".join(parts[1:]).lower()
            env_overrides.setdefault(section, {})[field] = _parse_env_value(value)

    for section, fields in env_overrides.items():
        if not isinstance(config_dict.get(section), dict):
            config_dict[section] = {}
        config_dict[section].update(fields)

    try:
        return LiberoConfig(**config_dict)
    except ValueError as e:
        logger.warning(f"⚠️ Configuration validation failed: {e}")
        logger.warning("Using default configuration...")
        return LiberoConfig()


# Global configuration instance
config = load_config()
