"""
Libero Transfer Picker Configuration Module

Import the global config instance to access configuration values.

Usage:
    from libero_transfer_picker.config import config

    budget_cap = config.optimization.budget_cap
    target_rounds = config.season.target_range
"""

from .settings import (
    DataLoadingConfig,
    LiberoConfig,
    LineupConfig,
    OptimizationConfig,
    SeasonConfig,
    config,
    load_config,
)

__all__ = [
    "LiberoConfig",
    "OptimizationConfig",
    "SeasonConfig",
    "LineupConfig",
    "DataLoadingConfig",
    "config",
    "load_config",
]
