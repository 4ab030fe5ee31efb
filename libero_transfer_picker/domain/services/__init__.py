"""Domain services for business logic."""

from .optimization_service import OptimizationService
from .performance_analytics_service import PerformanceAnalyticsService
from .score_aggregation_service import ScoreAggregationService
from .transfer_optimization_service import TransferOptimizationService

__all__ = [
    "OptimizationService",
    "PerformanceAnalyticsService",
    "ScoreAggregationService",
    "TransferOptimizationService",
]
