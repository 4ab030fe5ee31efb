"""Optimization service for roster transfer optimization.

This service contains the core transfer optimization algorithms:
- Best starting lineup across formation templates
- Single-swap candidate generation (raw or lineup-aware gain)
- Transfer selection by greedy, brute force or integer program

Optimization Methods:
- Greedy: fast, deterministic, may miss budget-coupled combinations
- Brute force: optimal over the candidate pool, optionally parallel
- Integer Program (ILP): optimal over the whole market via PuLP/CBC

This is a thin facade that composes all optimization mixins.
"""

from .optimization import TransferOptimizationMixin


class OptimizationService(TransferOptimizationMixin):
    """Service for transfer optimization and lineup scoring.

    This class composes all optimization functionality through mixins:
    - FormationScoringMixin: Best lineup per roster (inherited via CandidateGenerationMixin)
    - CandidateGenerationMixin: Single-swap candidates (inherited via TransferOptimizationMixin)
    - TransferOptimizationMixin: Strategy dispatch
    """
