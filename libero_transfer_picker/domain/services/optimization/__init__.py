"""Optimization module for roster transfer optimization.

This module provides:
- Starting lineup scoring across formations
- Single-swap transfer candidate generation
- Transfer selection (greedy, brute force, integer program)

Usage:
    from libero_transfer_picker.domain.services import OptimizationService

    service = OptimizationService()
    plan = service.select_transfers(options, roster, players, strategy="greedy")
"""

from .budget_ledger import BudgetLedger
from .optimization_base import (
    NO_CANDIDATE_REASON,
    OptimizationBaseMixin,
    TransferSelectionInput,
    TransferSelector,
)
from .formation_scoring import FormationScoringMixin
from .candidate_generation import CandidateGenerationMixin
from .integer_program import (
    ConstraintSense,
    IntegerProgram,
    IntegerProgramBackend,
    IntegerProgramSolution,
    LinearConstraint,
    PulpIntegerProgramBackend,
    SolverStatus,
)
from .transfer_greedy import GreedyTransferSelector
from .transfer_bruteforce import BruteForceTransferSelector
from .transfer_ilp import ILPTransferSelector
from .transfer_core import TransferOptimizationMixin

__all__ = [
    "BudgetLedger",
    "NO_CANDIDATE_REASON",
    "OptimizationBaseMixin",
    "TransferSelectionInput",
    "TransferSelector",
    "FormationScoringMixin",
    "CandidateGenerationMixin",
    "ConstraintSense",
    "IntegerProgram",
    "IntegerProgramBackend",
    "IntegerProgramSolution",
    "LinearConstraint",
    "PulpIntegerProgramBackend",
    "SolverStatus",
    "GreedyTransferSelector",
    "BruteForceTransferSelector",
    "ILPTransferSelector",
    "TransferOptimizationMixin",
]
