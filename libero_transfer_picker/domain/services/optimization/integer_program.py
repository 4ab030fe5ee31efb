"""Solver-agnostic 0/1 integer programs and a PuLP backend.

Strategies describe their program (binary variables, linear objective,
linear constraints) as an IntegerProgram and hand it to any
IntegerProgramBackend. PulpIntegerProgramBackend solves it with CBC.
"""

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Optional

import pulp
from loguru import logger
from pydantic import BaseModel, Field


class ConstraintSense(str, Enum):
    LESS_EQUAL = "<="
    EQUAL = "=="
    GREATER_EQUAL = ">="


class LinearConstraint(BaseModel):
    """``Σ coefficient · variable  (sense)  rhs``"""

    name: str = Field(..., min_length=1)
    coefficients: Dict[str, float] = Field(default_factory=dict)
    sense: ConstraintSense
    rhs: float

    def is_satisfied(self, values: Dict[str, int]) -> bool:
        lhs = sum(coef * values.get(var, 0) for var, coef in self.coefficients.items())
        if self.sense == ConstraintSense.LESS_EQUAL:
            return lhs <= self.rhs + 1e-9
        if self.sense == ConstraintSense.GREATER_EQUAL:
            return lhs >= self.rhs - 1e-9
        return abs(lhs - self.rhs) <= 1e-9


class IntegerProgram(BaseModel):
    """Binary integer program over named variables."""

    name: str = Field(default="integer_program")
    variables: List[str] = Field(default_factory=list)
    objective: Dict[str, float] = Field(default_factory=dict)
    constraints: List[LinearConstraint] = Field(default_factory=list)
    maximize: bool = True

    def add_constraint(
        self,
        name: str,
        coefficients: Dict[str, float],
        sense: ConstraintSense,
        rhs: float,
    ) -> None:
        self.constraints.append(
            LinearConstraint(name=name, coefficients=coefficients, sense=sense, rhs=rhs)
        )


class SolverStatus(str, Enum):
    OPTIMAL = "optimal"
    FEASIBLE = "feasible"  # stopped early (time limit) with a solution
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    NOT_SOLVED = "not_solved"


class IntegerProgramSolution(BaseModel):
    status: SolverStatus
    values: Dict[str, int] = Field(default_factory=dict)
    objective_value: Optional[float] = None

    @property
    def has_solution(self) -> bool:
        return self.status in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE)


class IntegerProgramBackend(ABC):
    """Anything that can solve an IntegerProgram."""

    @abstractmethod
    def solve(
        self, program: IntegerProgram, time_limit_seconds: Optional[float] = None
    ) -> IntegerProgramSolution:
        """Solve the program, honouring the time limit when given."""


def _sanitize(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_]", "_", name)


class PulpIntegerProgramBackend(IntegerProgramBackend):
    """Solves IntegerPrograms with PuLP and the bundled CBC solver."""

    def __init__(self, msg: bool = False):
        self.msg = msg

    def solve(
        self, program: IntegerProgram, time_limit_seconds: Optional[float] = None
    ) -> IntegerProgramSolution:
        # Constraints without variables are decided here; CBC rejects them
        for constraint in program.constraints:
            if not constraint.coefficients and not constraint.is_satisfied({}):
                logger.debug(f"Constant constraint {constraint.name} cannot hold")
                return IntegerProgramSolution(status=SolverStatus.INFEASIBLE)

        if not program.variables:
            return IntegerProgramSolution(status=SolverStatus.OPTIMAL, objective_value=0.0)

        prob = pulp.LpProblem(
            _sanitize(program.name),
            pulp.LpMaximize if program.maximize else pulp.LpMinimize,
        )

        # Player IDs are not valid LP names, index them instead
        lp_vars = {
            var: pulp.LpVariable(f"x_{i}", cat="Binary")
            for i, var in enumerate(program.variables)
        }

        prob += (
            pulp.lpSum(coef * lp_vars[var] for var, coef in program.objective.items()),
            "Objective",
        )

        for i, constraint in enumerate(program.constraints):
            if not constraint.coefficients:
                continue
            expr = pulp.lpSum(
                coef * lp_vars[var] for var, coef in constraint.coefficients.items()
            )
            name = f"c{i}_{_sanitize(constraint.name)}"
            if constraint.sense == ConstraintSense.LESS_EQUAL:
                prob += expr <= constraint.rhs, name
            elif constraint.sense == ConstraintSense.GREATER_EQUAL:
                prob += expr >= constraint.rhs, name
            else:
                prob += expr == constraint.rhs, name

        logger.debug(
            f"Solving {program.name} with CBC: {len(lp_vars)} variables, "
            f"{len(program.constraints)} constraints"
        )
        prob.solve(pulp.PULP_CBC_CMD(msg=1 if self.msg else 0, timeLimit=time_limit_seconds))

        status = self._map_status(prob)
        if status not in (SolverStatus.OPTIMAL, SolverStatus.FEASIBLE):
            logger.debug(f"CBC finished with status {pulp.LpStatus[prob.status]}")
            return IntegerProgramSolution(status=status)

        values = {
            var: int(round(lp_var.varValue or 0.0)) for var, lp_var in lp_vars.items()
        }
        return IntegerProgramSolution(
            status=status,
            values=values,
            objective_value=pulp.value(prob.objective),
        )

    @staticmethod
    def _map_status(prob: pulp.LpProblem) -> SolverStatus:
        if prob.status == pulp.LpStatusOptimal:
            if prob.sol_status == pulp.LpSolutionIntegerFeasible:
                return SolverStatus.FEASIBLE
            return SolverStatus.OPTIMAL
        if prob.status == pulp.LpStatusInfeasible:
            return SolverStatus.INFEASIBLE
        if prob.status == pulp.LpStatusUnbounded:
            return SolverStatus.UNBOUNDED
        if prob.sol_status == pulp.LpSolutionIntegerFeasible:
            return SolverStatus.FEASIBLE
        return SolverStatus.NOT_SOLVED
