"""OR-Tools CP-SAT adapter for the solver capability.

One CpSatBackend wraps one fresh cp_model.CpModel; build a new backend per
allocation round.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ortools.sat.python import cp_model

from placement_allocator.config import DEFAULT_SOLVER_CONFIG, SolverConfig
from placement_allocator.solver import SolveResult, SolverBackend
from placement_allocator.types import SolveStatus

_STATUS = {
    cp_model.OPTIMAL: SolveStatus.OPTIMAL,
    cp_model.FEASIBLE: SolveStatus.FEASIBLE,
    cp_model.INFEASIBLE: SolveStatus.INFEASIBLE,
    cp_model.MODEL_INVALID: SolveStatus.MODEL_INVALID,
    cp_model.UNKNOWN: SolveStatus.UNKNOWN,
}


class CpSatResult(SolveResult):
    """Solved CP-SAT model. Holds the solver to answer valuation queries."""

    def __init__(self, solver: cp_model.CpSolver, status: Any) -> None:
        self._solver = solver
        self.status = _STATUS.get(status, SolveStatus.UNKNOWN)
        self.wall_time = solver.wall_time

    def boolean_value(self, literal: cp_model.IntVar) -> bool:
        if self.status not in (SolveStatus.OPTIMAL, SolveStatus.FEASIBLE):
            raise ValueError(
                f"No solution to read: solve ended with status {self.status.value!r}"
            )
        return bool(self._solver.boolean_value(literal))


class CpSatBackend(SolverBackend):
    """SolverBackend over ortools.sat.python.cp_model."""

    def __init__(
        self, name: str = "allocator", config: SolverConfig | None = None
    ) -> None:
        self.config = config or DEFAULT_SOLVER_CONFIG
        self.model = cp_model.CpModel()
        self.model.name = name

    def new_literal(self, name: str) -> cp_model.IntVar:
        return self.model.new_bool_var(name)

    def new_int_var(self, lo: int, hi: int, name: str) -> cp_model.IntVar:
        return self.model.new_int_var(lo, hi, name)

    def negate(self, literal: cp_model.IntVar) -> Any:
        return literal.negated()

    def linear_expr(
        self, terms: Sequence[tuple[Any, int]], offset: int = 0
    ) -> cp_model.LinearExpr:
        variables = [v for v, _ in terms]
        coefficients = [c for _, c in terms]
        return cp_model.LinearExpr.weighted_sum(variables, coefficients) + offset

    def domain(self, lo: int, hi: int) -> cp_model.Domain:
        return cp_model.Domain(lo, hi)

    def add_exactly_k(self, k: int, literals: Sequence[Any]) -> None:
        self.model.add(cp_model.LinearExpr.sum(list(literals)) == k)

    def add_at_most_k(self, k: int, literals: Sequence[Any]) -> None:
        self.model.add(cp_model.LinearExpr.sum(list(literals)) <= k)

    def add_linear_in_domain(
        self, expr: cp_model.LinearExpr, domain: cp_model.Domain
    ) -> None:
        self.model.add_linear_expression_in_domain(expr, domain)

    def add_max_equality(self, target: Any, exprs: Sequence[Any]) -> None:
        self.model.add_max_equality(target, list(exprs))

    def minimize(self, expr: cp_model.LinearExpr) -> None:
        self.model.minimize(expr)

    def validate(self) -> tuple[bool, str]:
        detail = self.model.validate()
        return detail == "", detail

    def solve(self) -> CpSatResult:
        solver = cp_model.CpSolver()
        params = solver.parameters
        if self.config.max_time_seconds is not None:
            params.max_time_in_seconds = self.config.max_time_seconds
        params.num_workers = self.config.num_workers
        if self.config.random_seed is not None:
            params.random_seed = self.config.random_seed
        params.log_search_progress = self.config.log_search_progress

        status = solver.solve(self.model)
        return CpSatResult(solver, status)

    def describe(self) -> str:
        return self.model.model_stats()
