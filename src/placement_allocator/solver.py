"""Solver capability: the abstract surface the model builder talks to.

Literals, integer variables, expressions and domains are opaque handles owned
by a backend. They are only meaningful to the backend that created them and
only for the round they were created in.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import Any

from placement_allocator.types import SolveStatus

Literal = Any
IntVar = Any
LinearExpr = Any
Domain = Any


class SolveResult(abc.ABC):
    """Terminal result of one solve."""

    status: SolveStatus
    wall_time: float

    @property
    def optimal(self) -> bool:
        """Whether the solve terminated with a proof of optimality."""
        return self.status is SolveStatus.OPTIMAL

    @abc.abstractmethod
    def boolean_value(self, literal: Literal) -> bool:
        """Valuation of a literal in the returned solution."""


class SolverBackend(abc.ABC):
    """One model under construction plus the means to validate and solve it."""

    @abc.abstractmethod
    def new_literal(self, name: str) -> Literal:
        """Create a named boolean decision variable."""

    @abc.abstractmethod
    def new_int_var(self, lo: int, hi: int, name: str) -> IntVar:
        """Create a named integer variable bounded to [lo, hi]."""

    @abc.abstractmethod
    def negate(self, literal: Literal) -> Literal:
        """Literal that is true exactly when ``literal`` is false."""

    @abc.abstractmethod
    def linear_expr(
        self, terms: Sequence[tuple[Any, int]], offset: int = 0
    ) -> LinearExpr:
        """sum(coefficient * variable for variable, coefficient in terms) + offset."""

    @abc.abstractmethod
    def domain(self, lo: int, hi: int) -> Domain:
        """Bounded integer domain [lo, hi]."""

    @abc.abstractmethod
    def add_exactly_k(self, k: int, literals: Sequence[Literal]) -> None:
        """Exactly k of the literals are true."""

    @abc.abstractmethod
    def add_at_most_k(self, k: int, literals: Sequence[Literal]) -> None:
        """At most k of the literals are true."""

    @abc.abstractmethod
    def add_linear_in_domain(self, expr: LinearExpr, domain: Domain) -> None:
        """The expression's value lies in the domain."""

    @abc.abstractmethod
    def add_max_equality(self, target: Any, exprs: Sequence[LinearExpr]) -> None:
        """target == max(exprs)."""

    @abc.abstractmethod
    def minimize(self, expr: LinearExpr) -> None:
        """Set the minimization objective."""

    @abc.abstractmethod
    def validate(self) -> tuple[bool, str]:
        """Check structural well-formedness. Returns (ok, diagnostic detail)."""

    @abc.abstractmethod
    def solve(self) -> SolveResult:
        """Run the search. Blocks until the backend terminates."""

    def describe(self) -> str:
        """Human-readable model summary for debug logging."""
        return type(self).__name__
