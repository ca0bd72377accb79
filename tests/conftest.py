"""Shared test fixtures and data loading for placement-allocator.

Scenario data lives in data/fixtures/scenarios/ as JSON files.  This module
loads that data and exposes helper functions + pytest fixtures for the tests,
including a recording backend that captures the constraints a model emits
without solving anything.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
def make_backend():
    """Single-worker CP-SAT backend; deterministic for a given model."""
    from placement_allocator.config import SolverConfig
    from placement_allocator.cpsat import CpSatBackend

    return CpSatBackend(
        config=SolverConfig(max_time_seconds=30.0, num_workers=1, random_seed=7)
    )


def make_options(spec: dict):
    """AllocatorOptions from a scenario's optional "options" block."""
    from placement_allocator.config import AllocatorOptions

    return AllocatorOptions(**spec.get("options", {}))


def make_allocator(items: int, bins: int, resources: int = 1, **kwargs):
    """Allocator wired to the deterministic test backend."""
    from placement_allocator.allocator import Allocator

    return Allocator(items, bins, resources, backend_factory=make_backend, **kwargs)


def parse_placement(raw: dict[str, int]):
    """Convert {"0": 1, ...} to {Item(0): Bin(1), ...}."""
    from placement_allocator.types import Bin, Item

    return {Item(int(k)): Bin(v) for k, v in raw.items()}


def sorted_loads(placement, bins) -> list[int]:
    from placement_allocator.allocator import bin_loads

    return sorted(bin_loads(placement, bins).values())


# ---------------------------------------------------------------------------
# Recording backend
# ---------------------------------------------------------------------------
class FakeLiteral:
    """Named stand-in for a solver literal."""

    def __init__(self, name: str, negated_from: FakeLiteral | None = None):
        self.name = name
        self.negated_from = negated_from

    def __repr__(self) -> str:
        return f"FakeLiteral({self.name!r})"


class FakeResult:
    """SolveResult answering valuations from a name -> bool mapping."""

    def __init__(self, status, values: dict[str, bool] | None = None):
        self.status = status
        self.wall_time = 0.0
        self.values = values or {}

    @property
    def optimal(self) -> bool:
        from placement_allocator.types import SolveStatus

        return self.status is SolveStatus.OPTIMAL

    def boolean_value(self, literal) -> bool:
        return self.values.get(literal.name, False)


class RecordingBackend:
    """SolverBackend that records every call instead of solving."""

    def __init__(self, valid: bool = True, result: FakeResult | None = None):
        self.valid = valid
        self.result = result
        self.literals: list[FakeLiteral] = []
        self.int_vars: list[tuple[int, int, str]] = []
        self.exactly: list[tuple[int, list]] = []
        self.at_most: list[tuple[int, list]] = []
        self.in_domain: list[tuple[tuple, tuple[int, int]]] = []
        self.max_equalities: list[tuple[object, list]] = []
        self.objective = None
        self.solved = False

    def new_literal(self, name):
        lit = FakeLiteral(name)
        self.literals.append(lit)
        return lit

    def new_int_var(self, lo, hi, name):
        var = FakeLiteral(name)
        self.int_vars.append((lo, hi, name))
        return var

    def negate(self, literal):
        return FakeLiteral(f"not {literal.name}", negated_from=literal)

    def linear_expr(self, terms, offset=0):
        return (tuple(terms), offset)

    def domain(self, lo, hi):
        return (lo, hi)

    def add_exactly_k(self, k, literals):
        self.exactly.append((k, list(literals)))

    def add_at_most_k(self, k, literals):
        self.at_most.append((k, list(literals)))

    def add_linear_in_domain(self, expr, domain):
        self.in_domain.append((expr, domain))

    def add_max_equality(self, target, exprs):
        self.max_equalities.append((target, list(exprs)))

    def minimize(self, expr):
        self.objective = expr

    def validate(self):
        return self.valid, "" if self.valid else "recorded model marked invalid"

    def solve(self):
        from placement_allocator.types import SolveStatus

        self.solved = True
        return self.result or FakeResult(SolveStatus.OPTIMAL)

    def describe(self):
        return f"{len(self.literals)} literals"


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def recording_backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def cpsat_backend():
    return make_backend()


@pytest.fixture
def reference_policy():
    from placement_allocator.config import REFERENCE_POLICY

    return REFERENCE_POLICY
