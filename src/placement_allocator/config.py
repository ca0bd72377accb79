"""Configuration records: option toggles, placement policy, solver settings."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from placement_allocator.types import Bin, Item, Resource


@dataclass(frozen=True)
class AllocatorOptions:
    """Toggles for the optional constraint families. Set once per allocator.

    disable_even_distribution: drop the minimize-max-surplus objective.
    disable_max_churn: drop the bound on items moved since the last placement.
    disable_capacity_checking: drop the per-bin capacity constraint.
    """

    disable_even_distribution: bool = False
    disable_max_churn: bool = False
    disable_capacity_checking: bool = False


def _one_copy(item: Item) -> int:
    return 1


def _unit_cost(item: Item, resource: Resource) -> int:
    return 1


def _ten_per_bin(bin: Bin) -> int:
    return 10


def _ten_moves() -> int:
    return 10


@dataclass(frozen=True)
class Policy:
    """Pluggable policy functions consulted while building the model.

    The reference values are trivial constants; any other policy is the
    caller's to supply.
    """

    copies: Callable[[Item], int] = _one_copy
    required: Callable[[Item, Resource], int] = _unit_cost
    capacity: Callable[[Bin], int] = _ten_per_bin
    max_churn: Callable[[], int] = _ten_moves

    def total_copies(self, items: Iterable[Item]) -> int:
        """Sum of the replication factor over the given items."""
        return sum(self.copies(i) for i in items)

    def replace(self, **changes) -> Policy:
        """Copy of this policy with some functions swapped out."""
        return dataclasses.replace(self, **changes)


REFERENCE_POLICY = Policy()


@dataclass(frozen=True)
class SolverConfig:
    """Settings handed to the CP-SAT backend. Immutable.

    max_time_seconds=None leaves the search unbounded; a bounded search may
    stop with a feasible but unproven solution, which the allocator rejects.
    """

    max_time_seconds: float | None = None
    num_workers: int = 8
    random_seed: int | None = None
    log_search_progress: bool = False


DEFAULT_SOLVER_CONFIG = SolverConfig()
