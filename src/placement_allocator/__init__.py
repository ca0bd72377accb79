"""placement-allocator: constraint-model placement of items into capacity-bounded bins."""

from placement_allocator.allocator import (
    Allocator,
    allocate_round,
    bin_loads,
    count_churn,
)
from placement_allocator.config import (
    DEFAULT_SOLVER_CONFIG,
    REFERENCE_POLICY,
    AllocatorOptions,
    Policy,
    SolverConfig,
)
from placement_allocator.cpsat import CpSatBackend
from placement_allocator.solver import SolveResult, SolverBackend
from placement_allocator.types import (
    AllocationError,
    AllocationResult,
    Bin,
    Item,
    ItemBin,
    Placement,
    Resource,
    SolveStatus,
)

__all__ = [
    "AllocationError",
    "AllocationResult",
    "Allocator",
    "AllocatorOptions",
    "Bin",
    "CpSatBackend",
    "DEFAULT_SOLVER_CONFIG",
    "Item",
    "ItemBin",
    "Placement",
    "Policy",
    "REFERENCE_POLICY",
    "Resource",
    "SolveResult",
    "SolveStatus",
    "SolverBackend",
    "SolverConfig",
    "allocate_round",
    "bin_loads",
    "count_churn",
]
