"""Shared types: identifiers, AllocationResult and AllocationError."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import NamedTuple


class Item(int):
    """A placeable unit of work. Integer identity, display form ``item-<n>``."""

    __slots__ = ()

    def __str__(self) -> str:
        return f"item-{int(self)}"

    def __repr__(self) -> str:
        return f"Item({int(self)})"


class Bin(int):
    """A capacity-bounded placement target. Display form ``bin-<n>``."""

    __slots__ = ()

    def __str__(self) -> str:
        return f"bin-{int(self)}"

    def __repr__(self) -> str:
        return f"Bin({int(self)})"


class Resource(int):
    """A cost dimension an item may consume. Display form ``resource-<n>``."""

    __slots__ = ()

    def __str__(self) -> str:
        return f"resource-{int(self)}"

    def __repr__(self) -> str:
        return f"Resource({int(self)})"


class ItemBin(NamedTuple):
    """Composite key pairing one item with one bin."""

    item: Item
    bin: Bin

    def __str__(self) -> str:
        return f"{self.item} in {self.bin}"


Placement = dict[Item, Bin]


class SolveStatus(enum.Enum):
    """Terminal status of one allocation round."""

    OPTIMAL = "optimal"
    FEASIBLE = "feasible"  # stopped before proving optimality
    INFEASIBLE = "infeasible"
    MODEL_INVALID = "model_invalid"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AllocationResult:
    """Immutable outcome of one allocation round.

    Invariants:
        - placement is not None if and only if status is OPTIMAL
        - placement maps every current item to exactly one bin
    """

    status: SolveStatus
    placement: Placement | None = None
    wall_time: float = 0.0
    diagnostics: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        """Whether the round produced a placement."""
        return self.placement is not None


class AllocationError(Exception):
    """Raised when a round ends without an optimal placement."""

    def __init__(self, status: SolveStatus, reason: str) -> None:
        self.status = status
        self.reason = reason
        super().__init__(
            f"Allocation failed with status {status.value!r} (reason: {reason})"
        )
