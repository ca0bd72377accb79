"""Allocator: one placement round per call, carrying the last placement forward.

allocate_round() is the explicit-state form: the prior placement goes in, the
new one comes out in an AllocationResult. Allocator wraps it with the item set
mutators and keeps the last successful placement between rounds.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable, Mapping, Sequence

from placement_allocator.config import REFERENCE_POLICY, AllocatorOptions, Policy
from placement_allocator.cpsat import CpSatBackend
from placement_allocator.decode import decode_placement
from placement_allocator.model import build_model
from placement_allocator.schema import validate_policy
from placement_allocator.solver import SolverBackend
from placement_allocator.types import (
    AllocationError,
    AllocationResult,
    Bin,
    Item,
    Placement,
    Resource,
    SolveStatus,
)

logger = logging.getLogger(__name__)


def allocate_round(
    items: Sequence[Item],
    bins: Sequence[Bin],
    resources: Sequence[Resource] = (),
    *,
    policy: Policy = REFERENCE_POLICY,
    options: AllocatorOptions | None = None,
    last_placement: Mapping[Item, Bin] | None = None,
    backend: SolverBackend | None = None,
) -> AllocationResult:
    """Build, validate, solve and decode one placement round.

    Does not mutate any argument. The returned placement is a new dict.

    Args:
        items: Items to place.
        bins: Bins to place them into.
        resources: Resource dimensions (reserved).
        policy: Replication, cost, capacity and churn functions.
        options: Optional constraint families to skip. Defaults to none skipped.
        last_placement: Prior placement for the churn constraint.
        backend: Fresh solver backend. Defaults to a new CpSatBackend.

    Returns:
        AllocationResult. ``placement`` is set only when the status is OPTIMAL.
    """
    options = options or AllocatorOptions()
    backend = backend if backend is not None else CpSatBackend()

    errors = validate_policy(items, bins, resources, policy)
    if errors:
        logger.warning(
            "Placement policy rejected", extra={"errors": errors[:10]}
        )
        return AllocationResult(SolveStatus.MODEL_INVALID, diagnostics=tuple(errors))

    built = build_model(
        backend, items, bins, resources, policy, options, last_placement
    )

    valid, detail = backend.validate()
    if not valid:
        logger.warning("Placement model failed validation", extra={"detail": detail})
        return AllocationResult(SolveStatus.MODEL_INVALID, diagnostics=(detail,))

    start = time.perf_counter()
    result = backend.solve()
    elapsed = time.perf_counter() - start

    placement = decode_placement(result, built.table)
    logger.info(
        "Allocation round finished: %s in %.3fs",
        result.status.value,
        elapsed,
        extra={
            "status": result.status.value,
            "items": len(items),
            "bins": len(bins),
            "placed": len(placement) if placement is not None else 0,
        },
    )
    return AllocationResult(result.status, placement, elapsed)


def count_churn(previous: Mapping[Item, Bin], current: Mapping[Item, Bin]) -> int:
    """Items present in both placements whose bin differs."""
    return sum(
        1 for item, b in current.items() if item in previous and previous[item] != b
    )


def bin_loads(placement: Mapping[Item, Bin], bins: Iterable[Bin]) -> dict[Bin, int]:
    """Occupancy count for every bin, including empty ones."""
    loads = {b: 0 for b in bins}
    for b in placement.values():
        loads[b] = loads.get(b, 0) + 1
    return loads


class Allocator:
    """Owns the item/bin/resource sets, options and the last placement.

    Not safe for concurrent use: callers serialize add_item, drop_item and
    allocate.
    """

    def __init__(
        self,
        item_count: int,
        bin_count: int,
        resource_count: int,
        *,
        policy: Policy = REFERENCE_POLICY,
        options: AllocatorOptions | None = None,
        backend_factory: Callable[[], SolverBackend] = CpSatBackend,
    ) -> None:
        self.items: list[Item] = [Item(i) for i in range(item_count)]
        self.bins: tuple[Bin, ...] = tuple(Bin(i) for i in range(bin_count))
        self.resources: tuple[Resource, ...] = tuple(
            Resource(i) for i in range(resource_count)
        )
        self.policy = policy
        self.options = options or AllocatorOptions()
        self.backend_factory = backend_factory
        self.last_placement: Placement = {}
        self.last_result: AllocationResult | None = None

    def add_item(self) -> Item:
        """Append an item with id max + 1 (0 for an empty set)."""
        item = Item(max(self.items) + 1) if self.items else Item(0)
        self.items.append(item)
        return item

    def drop_item(self) -> Item:
        """Remove the highest-id item.

        The last placement keeps its entry; the next churn constraint only
        looks at current items.

        Raises:
            IndexError: If there are no items.
        """
        if not self.items:
            raise IndexError("drop_item from an empty item set")
        return self.items.pop()

    def run(self) -> AllocationResult:
        """One round against the current state. Updates last_placement on success."""
        result = allocate_round(
            self.items,
            self.bins,
            self.resources,
            policy=self.policy,
            options=self.options,
            last_placement=self.last_placement,
            backend=self.backend_factory(),
        )
        self.last_result = result
        if result.placement is not None:
            self.last_placement = dict(result.placement)
        return result

    def allocate(self) -> tuple[Placement | None, bool]:
        """Run one round. Returns (placement, True) or (None, False)."""
        result = self.run()
        return result.placement, result.ok

    def allocate_or_raise(self) -> Placement:
        """Run one round, raising AllocationError instead of returning False."""
        result = self.run()
        if result.placement is None:
            reason = "; ".join(result.diagnostics) or "no optimal placement"
            raise AllocationError(result.status, reason)
        return result.placement
