"""Constraint model builder: placement rules as boolean/linear constraints.

Builds one boolean literal per (item, bin) and emits, in order:

1. replication  -- exactly copies(item) bins per item (always)
2. capacity     -- per-bin count within [0, capacity(bin)]
3. even spread  -- minimize the largest per-bin surplus over the floor average
4. churn        -- at most max_churn() previous (item, bin) pairs not repeated
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from placement_allocator.config import AllocatorOptions, Policy
from placement_allocator.literals import LiteralTable
from placement_allocator.solver import SolverBackend
from placement_allocator.types import Bin, Item, ItemBin, Resource

logger = logging.getLogger(__name__)

# Upper bound of the auxiliary max-surplus variable.
MAX_SURPLUS_BOUND = 100


@dataclass
class BuiltModel:
    """A fully constrained model and the literal table used to decode it."""

    backend: SolverBackend
    table: LiteralTable
    churn_literals: int = 0
    average_load: int | None = None


def build_model(
    backend: SolverBackend,
    items: Sequence[Item],
    bins: Sequence[Bin],
    resources: Sequence[Resource],
    policy: Policy,
    options: AllocatorOptions,
    last_placement: Mapping[Item, Bin] | None = None,
) -> BuiltModel:
    """Populate ``backend`` with the placement model for one round.

    Args:
        backend: Fresh solver backend; receives every variable and constraint.
        items: Current item set.
        bins: Bin set.
        resources: Resource set (reserved; validated but not constrained).
        policy: Replication, cost, capacity and churn functions.
        options: Which optional constraint families to skip.
        last_placement: Previous successful placement, or None/empty.

    Returns:
        BuiltModel with the literal table for decoding.
    """
    table = LiteralTable(items, bins)
    for item in items:
        for b in bins:
            table.set(item, b, backend.new_literal(str(ItemBin(item, b))))

    built = BuiltModel(backend=backend, table=table)

    for item in items:
        backend.add_exactly_k(policy.copies(item), table.row(item))

    if not options.disable_capacity_checking:
        _add_capacity(backend, table, policy)

    if not options.disable_even_distribution and bins and items:
        built.average_load = _add_even_distribution(backend, table, policy)

    if not options.disable_max_churn and last_placement:
        built.churn_literals = _add_churn(backend, table, policy, last_placement)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Built placement model:\n%s",
            backend.describe(),
            extra={
                "items": len(items),
                "bins": len(bins),
                "resources": len(resources),
                "literals": len(table),
                "churn_literals": built.churn_literals,
            },
        )
    return built


def _add_capacity(
    backend: SolverBackend, table: LiteralTable, policy: Policy
) -> None:
    for b in table.bins:
        placed = backend.linear_expr([(lit, 1) for lit in table.column(b)])
        backend.add_linear_in_domain(placed, backend.domain(0, policy.capacity(b)))


def _add_even_distribution(
    backend: SolverBackend, table: LiteralTable, policy: Policy
) -> int:
    """Minimize max(placed_in_bin - avg). Returns the floor average used."""
    avg = policy.total_copies(table.items) // len(table.bins)

    surpluses = []
    for b in table.bins:
        # placed - avg; may go negative, only the max is bounded
        terms = [(lit, 1) for lit in table.column(b)]
        surpluses.append(backend.linear_expr(terms, -avg))

    max_surplus = backend.new_int_var(0, MAX_SURPLUS_BOUND, "max-surplus")
    backend.add_max_equality(max_surplus, surpluses)
    backend.minimize(backend.linear_expr([(max_surplus, 1)]))
    return avg


def _add_churn(
    backend: SolverBackend,
    table: LiteralTable,
    policy: Policy,
    last_placement: Mapping[Item, Bin],
) -> int:
    """Bound the previously placed pairs that are not repeated this round.

    Items absent from the current item set, and bins no longer present, do not
    contribute. Returns the number of negated literals constrained.
    """
    moved = []
    for item in table.items:
        prev = last_placement.get(item)
        if prev is None or prev not in table.bins:
            continue
        # true exactly when the item leaves its previous bin
        moved.append(backend.negate(table.get(item, prev)))

    if moved:
        backend.add_at_most_k(policy.max_churn(), moved)
    return len(moved)
