"""Result decoder: solved literal valuations back into a placement."""

from __future__ import annotations

from placement_allocator.literals import LiteralTable
from placement_allocator.solver import SolveResult
from placement_allocator.types import Bin, Item, Placement


def decode_assignment(
    result: SolveResult, table: LiteralTable
) -> dict[Item, list[Bin]] | None:
    """Every bin each item landed in, in bin order. None unless optimal."""
    if not result.optimal:
        return None

    assignment: dict[Item, list[Bin]] = {}
    for key, literal in table.pairs():
        if result.boolean_value(literal):
            assignment.setdefault(key.item, []).append(key.bin)
    return assignment


def decode_placement(result: SolveResult, table: LiteralTable) -> Placement | None:
    """Item -> bin mapping from the true literals. None unless optimal.

    Each true literal contributes one entry. With more than one copy per item
    the last bin in bin order wins; use decode_assignment for the full set.
    """
    assignment = decode_assignment(result, table)
    if assignment is None:
        return None
    return {item: placed[-1] for item, placed in assignment.items()}
