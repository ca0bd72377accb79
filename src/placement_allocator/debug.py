"""ASCII visualisation for development-time verification.

This module is dev-only and not imported by production code.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

from placement_allocator.types import Bin, Item


def show_placement(
    placement: Mapping[Item, Bin],
    bins: Sequence[Bin],
    capacity: Callable[[Bin], int] | None = None,
) -> str:
    """Print ASCII occupancy view, one row per bin.

    Legend: '#' = placed item, '.' = free capacity, '!' = over capacity.
    Without a capacity function only '#' is drawn.
    Returns the string and also prints to stdout.
    """
    lines: list[str] = []

    by_bin: dict[Bin, list[Item]] = {b: [] for b in bins}
    for item, b in sorted(placement.items()):
        by_bin.setdefault(b, []).append(item)

    label_width = max((len(str(b)) for b in by_bin), default=0)

    for b, placed in by_bin.items():
        count = len(placed)
        if capacity is None:
            bar = "#" * count
            usage = f"{count}"
        else:
            cap = capacity(b)
            bar = "#" * min(count, cap) + "!" * max(0, count - cap)
            bar += "." * max(0, cap - count)
            usage = f"{count}/{cap}"

        members = " ".join(str(int(i)) for i in placed)
        lines.append(f"{str(b):>{label_width}s}  {bar}  {usage:>5s}  {members}")

    total = len(placement)
    lines.append(f"\n{total} items across {sum(1 for p in by_bin.values() if p)} bins")

    result = "\n".join(lines)
    print(result)
    return result


def show_churn(
    previous: Mapping[Item, Bin],
    current: Mapping[Item, Bin],
) -> str:
    """Print the items that changed bins between two placements.

    Items added or dropped between the rounds are listed separately and do
    not count as moves.
    Returns the string and also prints to stdout.
    """
    lines: list[str] = []

    moved = [
        (item, previous[item], b)
        for item, b in sorted(current.items())
        if item in previous and previous[item] != b
    ]
    added = sorted(item for item in current if item not in previous)
    dropped = sorted(item for item in previous if item not in current)

    for item, old, new in moved:
        lines.append(f"  {str(item):>10s}  {old} -> {new}")

    if added:
        lines.append("  added:   " + ", ".join(str(i) for i in added))
    if dropped:
        lines.append("  dropped: " + ", ".join(str(i) for i in dropped))

    lines.append(f"\nchurn: {len(moved)}")

    result = "\n".join(lines)
    print(result)
    return result
