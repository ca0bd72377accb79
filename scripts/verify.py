#!/usr/bin/env python
"""Visual verification report for placement-allocator.

Run:  uv run python scripts/verify.py

Produces a formatted report showing:
  1. Allocation scenarios (input/outcome table + ASCII occupancy per bin)
  2. Churn scenarios against a fixed prior placement (moves per round)
  3. A multi-round walk: allocate, add/drop items, re-allocate
"""

from __future__ import annotations

import json
import sys
from datetime import datetime
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths and data loading
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
FIXTURES = ROOT / "data" / "fixtures"
SCENARIOS = FIXTURES / "scenarios"

sys.path.insert(0, str(ROOT / "src"))

from placement_allocator.allocator import Allocator, allocate_round, bin_loads, count_churn
from placement_allocator.config import REFERENCE_POLICY, AllocatorOptions
from placement_allocator.debug import show_churn, show_placement
from placement_allocator.types import Bin, Item


def _load(path: Path):
    with open(path) as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------
WIDTH = 90


def banner(title: str):
    print()
    print("=" * WIDTH)
    print(f"  {title}")
    print("=" * WIDTH)


def heading(title: str):
    print()
    print(f"  {title}")
    print(f"  {'-' * (len(title) + 2)}")


def table(headers: list[str], rows: list[list[str]], indent: int = 4):
    """Print a formatted table with auto-sized columns."""
    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(cell))

    pad = " " * indent
    fmt = pad + "  ".join(f"{{:<{w}}}" for w in col_widths)
    sep = pad + "  ".join("-" * w for w in col_widths)

    print(fmt.format(*headers))
    print(sep)
    for row in rows:
        padded = row + [""] * (len(headers) - len(row))
        print(fmt.format(*padded))


def _options_label(options: dict) -> str:
    enabled = [k.removeprefix("disable_") for k, v in options.items() if v]
    return "no " + ", no ".join(enabled) if enabled else "all"


def _loads_label(placement, bins) -> str:
    loads = bin_loads(placement, bins)
    return " ".join(str(loads[b]) for b in bins)


# ---------------------------------------------------------------------------
# Section 1: Allocation scenarios
# ---------------------------------------------------------------------------
def section_allocate():
    banner("ALLOCATION SCENARIOS")

    data = _load(SCENARIOS / "allocate.json")

    heading("Function: Allocator(items, bins, resources).allocate()")
    print("    Capacity 10 per bin, one copy per item.\n")
    rows = []
    shown = []
    for s in data["allocate"]:
        options = s.get("options", {})
        a = Allocator(s["items"], s["bins"], s["resources"],
                      options=AllocatorOptions(**options))
        placement, ok = a.allocate()
        rows.append([
            s["id"],
            str(s["items"]), str(s["bins"]),
            _options_label(options),
            a.last_result.status.value,
            f"{a.last_result.wall_time:.3f}s",
            _loads_label(placement, a.bins) if ok else "-",
        ])
        if ok and s["items"]:
            shown.append((s["id"], placement, a.bins))
    table(["Scenario", "Items", "Bins", "Constraints", "Status", "Time", "Loads"], rows)

    for name, placement, bins in shown:
        heading(f"Placement: {name}")
        show_placement(placement, bins, REFERENCE_POLICY.capacity)


# ---------------------------------------------------------------------------
# Section 2: Churn scenarios
# ---------------------------------------------------------------------------
def section_churn():
    banner("CHURN LIMITING")

    data = _load(SCENARIOS / "churn.json")

    heading("Function: allocate_round(..., last_placement=prev)")
    rows = []
    for s in data["rebalance"]:
        items = [Item(i) for i in range(s["items"])]
        bins = [Bin(j) for j in range(s["bins"])]
        last = {Item(int(k)): Bin(v) for k, v in s["last_placement"].items()}
        budget = s["max_churn"]
        policy = REFERENCE_POLICY.replace(max_churn=lambda: budget)
        options = s.get("options", {})

        result = allocate_round(items, bins, policy=policy,
                                options=AllocatorOptions(**options),
                                last_placement=last)
        rows.append([
            s["id"],
            str(budget),
            _options_label(options),
            result.status.value,
            str(count_churn(last, result.placement)) if result.ok else "-",
            _loads_label(result.placement, bins) if result.ok else "-",
        ])
    table(["Scenario", "Budget", "Constraints", "Status", "Moved", "Loads"], rows)


# ---------------------------------------------------------------------------
# Section 3: Multi-round walk
# ---------------------------------------------------------------------------
def section_rounds():
    banner("MULTI-ROUND WALK")

    a = Allocator(5, 3, 1, policy=REFERENCE_POLICY.replace(max_churn=lambda: 1))
    placement, _ = a.allocate()
    heading("Round 1: 5 items, 3 bins, budget 1")
    show_placement(placement, a.bins, REFERENCE_POLICY.capacity)

    steps = [("add", a.add_item), ("add", a.add_item), ("drop", a.drop_item)]
    for n, (label, step) in enumerate(steps, start=2):
        changed = step()
        previous = dict(a.last_placement)
        placement, ok = a.allocate()
        heading(f"Round {n}: {label} {changed}")
        if not ok:
            print(f"    {a.last_result.status.value}: last placement kept")
            continue
        show_placement(placement, a.bins, REFERENCE_POLICY.capacity)
        show_churn(previous, placement)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main():
    banner("PLACEMENT-ALLOCATOR   --  VISUAL VERIFICATION REPORT")
    print(f"    Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    print(f"    Fixture data: {FIXTURES.relative_to(ROOT)}/")

    section_allocate()
    section_churn()
    section_rounds()

    banner("END OF REPORT")
    print()


if __name__ == "__main__":
    main()
