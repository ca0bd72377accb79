"""Hypothesis property-based tests.

Properties that must hold for all valid inputs, verified by random generation.
Every example runs the real CP-SAT backend, so example counts stay small.
"""

from __future__ import annotations

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from conftest import make_allocator

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------
_items = st.integers(min_value=1, max_value=12)
_bins = st.integers(min_value=1, max_value=4)
_budget = st.integers(min_value=0, max_value=3)
_mutations = st.lists(st.sampled_from(["add", "drop"]), min_size=1, max_size=3)


def _budget_policy(k: int):
    from placement_allocator.config import REFERENCE_POLICY

    return REFERENCE_POLICY.replace(max_churn=lambda: k)


# ---------------------------------------------------------------------------
# Property: churn never exceeds the budget
# ---------------------------------------------------------------------------
class TestChurnBound:

    @given(items=_items, bins=_bins, k=_budget, mutations=_mutations)
    @settings(max_examples=25, deadline=None)
    def test_moves_within_budget(self, items, bins, k, mutations):
        """After add/drop and a successful re-allocate, moved items <= k."""
        from placement_allocator.allocator import count_churn

        a = make_allocator(items, bins, policy=_budget_policy(k))
        first, ok = a.allocate()
        assume(ok)

        for m in mutations:
            if m == "add":
                a.add_item()
            elif a.items:
                a.drop_item()

        second, ok = a.allocate()
        assume(ok)
        assert count_churn(first, second) <= k


# ---------------------------------------------------------------------------
# Property: every accepted placement is complete and within capacity
# ---------------------------------------------------------------------------
class TestPlacementShape:

    @given(items=st.integers(min_value=0, max_value=25), bins=_bins)
    @settings(max_examples=25, deadline=None)
    def test_feasible_iff_total_capacity_suffices(self, items, bins):
        """With uniform capacity 10, a round succeeds exactly when items <= 10 * bins."""
        from placement_allocator.allocator import bin_loads

        a = make_allocator(items, bins)
        placement, ok = a.allocate()

        assert ok is (items <= 10 * bins)
        if ok:
            assert set(placement) == set(a.items)
            loads = bin_loads(placement, a.bins)
            assert max(loads.values()) <= 10
            # min-max spread: the fullest bin holds ceil(items / bins)
            assert max(loads.values()) == -(-items // bins)
