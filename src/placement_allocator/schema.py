"""Input validation for placement policies."""

from __future__ import annotations

from collections.abc import Sequence

from placement_allocator.config import Policy
from placement_allocator.types import Bin, Item, Resource


def validate_policy(
    items: Sequence[Item],
    bins: Sequence[Bin],
    resources: Sequence[Resource],
    policy: Policy,
) -> list[str]:
    """Validate policy values for one round. Returns error messages (empty = valid).

    Checks:
    - copies(item) is non-negative
    - required(item, resource) is non-negative
    - capacity(bin) is non-negative
    - max_churn() is non-negative
    """
    errors: list[str] = []

    for item in items:
        copies = policy.copies(item)
        if copies < 0:
            errors.append(f"{item}: copies must be >= 0, got {copies}")

        for resource in resources:
            required = policy.required(item, resource)
            if required < 0:
                errors.append(
                    f"{item}, {resource}: required must be >= 0, got {required}"
                )

    for b in bins:
        capacity = policy.capacity(b)
        if capacity < 0:
            errors.append(f"{b}: capacity must be >= 0, got {capacity}")

    max_churn = policy.max_churn()
    if max_churn < 0:
        errors.append(f"max_churn must be >= 0, got {max_churn}")

    return errors
