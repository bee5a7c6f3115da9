"""Build the set of items that need reordering, shaped for analysis."""

from __future__ import annotations

from typing import Iterable

from src.inventory.status import is_urgent
from src.models.schemas import InventoryItem, ReorderCandidate


def to_candidate(item: InventoryItem) -> ReorderCandidate:
    """Project *item* into a ``ReorderCandidate`` with its total stock value."""
    return ReorderCandidate(
        name=item.name,
        current_stock=item.current_stock,
        reorder_level=item.reorder_level,
        unit=item.unit,
        unit_cost=item.unit_cost,
        total_stock_value=item.current_stock * item.unit_cost,
        vendor=item.primary_vendor,
        vendor_contact=item.vendor_contact,
    )


def build_reorder_set(items: Iterable[InventoryItem]) -> list[ReorderCandidate]:
    """Return candidates for every urgent item, in input order.

    An empty result is a normal outcome: nothing needs reordering.
    """
    return [to_candidate(item) for item in items if is_urgent(item)]
