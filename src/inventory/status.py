"""Inventory status classification.

An item's status is derived from its quantities and order flag on every
read; it is never stored.
"""

from __future__ import annotations

from src.models.schemas import DerivedStatus, InventoryItem

_PRIORITY: dict[DerivedStatus, int] = {
    DerivedStatus.URGENT_REORDER: 3,
    DerivedStatus.ORDER_PLACED: 2,
    DerivedStatus.WELL_STOCKED: 1,
}


def classify(item: InventoryItem) -> DerivedStatus:
    """Return the operational status of *item*.

    An outstanding order suppresses urgency even when stock is still at or
    below the reorder level, so an ordered item is never ``URGENT_REORDER``.
    """
    if item.current_stock <= item.reorder_level and not item.is_ordered:
        return DerivedStatus.URGENT_REORDER
    if item.is_ordered:
        return DerivedStatus.ORDER_PLACED
    return DerivedStatus.WELL_STOCKED


def is_urgent(item: InventoryItem) -> bool:
    return classify(item) is DerivedStatus.URGENT_REORDER


def status_priority(status: DerivedStatus) -> int:
    """Return the sort rank of *status*; higher means more pressing."""
    return _PRIORITY[status]
