"""Projection of the inventory into the list shown to the user."""

from __future__ import annotations

from typing import Sequence

from src.inventory.status import classify, is_urgent, status_priority
from src.models.schemas import InventoryItem


def matches_search(item: InventoryItem, term: str) -> bool:
    """Return ``True`` if *term* (already lower-cased) occurs in the name or vendor."""
    return term in item.name.lower() or term in item.primary_vendor.lower()


def project(
    items: Sequence[InventoryItem],
    search_term: str = "",
    urgent_only: bool = False,
) -> list[InventoryItem]:
    """Filter and order *items* for display.

    Steps, in order:

    1. keep items whose name or primary vendor contains *search_term*
       (case-insensitive); a blank term keeps everything;
    2. if *urgent_only*, keep only ``URGENT_REORDER`` items;
    3. stable sort by status priority, most pressing first.

    The input sequence is never modified; a new list is returned.
    """
    term = search_term.strip().lower()
    visible = [item for item in items if matches_search(item, term)] if term else list(items)

    if urgent_only:
        visible = [item for item in visible if is_urgent(item)]

    # list.sort is stable, so equal-priority items keep their order.
    visible.sort(key=lambda item: status_priority(classify(item)), reverse=True)
    return visible
