"""Inventory write operations issued on behalf of the user.

``InventoryService`` wraps an ``InventoryStore`` with the operations the UI
and CLI expose: save (create or edit), delete, mark as ordered and receive a
delivery.  Failures are logged and reported through ``WriteResult`` instead
of being raised, so a caller can always show the outcome.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Awaitable

from src.models.schemas import InventoryItem, InventoryItemDraft, WriteResult
from src.models.store import InventoryStore
from src.utils.logger import get_logger

log = get_logger(__name__, component="inventory_service")


class InventoryService:
    """Create, edit, delete and order inventory items.

    Parameters
    ----------
    store:
        The inventory collection for the signed-in user.
    """

    def __init__(self, store: InventoryStore) -> None:
        self._store = store

    async def save_item(
        self,
        draft: InventoryItemDraft,
        existing: InventoryItem | None = None,
    ) -> WriteResult:
        """Create a new item, or overwrite the editable fields of *existing*.

        Editing never touches the order flag, the expected delivery date or
        ``created_at``; those stay as the store has them.
        """
        if existing is None:
            return await self._run("create", None, self._store.create(draft))

        changes: dict[str, Any] = draft.model_dump()
        return await self._run("update", existing.id, self._store.update(existing.id, changes))

    async def delete_item(self, item_id: str) -> WriteResult:
        return await self._run("delete", item_id, self._store.delete(item_id))

    async def mark_as_ordered(
        self, item_id: str, expected_delivery: date | None = None
    ) -> WriteResult:
        """Flag *item_id* as having an outstanding order.

        *expected_delivery* may be left empty while the vendor has not
        confirmed a date.
        """
        changes = {"is_ordered": True, "expected_delivery": expected_delivery}
        return await self._run("mark_ordered", item_id, self._store.update(item_id, changes))

    async def receive_delivery(self, item_id: str, quantity: float) -> WriteResult:
        """Add *quantity* to stock and clear the outstanding order.

        The stock is incremented by the store in one write, so receipts
        recorded at the same time are all counted.
        """
        if quantity < 0:
            return WriteResult(ok=False, item_id=item_id, error="Quantity must be >= 0")
        order_changes = {"is_ordered": False, "expected_delivery": None}
        return await self._run(
            "receive",
            item_id,
            self._store.increment(item_id, "current_stock", quantity, order_changes),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _run(
        self, operation: str, item_id: str | None, write: Awaitable[Any]
    ) -> WriteResult:
        """Await *write* and turn its outcome into a ``WriteResult``."""
        try:
            outcome = await write
        except Exception as exc:
            log.exception("inventory.write_failed", operation=operation, item_id=item_id)
            return WriteResult(ok=False, item_id=item_id, error=str(exc))

        if operation == "create":
            item_id = outcome
        log.info("inventory.write_ok", operation=operation, item_id=item_id)
        return WriteResult(ok=True, item_id=item_id)
