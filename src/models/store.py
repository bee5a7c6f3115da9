"""Document store for inventory items.

``InventoryStore`` is the interface the rest of the application depends on:
create / read / update / delete keyed by an opaque id, plus ``subscribe``
which streams *full* snapshots of the collection.  ``SQLiteInventoryStore``
implements it on top of :class:`~src.models.database.Database`, with one
collection per ``artifacts/{app_id}/users/{user_id}`` path.

The store owns ids and the ``created_at`` / ``updated_at`` timestamps;
callers never supply them.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import Any, AsyncIterator, Callable
from uuid import uuid4

from src.models.database import Database
from src.models.schemas import InventoryItem, InventoryItemDraft
from src.utils.logger import get_logger

log = get_logger(__name__, component="store")

ItemPredicate = Callable[[InventoryItem], bool]

_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {*InventoryItemDraft.model_fields, "is_ordered", "expected_delivery"}
)
_INCREMENTABLE_FIELDS: frozenset[str] = frozenset({"current_stock", "reorder_level", "unit_cost"})
_ORDER_FIELDS: frozenset[str] = frozenset({"is_ordered", "expected_delivery"})


class StoreError(Exception):
    """Raised when a store operation cannot be completed."""


class ItemNotFoundError(StoreError):
    """Raised when an item id does not exist in the collection."""


def collection_path(app_id: str, user_id: str) -> str:
    """Return the collection path that scopes one user's inventory."""
    return f"artifacts/{app_id}/users/{user_id}/inventory"


class InventoryStore(ABC):
    """Abstract document store holding one inventory collection."""

    @abstractmethod
    async def create(self, draft: InventoryItemDraft) -> str:
        """Insert a new item and return its store-assigned id."""

    @abstractmethod
    async def update(self, item_id: str, changes: dict[str, Any]) -> InventoryItem:
        """Apply a partial update and return the stored item."""

    @abstractmethod
    async def increment(
        self,
        item_id: str,
        field: str,
        delta: float,
        order_changes: dict[str, Any] | None = None,
    ) -> InventoryItem:
        """Add *delta* to a numeric field in one atomic write and return the item."""

    @abstractmethod
    async def delete(self, item_id: str) -> None:
        """Remove an item from the collection."""

    @abstractmethod
    async def get(self, item_id: str) -> InventoryItem | None:
        """Return one item, or ``None`` when the id is unknown."""

    @abstractmethod
    async def list_items(self) -> list[InventoryItem]:
        """Return the whole collection in creation order."""

    @abstractmethod
    def subscribe(
        self, predicate: ItemPredicate | None = None
    ) -> AsyncIterator[list[InventoryItem]]:
        """Yield the current snapshot, then a fresh snapshot after every change."""


class SQLiteInventoryStore(InventoryStore):
    """``InventoryStore`` backed by the ``inventory_items`` table.

    Parameters
    ----------
    db:
        A connected ``Database``.
    app_id:
        Application identifier forming the first part of the collection path.
    user_id:
        Opaque identifier supplied by authentication; scopes the collection.
    """

    def __init__(self, db: Database, app_id: str, user_id: str) -> None:
        self._db = db
        self._collection = collection_path(app_id, user_id)
        self._subscribers: set[asyncio.Queue[None]] = set()

    @property
    def collection(self) -> str:
        return self._collection

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, draft: InventoryItemDraft) -> str:
        item_id = uuid4().hex
        now = _server_timestamp()
        await self._db.execute(
            "INSERT INTO inventory_items "
            "(id, collection, name, current_stock, reorder_level, unit, unit_cost, "
            " primary_vendor, vendor_contact, is_ordered, expected_delivery, "
            " created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 0, NULL, ?, ?)",
            (
                item_id,
                self._collection,
                draft.name,
                draft.current_stock,
                draft.reorder_level,
                draft.unit.value,
                draft.unit_cost,
                draft.primary_vendor,
                draft.vendor_contact,
                now,
                now,
            ),
        )
        log.info("store.item_created", item_id=item_id, name=draft.name)
        self._notify()
        return item_id

    async def update(self, item_id: str, changes: dict[str, Any]) -> InventoryItem:
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise StoreError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        current = await self.get(item_id)
        if current is None:
            raise ItemNotFoundError(f"Item not found: {item_id}")

        merged = InventoryItem.model_validate(
            {**current.model_dump(), **changes, "updated_at": _server_timestamp()}
        )
        await self._db.execute(
            "UPDATE inventory_items SET "
            "name = ?, current_stock = ?, reorder_level = ?, unit = ?, unit_cost = ?, "
            "primary_vendor = ?, vendor_contact = ?, is_ordered = ?, "
            "expected_delivery = ?, updated_at = ? "
            "WHERE id = ? AND collection = ?",
            (
                merged.name,
                merged.current_stock,
                merged.reorder_level,
                merged.unit.value,
                merged.unit_cost,
                merged.primary_vendor,
                merged.vendor_contact,
                int(merged.is_ordered),
                merged.expected_delivery.isoformat() if merged.expected_delivery else None,
                merged.updated_at.isoformat() if merged.updated_at else None,
                item_id,
                self._collection,
            ),
        )
        log.info("store.item_updated", item_id=item_id, fields=sorted(changes))
        self._notify()
        return merged

    async def increment(
        self,
        item_id: str,
        field: str,
        delta: float,
        order_changes: dict[str, Any] | None = None,
    ) -> InventoryItem:
        """Add *delta* to *field* inside a single ``UPDATE``.

        The new value is computed by SQLite from the stored one, so
        concurrent increments from this loop or another process all land.
        *order_changes* may set ``is_ordered`` and ``expected_delivery`` in
        the same statement.  A result below zero is refused.
        """
        if field not in _INCREMENTABLE_FIELDS:
            raise StoreError(f"Field cannot be incremented: {field}")
        order_changes = order_changes or {}
        unknown = set(order_changes) - _ORDER_FIELDS
        if unknown:
            raise StoreError(f"Fields cannot be set here: {', '.join(sorted(unknown))}")

        assignments = [f"{field} = {field} + ?"]
        params: list[Any] = [delta]
        if "is_ordered" in order_changes:
            assignments.append("is_ordered = ?")
            params.append(int(bool(order_changes["is_ordered"])))
        if "expected_delivery" in order_changes:
            expected = order_changes["expected_delivery"]
            if expected is not None and not isinstance(expected, date):
                raise StoreError("expected_delivery must be a date or None")
            assignments.append("expected_delivery = ?")
            params.append(expected.isoformat() if expected else None)
        assignments.append("updated_at = ?")
        params.append(_server_timestamp())

        cursor = await self._db.execute(
            f"UPDATE inventory_items SET {', '.join(assignments)} "
            f"WHERE id = ? AND collection = ? AND {field} + ? >= 0",
            (*params, item_id, self._collection, delta),
        )
        if cursor.rowcount == 0:
            if await self.get(item_id) is None:
                raise ItemNotFoundError(f"Item not found: {item_id}")
            raise StoreError(f"{field} cannot go below zero")

        item = await self.get(item_id)
        log.info("store.item_incremented", item_id=item_id, field=field, delta=delta)
        self._notify()
        return item

    async def delete(self, item_id: str) -> None:
        cursor = await self._db.execute(
            "DELETE FROM inventory_items WHERE id = ? AND collection = ?",
            (item_id, self._collection),
        )
        if cursor.rowcount == 0:
            raise ItemNotFoundError(f"Item not found: {item_id}")
        log.info("store.item_deleted", item_id=item_id)
        self._notify()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, item_id: str) -> InventoryItem | None:
        row = await self._db.fetch_one(
            "SELECT * FROM inventory_items WHERE id = ? AND collection = ?",
            (item_id, self._collection),
        )
        return InventoryItem.model_validate(row) if row is not None else None

    async def list_items(self) -> list[InventoryItem]:
        rows = await self._db.fetch_all(
            "SELECT * FROM inventory_items WHERE collection = ? "
            "ORDER BY created_at, rowid",
            (self._collection,),
        )
        return [InventoryItem.model_validate(row) for row in rows]

    async def subscribe(
        self, predicate: ItemPredicate | None = None
    ) -> AsyncIterator[list[InventoryItem]]:
        queue: asyncio.Queue[None] = asyncio.Queue()
        self._subscribers.add(queue)
        log.debug("store.subscribed", subscribers=len(self._subscribers))
        try:
            yield await self._snapshot(predicate)
            while True:
                await queue.get()
                # Several writes may have landed; one snapshot covers them all.
                while not queue.empty():
                    queue.get_nowait()
                yield await self._snapshot(predicate)
        finally:
            self._subscribers.discard(queue)
            log.debug("store.unsubscribed", subscribers=len(self._subscribers))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _snapshot(self, predicate: ItemPredicate | None) -> list[InventoryItem]:
        items = await self.list_items()
        if predicate is None:
            return items
        return [item for item in items if predicate(item)]

    def _notify(self) -> None:
        for queue in self._subscribers:
            queue.put_nowait(None)


def _server_timestamp() -> str:
    """Return the store's current UTC time as an ISO string."""
    return datetime.now(timezone.utc).isoformat()
