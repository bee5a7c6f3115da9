"""Pydantic models and enums for the Restock domain.

These schemas describe inventory items as the store hands them out, the
draft shape accepted from forms and the CLI, and the ephemeral payloads
derived for reorder analysis.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Unit(str, Enum):
    """Units an ingredient can be counted in."""

    KG = "kg"
    LITRE = "L"
    PIECES = "pcs"
    CASE = "case"
    BOX = "box"


class DerivedStatus(str, Enum):
    """Operational state of an item, computed on every read."""

    URGENT_REORDER = "Urgent Reorder"
    ORDER_PLACED = "Order Placed"
    WELL_STOCKED = "Well Stocked"


class AnalysisState(str, Enum):
    """Observable states of a reorder analysis run."""

    IDLE = "idle"
    ANALYZING = "analyzing"
    DONE = "done"


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------

class InventoryItemDraft(BaseModel):
    """User-editable fields of an inventory item."""

    name: str = Field(min_length=1)
    current_stock: float = Field(ge=0)
    reorder_level: float = Field(ge=0)
    unit: Unit = Unit.KG
    unit_cost: float = Field(default=0.0, ge=0)
    primary_vendor: str = ""
    vendor_contact: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value


class InventoryItem(InventoryItemDraft):
    """An inventory item as stored; ids and timestamps come from the store."""

    id: str
    is_ordered: bool = False
    expected_delivery: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_draft(self) -> InventoryItemDraft:
        """Return only the user-editable fields of this item."""
        return InventoryItemDraft.model_validate(
            self.model_dump(include=set(InventoryItemDraft.model_fields))
        )


class ReorderCandidate(BaseModel):
    """Read-only projection of an urgent item sent for analysis."""

    model_config = ConfigDict(frozen=True)

    name: str
    current_stock: float
    reorder_level: float
    unit: Unit
    unit_cost: float
    total_stock_value: float
    vendor: str
    vendor_contact: str


class WriteResult(BaseModel):
    """Outcome of a store write issued on behalf of the user."""

    ok: bool
    item_id: str | None = None
    error: str | None = None
