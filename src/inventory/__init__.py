"""Inventory core -- status classification, reorder sets, view projection and writes."""

from src.inventory.reorder import build_reorder_set
from src.inventory.service import InventoryService
from src.inventory.status import classify, status_priority
from src.inventory.view import project

__all__ = [
    "InventoryService",
    "build_reorder_set",
    "classify",
    "project",
    "status_priority",
]
