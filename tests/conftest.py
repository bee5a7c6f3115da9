"""Shared pytest fixtures for the Restock test suite.

Provides an in-memory database, a store scoped to a test user, settings
backed by test-only environment variables, and a factory for inventory
items.  Nothing here touches the network.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, AsyncGenerator, Callable

import pytest

# ---------------------------------------------------------------------------
# Ensure the project root is on sys.path so that ``import src.*`` resolves
# correctly regardless of how pytest is invoked.
# ---------------------------------------------------------------------------
_PROJECT_ROOT = str(Path(__file__).resolve().parents[1])
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from src.models.database import Database
from src.models.schemas import InventoryItem, Unit
from src.models.store import SQLiteInventoryStore


# ---------------------------------------------------------------------------
# Database / store fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
async def db() -> AsyncGenerator[Database, None]:
    """Yield a connected, migrated in-memory Database and close it after use."""
    database = Database(db_path=":memory:")
    await database.connect()
    yield database
    await database.close()


@pytest.fixture
async def store(db: Database) -> SQLiteInventoryStore:
    """Return a store holding the collection of a single test user."""
    return SQLiteInventoryStore(db, app_id="test-app", user_id="user-1")


# ---------------------------------------------------------------------------
# Item factory
# ---------------------------------------------------------------------------

@pytest.fixture
def make_item() -> Callable[..., InventoryItem]:
    """Return a factory building ``InventoryItem`` objects with sane defaults."""
    counter = 0

    def _make(name: str = "Tomatoes", **overrides: Any) -> InventoryItem:
        nonlocal counter
        counter += 1
        fields: dict[str, Any] = {
            "id": f"item-{counter:03d}",
            "name": name,
            "current_stock": 50.0,
            "reorder_level": 10.0,
            "unit": Unit.KG,
            "unit_cost": 25.0,
            "primary_vendor": "Addis Fresh Produce",
            "vendor_contact": "+251 911 000 000",
        }
        fields.update(overrides)
        return InventoryItem(**fields)

    return _make


# ---------------------------------------------------------------------------
# Settings fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch):
    """Return a Settings instance backed by test-only environment variables."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key-not-real")
    monkeypatch.setenv("MAX_ATTEMPTS", "3")
    monkeypatch.setenv("USER_ID", "user-1")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DB_PATH", ":memory:")

    from config.settings import Settings

    return Settings()
