"""Tests for the live inventory view (``src.orchestrator.dashboard``)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from src.models.schemas import InventoryItemDraft
from src.models.store import SQLiteInventoryStore
from src.orchestrator.analysis import AnalysisOrchestrator
from src.orchestrator.dashboard import InventoryDashboard


@pytest.fixture
def orchestrator() -> AsyncMock:
    orch = AsyncMock(spec=AnalysisOrchestrator)
    orch.run.return_value = "plan"
    return orch


@pytest.fixture
def dashboard(orchestrator: AsyncMock) -> InventoryDashboard:
    return InventoryDashboard(orchestrator)


class TestRecompute:

    def test_snapshot_sorted_by_priority(self, dashboard: InventoryDashboard, make_item) -> None:
        dashboard.apply_snapshot([make_item("Rice"), make_item("Teff", current_stock=1)])
        assert [i.name for i in dashboard.visible] == ["Teff", "Rice"]

    def test_search_and_toggle(self, dashboard: InventoryDashboard, make_item) -> None:
        dashboard.apply_snapshot(
            [
                make_item("Flour", current_stock=1),
                make_item("Rice Flour"),
                make_item("Teff", current_stock=1),
            ]
        )

        dashboard.set_search_term("FLOUR")
        assert [i.name for i in dashboard.visible] == ["Flour", "Rice Flour"]

        dashboard.set_urgent_only(True)
        assert [i.name for i in dashboard.visible] == ["Flour"]

        dashboard.set_search_term("")
        assert [i.name for i in dashboard.visible] == ["Flour", "Teff"]

    def test_new_snapshot_replaces_old(self, dashboard: InventoryDashboard, make_item) -> None:
        dashboard.apply_snapshot([make_item("Rice")])
        dashboard.apply_snapshot([make_item("Teff")])
        assert [i.name for i in dashboard.items] == ["Teff"]


class TestAnalyze:

    async def test_uses_full_snapshot_not_visible(
        self, dashboard: InventoryDashboard, orchestrator: AsyncMock, make_item
    ) -> None:
        items = [make_item("Rice"), make_item("Teff", current_stock=1)]
        dashboard.apply_snapshot(items)
        dashboard.set_search_term("rice")

        assert await dashboard.analyze() == "plan"
        orchestrator.run.assert_awaited_once_with(items)


class TestWatch:

    async def test_applies_store_snapshots(
        self, dashboard: InventoryDashboard, store: SQLiteInventoryStore
    ) -> None:
        task = asyncio.create_task(dashboard.watch(store))
        try:
            await store.create(
                InventoryItemDraft(name="Butter", current_stock=1, reorder_level=2)
            )
            for _ in range(50):
                if dashboard.items:
                    break
                await asyncio.sleep(0.01)
            assert [i.name for i in dashboard.visible] == ["Butter"]
        finally:
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
