"""Live inventory view.

``InventoryDashboard`` keeps the latest store snapshot together with the
user's search term and urgent-only toggle, and recomputes the visible list
whenever any of those inputs changes.  ``watch`` feeds it from a store
subscription; ``analyze`` hands the full snapshot to the orchestrator.
"""

from __future__ import annotations

from src.inventory.view import project
from src.models.schemas import InventoryItem
from src.models.store import InventoryStore
from src.orchestrator.analysis import AnalysisOrchestrator
from src.utils.logger import get_logger

log = get_logger(__name__, component="dashboard")


class InventoryDashboard:
    """Hold view inputs and the projected inventory derived from them.

    Parameters
    ----------
    orchestrator:
        Runs reorder analyses over the full snapshot.
    """

    def __init__(self, orchestrator: AnalysisOrchestrator) -> None:
        self._orchestrator = orchestrator
        self._items: list[InventoryItem] = []
        self._search_term = ""
        self._urgent_only = False
        self._visible: list[InventoryItem] = []

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    @property
    def items(self) -> list[InventoryItem]:
        """The full snapshot last received from the store."""
        return list(self._items)

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def urgent_only(self) -> bool:
        return self._urgent_only

    def apply_snapshot(self, items: list[InventoryItem]) -> None:
        """Replace the snapshot with *items*, a full copy of the collection."""
        self._items = list(items)
        self._recompute()

    def set_search_term(self, term: str) -> None:
        if term != self._search_term:
            self._search_term = term
            self._recompute()

    def set_urgent_only(self, enabled: bool) -> None:
        if enabled != self._urgent_only:
            self._urgent_only = enabled
            self._recompute()

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    @property
    def visible(self) -> list[InventoryItem]:
        """Items to display, filtered and in status-priority order."""
        return list(self._visible)

    @property
    def orchestrator(self) -> AnalysisOrchestrator:
        return self._orchestrator

    async def analyze(self) -> str:
        """Run a reorder analysis over the full snapshot."""
        return await self._orchestrator.run(self._items)

    async def watch(self, store: InventoryStore) -> None:
        """Apply every snapshot published by *store* until cancelled."""
        async for snapshot in store.subscribe():
            self.apply_snapshot(snapshot)

    def _recompute(self) -> None:
        self._visible = project(self._items, self._search_term, self._urgent_only)
        log.debug(
            "dashboard.recomputed",
            total=len(self._items),
            visible=len(self._visible),
            search_term=self._search_term,
            urgent_only=self._urgent_only,
        )
