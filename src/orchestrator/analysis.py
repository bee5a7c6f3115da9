"""Reorder analysis orchestration.

``AnalysisOrchestrator.run`` sequences one analysis: build the reorder set,
short-circuit with a canned message when it is empty, otherwise render the
prompts, call Gemini and publish whatever text comes back.
"""

from __future__ import annotations

import asyncio
import json
from typing import Sequence

from src.ai.client import GeminiClient
from src.ai.prompts import PromptManager
from src.inventory.reorder import build_reorder_set
from src.models.schemas import AnalysisState, InventoryItem, ReorderCandidate
from src.orchestrator.state_machine import AnalysisStateMachine
from src.utils.logger import get_logger

log = get_logger(__name__, component="analysis")

NO_ACTION_MESSAGE = (
    "All inventory items are currently well-stocked or already on order. "
    "No action required."
)
FAILED_MESSAGE = "Error: Failed to fetch analysis. Please check network/API status."

_TEMPLATE = "reorder_analysis"


class AnalysisOrchestrator:
    """Run reorder analyses one at a time.

    Parameters
    ----------
    client:
        Gemini client used for the purchasing recommendation.
    prompts:
        Prompt templates; must define ``reorder_analysis``.
    restaurant_name:
        Name used in the analyst persona.
    currency:
        Currency code monetary values are expressed in.
    """

    def __init__(
        self,
        client: GeminiClient,
        prompts: PromptManager,
        restaurant_name: str = "the restaurant",
        currency: str = "ETB",
    ) -> None:
        self._client = client
        self._prompts = prompts
        self._restaurant_name = restaurant_name
        self._currency = currency
        self._machine = AnalysisStateMachine()

    @property
    def state(self) -> AnalysisState:
        return self._machine.state

    @property
    def result(self) -> str:
        return self._machine.result

    @property
    def is_busy(self) -> bool:
        return self._machine.is_busy

    async def run(self, items: Sequence[InventoryItem]) -> str:
        """Analyze the urgent items in *items* and return the displayable result.

        Raises
        ------
        AnalysisInProgressError
            If called while a previous run has not finished.  The running
            analysis is not affected.

        A cancelled run still leaves the machine in ``DONE`` with
        ``FAILED_MESSAGE`` before the cancellation propagates.
        """
        self._machine.start()

        result = FAILED_MESSAGE
        try:
            candidates = build_reorder_set(items)
            if not candidates:
                log.info("analysis.nothing_to_reorder", item_count=len(items))
                result = NO_ACTION_MESSAGE
            else:
                log.info("analysis.started", candidate_count=len(candidates))
                system, user = self.build_prompts(candidates)
                result = await self._client.generate(system, user)
        except asyncio.CancelledError:
            log.warning("analysis.cancelled")
            raise
        except Exception:
            log.exception("analysis.failed")
            result = FAILED_MESSAGE
        finally:
            self._machine.finish(result)
        return result

    def build_prompts(self, candidates: Sequence[ReorderCandidate]) -> tuple[str, str]:
        """Return the ``(system_instruction, user_query)`` pair for *candidates*."""
        items_json = json.dumps(
            [candidate.model_dump(mode="json") for candidate in candidates],
            indent=2,
            ensure_ascii=False,
        )
        system = self._prompts.get_system(
            _TEMPLATE,
            restaurant_name=self._restaurant_name,
            currency=self._currency,
        )
        user = self._prompts.get_user(
            _TEMPLATE,
            items_json=items_json,
            currency=self._currency,
        )
        return system, user
