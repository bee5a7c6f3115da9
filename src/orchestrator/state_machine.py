"""Reorder-analysis state machine.

A run moves ``IDLE -> ANALYZING -> DONE`` and may start again from ``DONE``.
Any other move, in particular starting a run while one is already
``ANALYZING``, is rejected.
"""

from __future__ import annotations

from src.models.schemas import AnalysisState
from src.utils.logger import get_logger

log = get_logger(__name__, component="state_machine")

_TRANSITIONS: dict[AnalysisState, set[AnalysisState]] = {
    AnalysisState.IDLE: {AnalysisState.ANALYZING},
    AnalysisState.ANALYZING: {AnalysisState.DONE},
    AnalysisState.DONE: {AnalysisState.ANALYZING},
}


class InvalidTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""


class AnalysisInProgressError(InvalidTransitionError):
    """Raised when a new analysis is requested while one is still running."""


class AnalysisStateMachine:
    """Track the state of the reorder analysis and its latest result."""

    def __init__(self) -> None:
        self._state = AnalysisState.IDLE
        self._result = ""

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def result(self) -> str:
        """Text of the last finished run; empty while idle or analyzing."""
        return self._result

    @property
    def is_busy(self) -> bool:
        return self._state is AnalysisState.ANALYZING

    def can_transition(self, current: AnalysisState, target: AnalysisState) -> bool:
        """Return ``True`` if *current* -> *target* is a valid transition."""
        return target in _TRANSITIONS.get(current, set())

    def start(self) -> None:
        """Enter ``ANALYZING`` and clear the previous result.

        Raises
        ------
        AnalysisInProgressError
            If a run is already in progress.
        """
        if self._state is AnalysisState.ANALYZING:
            raise AnalysisInProgressError("An analysis is already in progress")
        self._transition(AnalysisState.ANALYZING)
        self._result = ""

    def finish(self, result: str) -> None:
        """Enter ``DONE`` with *result* as the displayable outcome."""
        self._transition(AnalysisState.DONE)
        self._result = result

    def _transition(self, target: AnalysisState) -> None:
        current = self._state
        if not self.can_transition(current, target):
            raise InvalidTransitionError(
                f"Cannot transition analysis from {current.value} -> {target.value}"
            )
        self._state = target
        log.info("state_transition", from_status=current.value, to_status=target.value)
