"""Conversation flow state machine.

Two modes: normal chat with the coach, and a daily check-in in progress.
The machine is cyclic; a finished check-in returns to normal chat and can
be started again the next day.
"""

import logging
from datetime import datetime
from enum import Enum

logger = logging.getLogger(__name__)


class FlowMode(Enum):
    NORMAL = "normal"
    CHECK_IN = "check_in_in_progress"


ALLOWED_TRANSITIONS = {
    FlowMode.NORMAL: {FlowMode.CHECK_IN},
    FlowMode.CHECK_IN: {FlowMode.NORMAL},
}


class FlowStateMachine:
    """Tracks the current flow mode and records every transition."""

    def __init__(self):
        self.mode = FlowMode.NORMAL
        self.history: list[dict] = []

    @property
    def in_check_in(self) -> bool:
        return self.mode is FlowMode.CHECK_IN

    def transition(self, new_mode: FlowMode, reason: str = "") -> None:
        """Move to a new mode. Raises ValueError on an illegal transition."""
        if new_mode not in ALLOWED_TRANSITIONS[self.mode]:
            raise ValueError(f"Illegal flow transition {self.mode.value} -> {new_mode.value}")
        self.history.append({
            "from": self.mode.value,
            "to": new_mode.value,
            "reason": reason,
            "at": datetime.now().isoformat(timespec="seconds"),
        })
        logger.debug("Flow %s -> %s (%s)", self.mode.value, new_mode.value, reason)
        self.mode = new_mode
