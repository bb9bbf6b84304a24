"""Completion detection for agent replies.

Every reply is classified into exactly one :class:`ReplyOutcome`, then
reduced into the changes it implies for the session: new collected data
(with the ready-to-calculate flag), a new correction round, a cleared
correction round, or nothing at all.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .schemas import AgentMode, AgentReply
from .session import ChatSession, CorrectionState
from .storage import set_collected_data


class ReplyOutcome(str, Enum):
    COMPLETED = "completed"
    AWAITING_CORRECTIONS = "awaiting_corrections"
    AWAITING_MISSING_DATA = "awaiting_missing_data"
    VALIDATED_COMPLETE = "validated_complete"
    UNCLASSIFIED = "unclassified"


_STATUS_OUTCOMES = {
    "completed": ReplyOutcome.COMPLETED,
    "data_completed": ReplyOutcome.COMPLETED,
    "validated_complete": ReplyOutcome.VALIDATED_COMPLETE,
    "awaiting_corrections": ReplyOutcome.AWAITING_CORRECTIONS,
    "awaiting_missing_data": ReplyOutcome.AWAITING_MISSING_DATA,
}

# Statuses that carry the collected data payload
COMPLETION_STATUSES = frozenset({"completed", "data_completed", "validated_complete"})


def classify(reply: AgentReply) -> ReplyOutcome:
    return _STATUS_OUTCOMES.get(reply.status or "", ReplyOutcome.UNCLASSIFIED)


def extract_collected_data(reply: AgentReply, mode: Optional[AgentMode]) -> Any:
    """Pull the collected data out of a completion reply.

    Guided agents nest it under ``current_state.collected_data``; expert
    agents return it as the top-level ``data`` field. Empty scalars
    (``0``, ``""``, ``False``) count as nothing collected.
    """
    value = None
    if mode is AgentMode.EXPERT:
        value = reply.data
    elif mode is AgentMode.GUIDED and isinstance(reply.current_state, dict):
        value = reply.current_state.get("collected_data")

    if isinstance(value, (str, int, float, bool)) and not value:
        return None
    return value


@dataclass(frozen=True)
class Reduction:
    """State changes implied by one reply."""

    outcome: ReplyOutcome
    collected: Any = None
    correction: Optional[CorrectionState] = None
    clears_correction: bool = False

    @property
    def ready_for_calculation(self) -> bool:
        return self.collected is not None

    def apply(self, session: ChatSession) -> None:
        if self.collected is not None:
            session.collected_data = self.collected
            session.ready_for_calculation = True
            set_collected_data(session.storage, self.collected)

        if self.correction is not None:
            session.correction = self.correction
        elif self.clears_correction:
            session.correction = None


class CompletionDetector:
    """Turns agent replies into correction and completion state."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def reduce(
        self,
        reply: AgentReply,
        mode: Optional[AgentMode],
        log: Optional[logging.Logger] = None,
    ) -> Reduction:
        log = log or self.logger
        outcome = classify(reply)

        collected = None
        if reply.status in COMPLETION_STATUSES:
            collected = extract_collected_data(reply, mode)
            if collected is None:
                log.warning(f"Completion status '{reply.status}' without collected data for mode {mode}; ignoring")
            else:
                log.info(f"Complete data detected (status={reply.status}, mode={mode})")

        fields = reply.missing_or_invalid_fields or []

        if outcome is ReplyOutcome.AWAITING_CORRECTIONS and fields:
            log.info(f"Errors detected in {len(fields)} field(s)")
            return Reduction(outcome, collected, correction=self._open_round(reply))

        if outcome is ReplyOutcome.VALIDATED_COMPLETE or reply.ready_for_calculation:
            log.info("Validation complete")
            return Reduction(outcome, collected, clears_correction=True)

        if outcome is ReplyOutcome.AWAITING_MISSING_DATA and fields:
            log.info(f"Missing data for {len(fields)} field(s)")
            return Reduction(outcome, collected, correction=self._open_round(reply))

        return Reduction(outcome, collected, clears_correction=collected is not None)

    @staticmethod
    def _open_round(reply: AgentReply) -> CorrectionState:
        return CorrectionState(
            awaiting_corrections=True,
            valid_data=reply.data if reply.data is not None else {},
            invalid_fields=list(reply.missing_or_invalid_fields or []),
            status=reply.status,
        )
