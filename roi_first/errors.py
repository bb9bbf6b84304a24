"""Error taxonomy of the ROI conversation flow.

Every failure here is local to the action that triggered it: nothing
raised from this module leaves a session half-updated, and the user can
always resubmit.
"""

from typing import List, Optional

from .routes import SELECTION_ROUTE


class RoiFirstError(Exception):
    """Base class for errors raised by the conversation core."""


class PreconditionMissing(RoiFirstError):
    """Required session context (system id, agent mode) is absent.

    Not retryable: the caller must send the user back to process selection.
    """

    def __init__(self, missing: List[str], redirect: str = SELECTION_ROUTE):
        self.missing = list(missing)
        self.redirect = redirect
        super().__init__(f"Session data missing: {', '.join(self.missing)}")


class AgentCallFailed(RoiFirstError):
    """Transport, HTTP or parse failure on the agent turn endpoint."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class CalculationFailed(RoiFirstError):
    """Missing collected data, transport failure or remote-reported failure."""

    def __init__(self, message: str, status_code: Optional[int] = None, precondition: bool = False):
        self.message = message
        self.status_code = status_code
        self.precondition = precondition
        super().__init__(message)
