import logging
from dataclasses import dataclass
from typing import Any, Optional

from .errors import CalculationFailed
from .remote_service import CalculationServiceClient
from .routes import overview_route
from .schemas import CalculationRequest, CalculationResult
from .session import ChatSession
from .storage import set_calculation_data


@dataclass(frozen=True)
class CalculationOutcome:
    result: CalculationResult
    redirect: str


class CalculationTrigger:
    """Sends collected data to the calculation service and persists the result.

    A failed attempt leaves nothing behind, so the trigger can be fired again.
    """

    def __init__(self, client: CalculationServiceClient, logger: Optional[logging.Logger] = None):
        self.client = client
        self.logger = logger or logging.getLogger(__name__)

    async def calculate(
        self,
        collected_data: Any,
        system_id: Optional[str],
        log: Optional[logging.Logger] = None,
    ) -> CalculationResult:
        log = log or self.logger
        if collected_data is None or not system_id:
            log.warning("No data available for calculation")
            raise CalculationFailed("No data available for calculation", precondition=True)

        log.info(f"Starting ROI calculation for {system_id}")
        result = await self.client.calculate(CalculationRequest(system=system_id, collected_data=collected_data))

        if not result.success:
            message = (result.metadata or {}).get("error") or "Calculation failed"
            log.error(f"Calculation service reported failure: {message}")
            raise CalculationFailed(message)

        log.info(f"Calculation completed: {len(result.dimensions)} dimension(s)")
        return result

    async def run(self, session: ChatSession, log: Optional[logging.Logger] = None) -> CalculationOutcome:
        """Calculate for the session's active collected data and store the result for the results view."""
        system_id = session.context.system_id
        result = await self.calculate(session.collected_data, system_id, log=log)
        set_calculation_data(session.storage, result)
        return CalculationOutcome(result=result, redirect=overview_route(system_id))
