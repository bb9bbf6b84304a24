"""HTTP clients for the two remote services the conversation depends on.

- AgentServiceClient: one conversational turn (``chat`` endpoint)
- CalculationServiceClient: ROI computation (``calculate`` endpoint)

Both speak JSON over POST and translate every transport, status, JSON or
schema problem into the matching error of :mod:`roi_first.errors`. Neither
retries; resubmission is the user's call.
"""

import logging
from typing import Any, Callable, Dict, Optional, Type

import httpx
from pydantic import BaseModel, ValidationError

from .config import Settings
from .errors import AgentCallFailed, CalculationFailed
from .schemas import AgentReply, AgentTurnRequest, CalculationRequest, CalculationResult


class _JsonServiceClient:
    """Shared POST-and-parse plumbing."""

    def __init__(
        self,
        url: str,
        timeout: float,
        error_cls: Callable[..., Exception],
        logger: Optional[logging.Logger] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.error_cls = error_cls
        self.logger = logger or logging.getLogger(__name__)
        self._http_client = http_client

    async def _post(self, payload: Dict[str, Any], response_model: Type[BaseModel]) -> Any:
        try:
            if self._http_client is not None:
                response = await self._http_client.post(self.url, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=payload)
        except httpx.TimeoutException as exc:
            self.logger.warning(f"Request to {self.url} timed out")
            raise self.error_cls(f"Request to {self.url} timed out") from exc
        except httpx.RequestError as exc:
            self.logger.warning(f"Request to {self.url} failed: {exc}")
            raise self.error_cls(f"Request to {self.url} failed: {exc}") from exc

        if response.status_code >= 400:
            self.logger.warning(f"{self.url} answered with status {response.status_code}")
            raise self.error_cls(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            self.logger.warning(f"{self.url} returned a body that is not JSON")
            raise self.error_cls("Response is not valid JSON", status_code=response.status_code) from exc

        try:
            return response_model.model_validate(body)
        except ValidationError as exc:
            self.logger.warning(f"{self.url} returned an unexpected payload: {exc.error_count()} error(s)")
            raise self.error_cls("Response does not match the expected schema", status_code=response.status_code) from exc


class AgentServiceClient(_JsonServiceClient):
    """Client for the remote conversational agent."""

    def __init__(
        self,
        settings: Settings,
        logger: Optional[logging.Logger] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            url=settings.chat_url,
            timeout=settings.request_timeout_seconds,
            error_cls=AgentCallFailed,
            logger=logger,
            http_client=http_client,
        )

    async def chat(self, request: AgentTurnRequest) -> AgentReply:
        """Send one turn and return the parsed reply."""
        payload = request.to_payload()
        self.logger.info(
            "Calling agent service",
            extra={
                "system": request.system,
                "user_type": request.user_type,
                "history_len": len(request.conversation_history),
                "correction": request.correction_context is not None,
            },
        )
        return await self._post(payload, AgentReply)


class CalculationServiceClient(_JsonServiceClient):
    """Client for the remote ROI calculation service."""

    def __init__(
        self,
        settings: Settings,
        logger: Optional[logging.Logger] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(
            url=settings.calculate_url,
            timeout=settings.request_timeout_seconds,
            error_cls=CalculationFailed,
            logger=logger,
            http_client=http_client,
        )

    async def calculate(self, request: CalculationRequest) -> CalculationResult:
        self.logger.info("Calling calculation service", extra={"system": request.system})
        return await self._post(request.model_dump(), CalculationResult)
