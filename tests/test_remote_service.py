"""Tests for the HTTP clients of the agent and calculation services.

Uses httpx.MockTransport so no network is involved.
"""

import json

import httpx
import pytest

from roi_first.config import Settings
from roi_first.errors import AgentCallFailed, CalculationFailed
from roi_first.remote_service import AgentServiceClient, CalculationServiceClient
from roi_first.schemas import AgentTurnRequest, CalculationRequest, CorrectionContext


@pytest.fixture
def settings() -> Settings:
    return Settings(AGENT_SERVICE_URL="https://agents.example.com/")


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _turn(**overrides) -> AgentTurnRequest:
    fields = {"message": "Hello", "system": "legacy_takeover", "user_type": "beginner"}
    fields.update(overrides)
    return AgentTurnRequest(**fields)


class TestAgentServiceClient:
    async def test_posts_turn_and_parses_reply(self, settings) -> None:
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "response": "Welcome",
                    "conversation_history": [{"role": "assistant", "content": "Welcome"}],
                    "success": True,
                    "conversation_id": "conv-1",
                    "status": "awaiting_corrections",
                    "missing_or_invalid_fields": [{"field": "budget", "reason": "negative"}],
                },
            )

        client = AgentServiceClient(settings, http_client=_client(handler))
        reply = await client.chat(_turn())

        assert captured["url"] == "https://agents.example.com/chat"
        assert captured["body"] == {
            "message": "Hello",
            "system": "legacy_takeover",
            "conversation_history": [],
            "user_type": "beginner",
            "current_state": None,
            "conversation_id": None,
        }
        assert reply.conversation_id == "conv-1"
        assert reply.missing_or_invalid_fields[0].label == "budget"

    async def test_correction_context_is_serialized(self, settings) -> None:
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"response": "ok"})

        client = AgentServiceClient(settings, http_client=_client(handler))
        context = CorrectionContext(valid_data={"a": 1}, correcting_fields=["budget"])
        await client.chat(_turn(correction_context=context))

        assert captured["body"]["correction_context"] == {
            "is_correction": True,
            "valid_data": {"a": 1},
            "correcting_fields": ["budget"],
        }

    async def test_http_error_status(self, settings) -> None:
        client = AgentServiceClient(settings, http_client=_client(lambda request: httpx.Response(500)))

        with pytest.raises(AgentCallFailed) as exc_info:
            await client.chat(_turn())

        assert exc_info.value.status_code == 500

    async def test_body_is_not_json(self, settings) -> None:
        client = AgentServiceClient(settings, http_client=_client(lambda request: httpx.Response(200, text="<html>")))

        with pytest.raises(AgentCallFailed, match="not valid JSON"):
            await client.chat(_turn())

    async def test_connection_error(self, settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = AgentServiceClient(settings, http_client=_client(handler))

        with pytest.raises(AgentCallFailed):
            await client.chat(_turn())

    async def test_timeout(self, settings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        client = AgentServiceClient(settings, http_client=_client(handler))

        with pytest.raises(AgentCallFailed, match="timed out"):
            await client.chat(_turn())


class TestCalculationServiceClient:
    async def test_posts_collected_data(self, settings, calculation_payload) -> None:
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=calculation_payload)

        client = CalculationServiceClient(settings, http_client=_client(handler))
        result = await client.calculate(CalculationRequest(system="legacy_takeover", collected_data={"a": 1}))

        assert captured["url"] == "https://agents.example.com/calculate"
        assert captured["body"] == {"system": "legacy_takeover", "collected_data": {"a": 1}}
        assert len(result.dimensions) == 2
        assert result.metadata == {"engine": "v2"}

    async def test_schema_mismatch(self, settings) -> None:
        client = CalculationServiceClient(settings, http_client=_client(lambda request: httpx.Response(200, json={"oops": 1})))

        with pytest.raises(CalculationFailed, match="expected schema"):
            await client.calculate(CalculationRequest(system="legacy_takeover", collected_data={}))

    async def test_service_unavailable(self, settings) -> None:
        client = CalculationServiceClient(settings, http_client=_client(lambda request: httpx.Response(503)))

        with pytest.raises(CalculationFailed) as exc_info:
            await client.calculate(CalculationRequest(system="legacy_takeover", collected_data={}))

        assert exc_info.value.status_code == 503
