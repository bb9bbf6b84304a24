"""Shared fixtures for the ROI conversation tests."""

import asyncio
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from roi_first.schemas import AgentMode, AgentReply, AgentTurnRequest
from roi_first.session import ChatSession
from roi_first.storage import set_agent_mode, set_roi_system


def make_session(system_id: Optional[str] = "legacy_takeover", mode: Optional[AgentMode] = AgentMode.GUIDED) -> ChatSession:
    session = ChatSession(session_id="test-session")
    if system_id:
        set_roi_system(session.storage, system_id)
    if mode is not None:
        set_agent_mode(session.storage, mode)
    return session


class ScriptedAgentClient:
    """Agent client that answers from a script and can hold individual calls.

    ``gates[i]`` blocks the i-th call until the event is set; an exception in
    the script is raised instead of returned.
    """

    def __init__(self, script: List[Any]):
        self.script = list(script)
        self.calls: List[AgentTurnRequest] = []
        self.gates: Dict[int, asyncio.Event] = {}

    async def chat(self, request: AgentTurnRequest) -> AgentReply:
        index = len(self.calls)
        self.calls.append(request)
        gate = self.gates.get(index)
        if gate is not None:
            await gate.wait()
        item = self.script[index]
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def guided_session() -> ChatSession:
    return make_session(mode=AgentMode.GUIDED)


@pytest.fixture
def expert_session() -> ChatSession:
    return make_session(system_id="order_to_cash", mode=AgentMode.EXPERT)


@pytest.fixture
def agent_client() -> MagicMock:
    client = MagicMock()
    client.chat = AsyncMock(return_value=AgentReply(response="Hi! Tell me about your process."))
    return client


@pytest.fixture
def calculation_client() -> MagicMock:
    client = MagicMock()
    client.calculate = AsyncMock()
    return client


@pytest.fixture
def calculation_payload() -> Dict[str, Any]:
    return {
        "success": True,
        "system": "legacy_takeover",
        "summary_text": "Legacy takeover pays back in 9 months.",
        "tco_global": {
            "current_tco": 1000000.0,
            "future_tco": 600000.0,
            "roi_total": 400000.0,
            "roi_percentage": 40.0,
            "payback_months": 9,
        },
        "dimensions": [
            {
                "dimension_id": "dev",
                "dimension_name": "Development and Maintenance Efficiency",
                "current_tco": 750000.0,
                "future_tco": 450000.0,
                "roi": 300000.0,
                "ia_improvement_factor": 0.4,
                "impacto_ia": 300000.0,
                "impact_percentage": 40.0,
            },
            {
                "dimension_id": "ops",
                "dimension_name": "Operational Costs",
                "current_tco": 250000.0,
                "future_tco": 150000.0,
                "roi": 100000.0,
                "ia_improvement_factor": 0.4,
                "impacto_ia": 100000.0,
                "impact_percentage": 40.0,
                "description": "Hosting and support",
            },
        ],
        "metadata": {"engine": "v2"},
    }
