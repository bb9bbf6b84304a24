"""Tests for session storage, session context and the session store."""

import logging
import time

import pytest
from pydantic import ValidationError

from roi_first.schemas import AgentMode, CompanyProfile
from roi_first.session import SessionContext, SessionStore
from roi_first.storage import (
    CALCULATION_DATA_KEY,
    COLLECTED_DATA_KEY,
    ROI_TYPE_KEY,
    InMemoryKeyValueStore,
    clear_roi_session,
    get_agent_mode,
    get_company_profile,
    get_roi_dimensions,
    set_company_profile,
    set_roi_dimensions,
    set_roi_system,
)


def _profile(**overrides) -> CompanyProfile:
    fields = {"name": "Acme", "size": "51-200", "sector": "tecnologia", "secondary_sectors": ["retail"]}
    fields.update(overrides)
    return CompanyProfile(**fields)


class TestKeyValueStore:
    def test_values_are_copied(self) -> None:
        store = InMemoryKeyValueStore()
        data = {"nested": {"a": 1}}
        store.set(COLLECTED_DATA_KEY, data)

        data["nested"]["a"] = 2
        read = store.get(COLLECTED_DATA_KEY)
        read["nested"]["a"] = 3

        assert store.get(COLLECTED_DATA_KEY) == {"nested": {"a": 1}}

    def test_keys_clear_independently(self) -> None:
        store = InMemoryKeyValueStore()
        set_roi_system(store, "cost_to_hire")
        store.set(COLLECTED_DATA_KEY, {"a": 1})
        store.set(CALCULATION_DATA_KEY, {"success": True})

        clear_roi_session(store)

        assert store.keys() == [CALCULATION_DATA_KEY]

        store.clear()
        assert store.keys() == []

    def test_agent_mode_accepts_beginner(self) -> None:
        store = InMemoryKeyValueStore({ROI_TYPE_KEY: "beginner"})
        assert get_agent_mode(store) is AgentMode.GUIDED

    def test_unknown_agent_mode_reads_as_missing(self) -> None:
        store = InMemoryKeyValueStore({ROI_TYPE_KEY: "wizard"})
        assert get_agent_mode(store) is None

    def test_profile_and_dimensions_round_trip(self) -> None:
        store = InMemoryKeyValueStore()
        set_company_profile(store, _profile())
        set_roi_dimensions(store, ["Labor Costs"])

        assert get_company_profile(store).name == "Acme"
        assert get_roi_dimensions(store) == ["Labor Costs"]


class TestCompanyProfile:
    def test_valid_profile(self) -> None:
        assert _profile(name="  Acme  ").name == "Acme"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"name": "   "},
            {"size": "10"},
            {"sector": "mining"},
            {"secondary_sectors": ["retail", "salud", "finanzas"]},
            {"secondary_sectors": ["tecnologia"]},
        ],
    )
    def test_invalid_profiles(self, overrides) -> None:
        with pytest.raises(ValidationError):
            _profile(**overrides)


class TestSessionContext:
    def test_missing_fields(self) -> None:
        assert SessionContext().missing_fields() == ["system_id", "agent_mode"]
        assert SessionContext(system_id="cost_to_hire", agent_mode=AgentMode.EXPERT).missing_fields() == []


class TestSessionStore:
    @pytest.fixture
    def store(self) -> SessionStore:
        return SessionStore(ttl_seconds=3600, logger=logging.getLogger("test.sessions"))

    async def test_create_and_get(self, store) -> None:
        session = await store.get_or_create()

        assert await store.get(session.session_id) is session
        assert await store.get_or_create(session.session_id) is session
        assert store.get_session_logger(session.session_id) is not None

    async def test_unknown_session(self, store) -> None:
        with pytest.raises(KeyError):
            await store.get("nope")

    async def test_expired_sessions_are_pruned(self, store) -> None:
        session = await store.get_or_create()
        session.updated_at = time.time() - 7200

        with pytest.raises(KeyError):
            await store.get(session.session_id)
        assert store.get_session_logger(session.session_id) is None
