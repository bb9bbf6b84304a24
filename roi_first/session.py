import asyncio
import time
import uuid
from typing import Any, Dict, List, Optional
import logging

from pydantic import BaseModel, ConfigDict, Field

from .logging_config import get_session_logger, close_session_logger
from .schemas import AgentMode, ChatMessage, CompanyProfile, FieldDescriptor, OpaqueToken
from .storage import InMemoryKeyValueStore, KeyValueStore, get_agent_mode, get_company_profile, get_roi_system


class SessionContext(BaseModel):
    """Selections made before the conversation starts. Read-only to the orchestrator."""

    system_id: Optional[str] = None
    agent_mode: Optional[AgentMode] = None
    company_profile: Optional[CompanyProfile] = None

    @classmethod
    def from_store(cls, store: KeyValueStore) -> "SessionContext":
        return cls(
            system_id=get_roi_system(store),
            agent_mode=get_agent_mode(store),
            company_profile=get_company_profile(store),
        )

    def missing_fields(self) -> List[str]:
        missing = []
        if not self.system_id:
            missing.append("system_id")
        if self.agent_mode is None:
            missing.append("agent_mode")
        return missing


class ConversationState(BaseModel):
    """Control-bearing state handed back and forth with the remote agent."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    conversation_id: Any = None
    agent_state: Optional[OpaqueToken] = None
    history: List[OpaqueToken] = Field(default_factory=list)


class CorrectionState(BaseModel):
    """Open correction round: some submitted fields failed validation."""

    awaiting_corrections: bool = True
    valid_data: Any = Field(default_factory=dict)
    invalid_fields: List[FieldDescriptor] = Field(default_factory=list)
    status: Optional[str] = None

    @property
    def field_labels(self) -> List[str]:
        return [field.label for field in self.invalid_fields]


class ChatSession(BaseModel):
    """Everything one browsing session knows about its ROI conversation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    session_id: str
    messages: List[ChatMessage] = Field(default_factory=list)
    conversation: ConversationState = Field(default_factory=ConversationState)
    correction: Optional[CorrectionState] = None
    collected_data: Any = None
    ready_for_calculation: bool = False
    # Bumped on every reset; replies from an older generation are dropped
    generation: int = 0
    storage: KeyValueStore = Field(default_factory=InMemoryKeyValueStore, exclude=True)
    updated_at: float = Field(default_factory=time.time)

    @property
    def context(self) -> SessionContext:
        return SessionContext.from_store(self.storage)


class SessionStore:
    """In-memory session store with TTL cleanup."""

    def __init__(self, ttl_seconds: int, logger):
        self.ttl_seconds = ttl_seconds
        self.sessions: Dict[str, ChatSession] = {}
        self.lock = asyncio.Lock()
        self.logger = logger  # Main app logger
        self.session_loggers: Dict[str, logging.Logger] = {}  # Session-specific loggers

    async def get_or_create(self, session_id: Optional[str] = None) -> ChatSession:
        async with self.lock:
            self._prune()
            if session_id and session_id in self.sessions:
                session = self.sessions[session_id]
                session.updated_at = time.time()
                return session

            new_session = ChatSession(session_id=session_id or str(uuid.uuid4()))
            self.sessions[new_session.session_id] = new_session

            session_logger = get_session_logger(new_session.session_id)
            self.session_loggers[new_session.session_id] = session_logger

            self.logger.info("Created new ROI session", extra={"session_id": new_session.session_id})
            session_logger.info("New ROI session created")

            return new_session

    async def get(self, session_id: str) -> ChatSession:
        async with self.lock:
            self._prune()
            if session_id not in self.sessions:
                raise KeyError(f"session {session_id} not found")
            session = self.sessions[session_id]
            session.updated_at = time.time()
            return session

    def _prune(self) -> None:
        if not self.ttl_seconds:
            return
        cutoff = time.time() - self.ttl_seconds
        expired = [sid for sid, data in self.sessions.items() if data.updated_at < cutoff]
        for sid in expired:
            self.sessions.pop(sid, None)
            self.logger.info("Pruned expired session", extra={"session_id": sid})
            self._close_logger(sid)

    def _close_logger(self, session_id: str) -> None:
        if session_id in self.session_loggers:
            close_session_logger(session_id)
            del self.session_loggers[session_id]

    def get_session_logger(self, session_id: str) -> Optional[logging.Logger]:
        """Get the logger for a specific session."""
        return self.session_loggers.get(session_id)
