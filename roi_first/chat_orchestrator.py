import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from .completion import CompletionDetector
from .errors import AgentCallFailed, PreconditionMissing
from .remote_service import AgentServiceClient
from .schemas import AgentReply, AgentTurnRequest, ChatMessage, CorrectionContext, OpaqueToken
from .session import ChatSession, ConversationState, CorrectionState
from .storage import clear_collected_data


DEFAULT_GREETING_REPLY = "Welcome to the ROI analysis."
DEFAULT_TURN_REPLY = "Thank you for your message. I will help you with the ROI analysis."
FALLBACK_REPLY = "Sorry, there was an error processing your message. Please try again."

_UNSET: Any = object()


@dataclass(frozen=True)
class Overrides:
    """Replacement conversation values for the next call only.

    Fields left unset fall back to the session's current state.
    """

    conversation_id: Any = _UNSET
    agent_state: Any = _UNSET
    history: Any = _UNSET

    @classmethod
    def empty(cls) -> "Overrides":
        return cls(conversation_id=None, agent_state=None, history=[])

    def resolve(self, current: ConversationState) -> ConversationState:
        return ConversationState(
            conversation_id=current.conversation_id if self.conversation_id is _UNSET else self.conversation_id,
            agent_state=current.agent_state if self.agent_state is _UNSET else self.agent_state,
            history=list(current.history if self.history is _UNSET else self.history),
        )


@dataclass
class TurnResult:
    """What one user turn produced for the caller to render."""

    message: Optional[ChatMessage] = None
    reply: Optional[AgentReply] = None
    error: Optional[str] = None
    discarded: bool = False


class ChatOrchestrator:
    """
    Drives the ROI data-collection conversation.

    Workflow:
    1. Session start sends a hidden greeting to the remote agent and shows only its answer
    2. Each user turn is forwarded with the system id, agent mode, the agent's own
       history and state, and, during a correction round, the correction context
    3. The reply replaces the conversation state and goes through the completion detector
    4. The detector opens or closes correction rounds and, once every field is collected,
       stores the collected data and raises the ready-to-calculate flag
    5. Clearing the chat wipes everything but the calculation result and starts over

    Each reset bumps the session generation. A reply that comes back after a reset
    belongs to an older generation and is dropped without touching the session.
    """

    def __init__(
        self,
        agent_client: AgentServiceClient,
        detector: Optional[CompletionDetector] = None,
        greeting: str = "Hello",
        logger: Optional[logging.Logger] = None
    ):
        self.agent_client = agent_client
        self.logger = logger or logging.getLogger(__name__)
        self.detector = detector or CompletionDetector(logger=self.logger)
        self.greeting = greeting

    def _require_context(self, session: ChatSession, log: logging.Logger):
        context = session.context
        missing = context.missing_fields()
        if missing:
            log.warning(f"Session data missing: {', '.join(missing)}")
            raise PreconditionMissing(missing)
        return context

    @staticmethod
    def _correction_context(correction: Optional[CorrectionState]) -> Optional[CorrectionContext]:
        if correction is None or not correction.awaiting_corrections:
            return None
        return CorrectionContext(
            is_correction=True,
            valid_data=correction.valid_data,
            correcting_fields=correction.field_labels,
        )

    @staticmethod
    def _next_conversation(current: ConversationState, reply: AgentReply) -> ConversationState:
        history: List[OpaqueToken] = list(current.history)
        if reply.conversation_history is not None:
            history = [OpaqueToken(item) for item in reply.conversation_history]

        conversation_id = current.conversation_id
        agent_state = current.agent_state
        if reply.current_state is not None or reply.conversation_id is not None:
            conversation_id = reply.conversation_id
            agent_state = OpaqueToken.wrap(reply.current_state)

        return ConversationState(conversation_id=conversation_id, agent_state=agent_state, history=history)

    async def submit(
        self,
        session: ChatSession,
        text: str,
        overrides: Optional[Overrides] = None,
        log: Optional[logging.Logger] = None,
    ) -> Optional[AgentReply]:
        """
        Send one message to the remote agent and fold the reply into the session.

        Args:
            session: Session whose conversation and correction state are updated
            text: Outgoing message (or the hidden greeting)
            overrides: Values that replace the session's conversation state for this call
            log: Optional session-specific logger

        Returns:
            The agent reply, or None when the session was reset while the call
            was outstanding and the reply was dropped.

        Raises:
            PreconditionMissing: system id or agent mode is not selected
            AgentCallFailed: transport, HTTP or parse failure
        """
        log = log or self.logger
        context = self._require_context(session, log)

        effective = (overrides or Overrides()).resolve(session.conversation)
        correction_context = self._correction_context(session.correction)
        if correction_context is not None:
            log.info(f"Sending correction with context for fields: {correction_context.correcting_fields}")

        request = AgentTurnRequest(
            message=text,
            system=context.system_id,
            conversation_history=[item.unwrap() for item in effective.history],
            user_type=context.agent_mode.user_type,
            current_state=effective.agent_state.unwrap() if effective.agent_state is not None else None,
            conversation_id=effective.conversation_id,
            correction_context=correction_context,
        )

        generation = session.generation
        reply = await self.agent_client.chat(request)

        if session.generation != generation:
            log.info(f"Dropping stale agent reply from generation {generation} (now {session.generation})")
            return None

        session.conversation = self._next_conversation(session.conversation, reply)
        reduction = self.detector.reduce(reply, context.agent_mode, log)
        reduction.apply(session)

        log.info(
            f"Agent turn applied - outcome: {reduction.outcome.value}, "
            f"history: {len(session.conversation.history)}, "
            f"ready: {session.ready_for_calculation}"
        )
        return reply

    async def start_session(
        self,
        session: ChatSession,
        log: Optional[logging.Logger] = None,
    ) -> Optional[ChatMessage]:
        """
        Open the conversation with the hidden greeting.

        The agent's answer replaces the transcript; the greeting itself is never
        shown. If the call fails the previous transcript stays visible. Raises
        PreconditionMissing before any call when the session context is incomplete.
        """
        log = log or self.logger
        self._require_context(session, log)

        # A new conversation starts outside any correction round
        session.correction = None
        session.conversation = ConversationState()
        session.generation += 1

        log.info("Starting conversation")
        reply = await self.submit(session, self.greeting, Overrides.empty(), log=log)
        if reply is None:
            return None

        message = ChatMessage(role="assistant", content=reply.response or DEFAULT_GREETING_REPLY)
        session.messages = [message]
        return message

    async def send_message(
        self,
        session: ChatSession,
        text: str,
        log: Optional[logging.Logger] = None,
    ) -> TurnResult:
        """
        Run one visible user turn.

        The user message is appended before the call. On AgentCallFailed a fallback
        assistant entry is appended instead of the reply and the error is returned,
        so the user can simply resubmit.
        """
        log = log or self.logger
        if not text or not text.strip():
            raise ValueError("Message must not be empty")
        self._require_context(session, log)

        session.messages.append(ChatMessage(role="user", content=text))
        generation = session.generation
        log.info(f"User message: {len(text)} chars")

        try:
            reply = await self.submit(session, text, log=log)
        except AgentCallFailed as exc:
            if session.generation != generation:
                log.info("Agent call failed after the session was reset; ignoring")
                return TurnResult(error=exc.message, discarded=True)
            log.error(f"Agent call failed: {exc.message}")
            fallback = ChatMessage(role="assistant", content=FALLBACK_REPLY)
            session.messages.append(fallback)
            return TurnResult(message=fallback, error=exc.message)

        if reply is None:
            return TurnResult(discarded=True)

        message = ChatMessage(role="assistant", content=reply.response or DEFAULT_TURN_REPLY)
        session.messages.append(message)
        return TurnResult(message=message, reply=reply)

    def clear_state(self, session: ChatSession, log: Optional[logging.Logger] = None) -> None:
        """Empty transcript, conversation, correction round and collected data in one step."""
        log = log or self.logger
        session.messages = []
        session.conversation = ConversationState()
        session.correction = None
        session.ready_for_calculation = False
        session.collected_data = None
        clear_collected_data(session.storage)
        session.generation += 1
        log.info(f"Chat cleared (generation {session.generation})")

    async def reset(
        self,
        session: ChatSession,
        log: Optional[logging.Logger] = None,
    ) -> Optional[ChatMessage]:
        """Clear the chat, keep the calculation result, and greet again with a clean context."""
        self.clear_state(session, log)
        return await self.start_session(session, log=log)
