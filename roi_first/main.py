import time
from typing import Any, Dict, Literal

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .calculation import CalculationTrigger
from .chat_orchestrator import ChatOrchestrator
from .config import SystemConfig, get_settings
from .errors import AgentCallFailed, CalculationFailed, PreconditionMissing
from .logging_config import setup_logging
from .remote_service import AgentServiceClient, CalculationServiceClient
from .results import ResultsOverview, build_overview
from .routes import SELECTION_ROUTE, agent_selection_route, chat_route
from .schemas import (
    AgentSelectionRequest,
    CalculationResponse,
    ChatRequest,
    ChatResponse,
    ChatStatus,
    SelectSystemRequest,
    SessionCreatedResponse,
)
from .session import ChatSession, SessionStore
from .storage import (
    clear_calculation_data,
    clear_roi_session,
    get_calculation_data,
    set_agent_mode,
    set_company_profile,
    set_roi_dimensions,
    set_roi_system,
)
from .system_registry import SystemRegistry

settings = get_settings()
logger = setup_logging(settings.log_level)

app = FastAPI(
    title="ROI First Backend",
    version="0.1.0",
    description="Runs the ROI data-collection conversation and hands complete data to the calculation service.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

session_store = SessionStore(ttl_seconds=settings.session_ttl_seconds, logger=logger)

# Static process metadata (loads every module in systems/)
system_registry = SystemRegistry(logger=logger)

agent_client = AgentServiceClient(settings=settings, logger=logger)
calculation_client = CalculationServiceClient(settings=settings, logger=logger)

chat_orchestrator = ChatOrchestrator(
    agent_client=agent_client,
    greeting=settings.greeting_message,
    logger=logger,
)
calculation_trigger = CalculationTrigger(client=calculation_client, logger=logger)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Request logging middleware with latency capture."""

    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    logger.info(
        "Handled request",
        extra={
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "client": request.client.host if request.client else None,
        },
    )
    return response


@app.exception_handler(PreconditionMissing)
async def precondition_missing_handler(request: Request, exc: PreconditionMissing) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={
            "detail": "Session data missing. Please start from the beginning.",
            "missing": exc.missing,
            "redirect": exc.redirect,
        },
    )


@app.exception_handler(CalculationFailed)
async def calculation_failed_handler(request: Request, exc: CalculationFailed) -> JSONResponse:
    status_code = 422 if exc.precondition else 502
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


async def _load_session(session_id: str) -> ChatSession:
    try:
        return await session_store.get(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found") from exc


def _chat_status(session: ChatSession) -> ChatStatus:
    correction = session.correction
    awaiting = bool(correction and correction.awaiting_corrections)
    context = session.context
    mode = context.agent_mode
    return ChatStatus(
        conversation_id=session.conversation.conversation_id,
        agent_history_length=len(session.conversation.history),
        awaiting_corrections=awaiting,
        correction_status=correction.status if awaiting else None,
        pending_fields=correction.field_labels if awaiting else [],
        ready_for_calculation=session.ready_for_calculation,
        input_placeholder=(
            "Send only the corrected value..." if awaiting else "write the general description of the process"
        ),
        agent_name=mode.agent_name if mode else "",
        system_name=system_registry.display_name(context.system_id) if context.system_id else "",
    )


def _chat_response(session: ChatSession, reply: Any = None, error: Any = None) -> ChatResponse:
    return ChatResponse(
        session_id=session.session_id,
        reply=reply,
        history=list(session.messages),
        status=_chat_status(session),
        error=error,
    )


def _system_payload(config: SystemConfig) -> Dict[str, Any]:
    template = system_registry.template_file(config.system_id)
    return {
        **config.model_dump(),
        "template_file": template,
        "template_download_name": system_registry.template_download_name(template),
    }


@app.get("/api/health")
async def healthcheck() -> Dict[str, str]:
    return {"status": "ok", "service": "roi-first-backend"}


@app.get("/api/systems")
async def get_systems() -> Dict[str, Any]:
    """Processes available on the selection grid."""
    systems = system_registry.list_systems()
    return {
        "systems": [_system_payload(config) for config in systems],
        "total_systems": len(systems),
    }


@app.get("/api/systems/{system_id}")
async def get_system(system_id: str) -> Dict[str, Any]:
    config = system_registry.get_system(system_id)
    if config is None:
        raise HTTPException(status_code=404, detail="System not found")
    return _system_payload(config)


@app.post("/api/session", response_model=SessionCreatedResponse)
async def create_session() -> SessionCreatedResponse:
    session = await session_store.get_or_create()
    return SessionCreatedResponse(session_id=session.session_id)


@app.post("/api/session/{session_id}/system")
async def select_system(session_id: str, request: SelectSystemRequest) -> Dict[str, Any]:
    session = await _load_session(session_id)
    config = system_registry.get_system(request.system)
    if config is None:
        raise HTTPException(status_code=404, detail="System not found")

    set_roi_system(session.storage, config.system_id)
    set_roi_dimensions(session.storage, config.dimensions)

    session_logger = session_store.get_session_logger(session_id)
    if session_logger:
        session_logger.info(f"System selected: {config.system_id}")

    return {
        "system": config.system_id,
        "dimensions": config.dimensions,
        "redirect": agent_selection_route(config.system_id),
    }


@app.post("/api/session/{session_id}/agent")
async def select_agent(session_id: str, request: AgentSelectionRequest) -> Dict[str, Any]:
    session = await _load_session(session_id)
    system_id = session.context.system_id
    if not system_id:
        raise PreconditionMissing(["system_id"])

    set_company_profile(session.storage, request.company)
    set_agent_mode(session.storage, request.agent_mode)

    session_logger = session_store.get_session_logger(session_id)
    if session_logger:
        session_logger.info(f"Agent mode selected: {request.agent_mode.value}")

    return {
        "agent_mode": request.agent_mode.value,
        "agent_name": request.agent_mode.agent_name,
        "redirect": chat_route(system_id),
    }


@app.get("/api/session/{session_id}/chat", response_model=ChatResponse)
async def get_chat(session_id: str) -> ChatResponse:
    session = await _load_session(session_id)
    return _chat_response(session)


@app.post("/api/session/{session_id}/chat/start", response_model=ChatResponse)
async def start_chat(session_id: str) -> ChatResponse:
    session = await _load_session(session_id)
    session_logger = session_store.get_session_logger(session_id)
    try:
        message = await chat_orchestrator.start_session(session, log=session_logger)
    except AgentCallFailed as exc:
        logger.exception("Starting the conversation failed")
        raise HTTPException(status_code=502, detail="Error starting the conversation.") from exc
    return _chat_response(session, reply=message.content if message else None)


@app.post("/api/session/{session_id}/chat", response_model=ChatResponse)
async def chat(session_id: str, request: ChatRequest) -> ChatResponse:
    session = await _load_session(session_id)
    if not request.message.strip():
        raise HTTPException(status_code=422, detail="Message must not be empty")

    session_logger = session_store.get_session_logger(session_id)
    result = await chat_orchestrator.send_message(session, request.message, log=session_logger)

    logger.info(
        "Chat turn complete",
        extra={
            "session_id": session_id,
            "history_len": len(session.messages),
            "failed": result.error is not None,
        },
    )
    error = "Failed to send message. Please try again." if result.error else None
    return _chat_response(session, reply=result.message.content if result.message else None, error=error)


@app.post("/api/session/{session_id}/chat/clear", response_model=ChatResponse)
async def clear_chat(session_id: str) -> ChatResponse:
    session = await _load_session(session_id)
    session_logger = session_store.get_session_logger(session_id)
    try:
        message = await chat_orchestrator.reset(session, log=session_logger)
    except AgentCallFailed as exc:
        logger.exception("Restarting the conversation failed")
        raise HTTPException(status_code=502, detail="Error starting the conversation.") from exc
    return _chat_response(session, reply=message.content if message else None)


@app.post("/api/session/{session_id}/calculate", response_model=CalculationResponse)
async def calculate(session_id: str) -> CalculationResponse:
    session = await _load_session(session_id)
    session_logger = session_store.get_session_logger(session_id)
    outcome = await calculation_trigger.run(session, log=session_logger)
    return CalculationResponse(session_id=session_id, result=outcome.result, redirect=outcome.redirect)


@app.get("/api/session/{session_id}/results", response_model=ResultsOverview)
async def get_results(session_id: str, projection: Literal["current", "future"] = "current") -> ResultsOverview:
    session = await _load_session(session_id)
    result = get_calculation_data(session.storage)
    if result is None or result.tco_global is None:
        raise HTTPException(status_code=404, detail="No calculation results")
    return build_overview(result, projection)


@app.post("/api/session/{session_id}/new-case")
async def new_case(session_id: str) -> Dict[str, str]:
    session = await _load_session(session_id)
    session_logger = session_store.get_session_logger(session_id)

    clear_calculation_data(session.storage)
    clear_roi_session(session.storage)
    chat_orchestrator.clear_state(session, log=session_logger)

    return {"redirect": SELECTION_ROUTE}


@app.get("/")
async def root():
    return {"message": "ROI First backend is running"}
