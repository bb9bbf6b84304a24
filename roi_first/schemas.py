from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


COMPANY_SIZES = ("1-50", "51-200", "201-500", "501-1000", "1000+")

SECTORS = {
    "tecnologia": "Technology",
    "finanzas": "Finance",
    "salud": "Health",
    "manufactura": "Manufacturing",
    "retail": "Retail",
    "servicios": "Services",
    "educacion": "Education",
    "otro": "Other",
}

MAX_SECONDARY_SECTORS = 2


@dataclass(frozen=True)
class OpaqueToken:
    """A value owned by the remote agent.

    The conversation core stores and returns it verbatim and never looks
    inside; only the wire layer unwraps it when building a request.
    """

    payload: Any

    @classmethod
    def wrap(cls, value: Any) -> Optional["OpaqueToken"]:
        if value is None:
            return None
        return cls(value)

    def unwrap(self) -> Any:
        return self.payload


class AgentMode(str, Enum):
    """Conversation style chosen by the user, fixed for the whole session."""

    GUIDED = "guided"
    EXPERT = "expert"

    @classmethod
    def _missing_(cls, value):
        # The remote agent and older clients call the guided mode "beginner"
        if isinstance(value, str) and value.lower() == "beginner":
            return cls.GUIDED
        return None

    @property
    def user_type(self) -> str:
        return "expert" if self is AgentMode.EXPERT else "beginner"

    @property
    def agent_name(self) -> str:
        return "GPT ROI First" if self is AgentMode.EXPERT else "ROI First Assistant"


class ChatMessage(BaseModel):
    """One visible transcript entry; immutable once appended."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


# ---------------------------------------------------------------------------
# Agent turn endpoint
# ---------------------------------------------------------------------------


class FieldDescriptor(BaseModel):
    """A submitted field that failed validation or was never supplied."""

    model_config = ConfigDict(extra="allow")

    field: Optional[str] = None
    field_description: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_plain_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"field": value}
        return value

    @property
    def label(self) -> str:
        return self.field or self.field_description or ""


class CorrectionContext(BaseModel):
    is_correction: bool = True
    valid_data: Any = Field(default_factory=dict)
    correcting_fields: List[str] = Field(default_factory=list)


class AgentTurnRequest(BaseModel):
    """Body sent to the remote agent for one conversational turn."""

    message: str
    system: str
    conversation_history: List[Any] = Field(default_factory=list)
    user_type: Literal["beginner", "expert"]
    current_state: Any = None
    conversation_id: Any = None
    correction_context: Optional[CorrectionContext] = None

    def to_payload(self) -> Dict[str, Any]:
        # current_state / conversation_id are always sent, even when null;
        # correction_context only while a correction round is open.
        payload = self.model_dump(exclude={"correction_context"})
        if self.correction_context is not None:
            payload["correction_context"] = self.correction_context.model_dump()
        return payload


class AgentReply(BaseModel):
    """Structured reply of the remote agent."""

    model_config = ConfigDict(extra="allow")

    response: Optional[str] = None
    conversation_history: Optional[List[Any]] = None
    success: bool = True
    current_state: Any = None
    conversation_id: Any = None
    data: Any = None
    missing_or_invalid_fields: Optional[List[FieldDescriptor]] = None
    ready_for_calculation: Optional[bool] = None
    validation_report: Any = None
    status: Optional[str] = None
    timestamp: Optional[str] = None


# ---------------------------------------------------------------------------
# Calculation endpoint
# ---------------------------------------------------------------------------


class CalculationRequest(BaseModel):
    system: str
    collected_data: Any


class TcoGlobal(BaseModel):
    model_config = ConfigDict(extra="allow")

    current_tco: float
    future_tco: float
    roi_total: float
    roi_percentage: float
    payback_months: Optional[float] = None
    ahorro_neto_cliente_total: Optional[float] = None
    fee_servicio_total: Optional[float] = None


class DimensionResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    dimension_id: str
    dimension_name: str
    current_tco: float
    future_tco: float
    roi: float
    ia_improvement_factor: float
    impacto_ia: float
    impact_percentage: float
    description: Optional[str] = None


class CalculationResult(BaseModel):
    """Computed financial dimensions returned by the calculation service."""

    model_config = ConfigDict(extra="allow")

    success: bool
    system: str = ""
    summary_text: str = ""
    calculation_details: Optional[str] = None
    tco_global: Optional[TcoGlobal] = None
    dimensions: List[DimensionResult] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class CompanyProfile(BaseModel):
    """Company attributes captured before the conversation starts."""

    name: str = Field(..., min_length=1)
    size: str
    sector: str
    secondary_sectors: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("company name is required")
        return value

    @field_validator("size")
    @classmethod
    def _check_size(cls, value: str) -> str:
        if value not in COMPANY_SIZES:
            raise ValueError(f"size must be one of {', '.join(COMPANY_SIZES)}")
        return value

    @field_validator("sector")
    @classmethod
    def _check_sector(cls, value: str) -> str:
        if value not in SECTORS:
            raise ValueError(f"unknown sector: {value}")
        return value

    @model_validator(mode="after")
    def _check_secondary_sectors(self) -> "CompanyProfile":
        if len(self.secondary_sectors) > MAX_SECONDARY_SECTORS:
            raise ValueError(f"at most {MAX_SECONDARY_SECTORS} secondary sectors are allowed")
        for sector in self.secondary_sectors:
            if sector not in SECTORS:
                raise ValueError(f"unknown sector: {sector}")
            if sector == self.sector:
                raise ValueError("secondary sectors must differ from the primary sector")
        return self


class SessionCreatedResponse(BaseModel):
    session_id: str


class SelectSystemRequest(BaseModel):
    system: str = Field(..., description="Identifier of the process to analyse.")


class AgentSelectionRequest(BaseModel):
    agent_mode: AgentMode
    company: CompanyProfile


class ChatRequest(BaseModel):
    message: str = Field(..., description="User message to send to the agent.")


class ChatStatus(BaseModel):
    conversation_id: Any = None
    agent_history_length: int = 0
    awaiting_corrections: bool = False
    correction_status: Optional[str] = None
    pending_fields: List[str] = Field(default_factory=list)
    ready_for_calculation: bool = False
    input_placeholder: str = ""
    agent_name: str = ""
    system_name: str = ""


class ChatResponse(BaseModel):
    session_id: str
    reply: Optional[str] = None
    history: List[ChatMessage]
    status: ChatStatus
    error: Optional[str] = None


class CalculationResponse(BaseModel):
    session_id: str
    result: CalculationResult
    redirect: str
