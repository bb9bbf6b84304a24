from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SystemConfig(BaseModel):
    """Display metadata for a single ROI process (system)."""

    system_id: str = Field(..., description="Identifier sent to the remote services")
    name: str = Field(..., description="Short name shown on the selection grid")
    display_name: str = Field(..., description="Name shown in chat and overview headers")
    description: str = Field(default="", description="One-line summary of the process")
    dimensions: List[str] = Field(default_factory=list, description="Dimension labels of the process")
    template_file: str = Field(default="", description="Data template offered to expert users")
    listed: bool = Field(default=True, description="Shown on the selection grid")


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    agent_service_url: str = Field(
        default="http://localhost:8001",
        validation_alias="AGENT_SERVICE_URL",
    )
    chat_path: str = Field(default="/chat", validation_alias="CHAT_PATH")
    calculate_path: str = Field(default="/calculate", validation_alias="CALCULATE_PATH")
    request_timeout_seconds: float = Field(default=120.0, validation_alias="REQUEST_TIMEOUT_SECONDS")
    greeting_message: str = Field(default="Hello", validation_alias="GREETING_MESSAGE")
    session_ttl_seconds: int = Field(default=3600, validation_alias="SESSION_TTL_SECONDS")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    allow_origins: list[str] = Field(default_factory=lambda: ["*"], validation_alias="ALLOW_ORIGINS")

    @property
    def chat_url(self) -> str:
        return self.agent_service_url.rstrip("/") + self.chat_path

    @property
    def calculate_url(self) -> str:
        return self.agent_service_url.rstrip("/") + self.calculate_path


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
