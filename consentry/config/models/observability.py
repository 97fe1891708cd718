"""Observability configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Structured logging configuration."""

    level: LogLevel = Field(default="INFO", description="Minimum log level")
    format: Literal["json", "console"] = Field(
        default="json",
        description="json for production, console for development",
    )
    redact_pii: bool = Field(
        default=True,
        description="Mask personal data in log events",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
