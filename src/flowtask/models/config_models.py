"""Configuration models for FlowTask.

Persisted as JSON by :class:`flowtask.services.config_service.ConfigService`.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

_HHMM = re.compile(r"^\d{2}:\d{2}$")


class AIConfig(BaseModel):
    """Text-completion service configuration."""

    endpoint: str = Field(default="https://api.openai.com/v1")
    model: str = Field(default="gpt-4o-mini")
    temperature: float = Field(default=0.3)
    max_tokens: int = Field(default=200)
    timeout: int = Field(default=30)
    retry: int = Field(default=3)
    api_key_env: str = Field(
        default="OPENAI_API_KEY", description="Environment variable holding the key"
    )


class RecurrenceConfig(BaseModel):
    """Recurrence extraction configuration."""

    default_time: str = Field(default="09:00")
    # Stores that only know the six base frequencies need the old collapse.
    collapse_weekday_patterns: bool = Field(default=False)

    @field_validator("default_time")
    @classmethod
    def validate_default_time(cls, v: str) -> str:
        """Require a zero-padded ``HH:MM`` value within the day."""
        if not _HHMM.match(v):
            raise ValueError("default_time must look like HH:MM")
        hour, minute = (int(part) for part in v.split(":"))
        if hour > 23 or minute > 59:
            raise ValueError("default_time must be within 00:00-23:59")
        return v


class OutputConfig(BaseModel):
    """Output configuration."""

    format: Literal["pretty", "json", "yaml"] = Field(default="pretty")
    color: bool = Field(default=True)


class UIConfig(BaseModel):
    """UI configuration."""

    timezone: str = Field(default="local", description="IANA name or 'local'")


class AppConfig(BaseModel):
    """Main FlowTask configuration"""

    ai: AIConfig = Field(default_factory=AIConfig)
    recurrence: RecurrenceConfig = Field(default_factory=RecurrenceConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
