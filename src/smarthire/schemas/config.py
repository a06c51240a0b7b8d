"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    path: str | None = None


class LLMConfig(BaseModel):
    model: str | None = None
    base_url: str | None = None
    timeout: float | None = None
    api_key: str | None = None


class NotificationConfig(BaseModel):
    toast_ttl_seconds: float | None = Field(default=None, gt=0)


class UsageConfig(BaseModel):
    limit: int | None = Field(default=None, ge=0)


class SearchConfig(BaseModel):
    min_similarity: float | None = Field(default=None, ge=0, le=100)


class AppConfig(BaseModel):
    storage: StorageConfig = Field(default_factory=StorageConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    usage: UsageConfig = Field(default_factory=UsageConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for section in ("storage", "llm", "notifications", "usage", "search"):
            values = getattr(self, section).model_dump(exclude_none=True)
            if values:
                settings[section] = values
        return settings


def load_config(raw: Any) -> AppConfig:
    """Validate a parsed YAML document; non-mappings raise ValidationError."""
    return AppConfig.model_validate(raw)
