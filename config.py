"""Application settings loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name) or default
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


@dataclass(frozen=True)
class ModelProfile:
    """Generation parameters for one kind of model call."""

    temperature: float
    max_tokens: Optional[int] = None


@dataclass(frozen=True)
class GenerationProfiles:
    """Parameter profiles handed to the generation pipeline."""

    chat: ModelProfile = ModelProfile(temperature=0.7)
    plan: ModelProfile = ModelProfile(temperature=0.6, max_tokens=3000)
    update: ModelProfile = ModelProfile(temperature=0.6, max_tokens=1000)
    connection_check: ModelProfile = ModelProfile(temperature=0.7, max_tokens=50)


@dataclass(slots=True)
class Settings:
    debug: bool = field(default_factory=lambda: os.getenv("FLASK_DEBUG", "false").lower() == "true")
    port: int = field(default_factory=lambda: _env_int("PORT", 3001))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    llm_provider: str = field(default_factory=lambda: os.getenv("LLM_PROVIDER", "openai").lower())
    openai_api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    gemini_api_key: Optional[str] = field(default_factory=lambda: os.getenv("GEMINI_API_KEY"))
    openai_model: str = field(default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4o-mini"))
    gemini_model: str = field(default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-1.5-flash"))
    conversation_limit: int = field(default_factory=lambda: _env_int("CONVERSATION_LIMIT", 0))
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))

    @property
    def api_key(self) -> Optional[str]:
        """Credential for whichever provider is active."""

        if self.llm_provider == "openai":
            return self.openai_api_key
        return self.gemini_api_key

    def profiles(self) -> GenerationProfiles:
        return GenerationProfiles(
            chat=ModelProfile(temperature=_env_float("CHAT_TEMPERATURE", 0.7)),
            plan=ModelProfile(
                temperature=_env_float("PLAN_TEMPERATURE", 0.6),
                max_tokens=_env_int("PLAN_MAX_TOKENS", 3000),
            ),
            update=ModelProfile(
                temperature=_env_float("UPDATE_TEMPERATURE", 0.6),
                max_tokens=_env_int("UPDATE_MAX_TOKENS", 1000),
            ),
        )


def get_settings() -> Settings:
    return Settings()
