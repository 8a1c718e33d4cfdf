"""LLM abstraction layer that hides provider-specific details."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from config import ModelProfile
from core.errors import ConfigurationError, UpstreamError

PROVIDER_KEYS = {
    "openai": ("OPENAI_API_KEY", "https://platform.openai.com/api-keys"),
    "gemini": ("GEMINI_API_KEY", "https://aistudio.google.com/app/apikey"),
}
PROVIDER_ALIASES = {"google": "gemini", "google-gemini": "gemini"}

DEFAULT_PROFILE = ModelProfile(temperature=0.7)


def to_langchain_messages(system_prompt: Optional[str], messages: List[Dict[str, str]]) -> List[BaseMessage]:
    """Convert role dicts into LangChain messages, system prompt first."""

    lc_messages: List[BaseMessage] = []
    if system_prompt:
        lc_messages.append(SystemMessage(content=system_prompt))
    for item in messages:
        role = item.get("role", "user")
        content = item.get("content", "")
        if role == "system":
            lc_messages.append(SystemMessage(content=content))
        elif role == "assistant":
            lc_messages.append(AIMessage(content=content))
        else:
            lc_messages.append(HumanMessage(content=content))
    return lc_messages


class LLMClient:
    """Small facade for whichever chat model the deployment is configured with."""

    def __init__(
        self,
        provider: str,
        api_key: Optional[str],
        openai_model: str = "gpt-4o-mini",
        gemini_model: str = "gemini-1.5-flash",
    ) -> None:
        self.provider = PROVIDER_ALIASES.get(provider.lower(), provider.lower())
        if self.provider not in PROVIDER_KEYS:
            raise ConfigurationError(
                f"Unsupported LLM_PROVIDER '{provider}'. Use one of: {', '.join(sorted(PROVIDER_KEYS))}."
            )
        if not api_key:
            env_name, signup_url = PROVIDER_KEYS[self.provider]
            raise ConfigurationError(f"{env_name} is not set. Get your API key from: {signup_url}")
        self.api_key = api_key
        self.openai_model = openai_model
        self.gemini_model = gemini_model
        self._clients: Dict[ModelProfile, Any] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def model_name(self) -> str:
        if self.provider == "openai":
            return self.openai_model
        return self.gemini_model

    def _build_client(self, profile: ModelProfile):
        if self.provider == "openai":
            return ChatOpenAI(
                model=self.openai_model,
                api_key=self.api_key,
                temperature=profile.temperature,
                max_tokens=profile.max_tokens,
            )
        return ChatGoogleGenerativeAI(
            model=self.gemini_model,
            google_api_key=self.api_key,
            temperature=profile.temperature,
            max_output_tokens=profile.max_tokens,
        )

    def _client_for(self, profile: ModelProfile):
        client = self._clients.get(profile)
        if client is None:
            client = self._build_client(profile)
            self._clients[profile] = client
        return client

    def chat(
        self,
        system_prompt: str,
        messages: List[Dict[str, str]],
        profile: Optional[ModelProfile] = None,
    ) -> str:
        """Send a conversation and return the completion text."""

        profile = profile or DEFAULT_PROFILE
        lc_messages = to_langchain_messages(system_prompt, messages)
        try:
            response = self._client_for(profile).invoke(lc_messages)
        except Exception as exc:
            self._logger.exception("%s call failed: %s", self.provider, exc)
            raise UpstreamError(str(exc)) from exc

        if isinstance(response, AIMessage):
            if isinstance(response.content, str):
                return response.content
            return _join_content_blocks(response.content)
        if isinstance(response, str):
            return response
        return json.dumps(response, default=str)


def _join_content_blocks(content: Any) -> str:
    """Flatten list-style message content (text blocks) into one string."""

    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and isinstance(block.get("text"), str):
                parts.append(block["text"])
        if parts:
            return "".join(parts)
    return json.dumps(content, default=str)
