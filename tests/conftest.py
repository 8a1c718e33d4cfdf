"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Union

import pytest

from app import create_app
from config import GenerationProfiles, ModelProfile, Settings
from core.conversation_store import ConversationStore
from core.errors import UpstreamError
from core.pipeline import GenerationPipeline

Reply = Union[str, Exception, Callable[[str, List[Dict[str, str]]], str]]


class FakeLLM:
    """Stands in for LLMClient: records calls and returns scripted replies."""

    provider = "fake"
    model_name = "fake-model"

    def __init__(self, replies: Optional[List[Reply]] = None, default: str = "ok") -> None:
        self.replies: List[Reply] = list(replies or [])
        self.default = default
        self.calls: List[Dict[str, Any]] = []

    def queue(self, *replies: Reply) -> "FakeLLM":
        self.replies.extend(replies)
        return self

    def chat(self, system_prompt: str, messages: List[Dict[str, str]], profile: Optional[ModelProfile] = None) -> str:
        self.calls.append({"system_prompt": system_prompt, "messages": list(messages), "profile": profile})
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(system_prompt, messages)
        return reply

    @property
    def last_call(self) -> Dict[str, Any]:
        return self.calls[-1]


PLAN_TEXT = """Here is the account plan you asked for.

## 1. Executive Summary
Acme is a strong fit.

## 2. Company Overview
Founded in 1949.
Makes anvils.

## 3. Market Position & Competitors
Leader in anvils.

## 4. Key Stakeholders
Wile E. Coyote, buyer.

## 5. Business Challenges & Opportunities
Roadrunner containment.

## 6. Product/Service Fit
Rocket skates.

## 7. Engagement Strategy
Quarterly business reviews.

## 8. Success Metrics
Anvils shipped.

## 9. Timeline & Milestones
Q1 pilot, Q2 rollout.

## 10. Risk Assessment
Gravity.
"""


@pytest.fixture
def profiles() -> GenerationProfiles:
    return GenerationProfiles(
        chat=ModelProfile(temperature=0.7),
        plan=ModelProfile(temperature=0.6, max_tokens=3000),
        update=ModelProfile(temperature=0.6, max_tokens=1000),
    )


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def pipeline(fake_llm: FakeLLM, profiles: GenerationProfiles) -> GenerationPipeline:
    return GenerationPipeline(fake_llm, profiles)


@pytest.fixture
def store() -> ConversationStore:
    return ConversationStore()


@pytest.fixture
def app(pipeline: GenerationPipeline, store: ConversationStore):
    settings = Settings(llm_provider="openai", openai_api_key="test-openai-key")
    flask_app = create_app(settings=settings, pipeline=pipeline, store=store)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upstream_failure() -> UpstreamError:
    return UpstreamError("Rate limit reached for model in organization org-123")
