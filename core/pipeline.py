"""Request-level orchestration of the four generation operations."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from agents import chat_agent, plan_agent, research_agent, selective_update
from config import GenerationProfiles
from core.errors import ValidationError
from core.models import PlanDocument, ResearchResult, SectionUpdateRequest
from llm import prompts
from llm.client import LLMClient

logger = logging.getLogger(__name__)


class GenerationPipeline:
    """Fills prompt templates and delegates each request to the model.

    Every operation is one model call. Failures from the model surface as
    ``UpstreamError`` and are never retried.
    """

    def __init__(self, llm: LLMClient, profiles: Optional[GenerationProfiles] = None) -> None:
        self.llm = llm
        self.profiles = profiles or GenerationProfiles()

    def chat(
        self,
        conversation_id: Optional[str],
        user_message: str,
        prior_history: Optional[Iterable[chat_agent.HistoryItem]] = None,
    ) -> str:
        logger.debug("Chat turn for conversation %s", conversation_id or "<anonymous>")
        return chat_agent.run_chat(self.llm, self.profiles.chat, user_message, prior_history)

    def research_company(self, company_name: str) -> ResearchResult:
        logger.info("Researching %s", company_name)
        return research_agent.research_company(self.llm, self.profiles.chat, company_name)

    def generate_account_plan(
        self,
        company_name: str,
        research_data: str,
        additional_context: Optional[str] = None,
    ) -> PlanDocument:
        plan = plan_agent.generate_account_plan(
            self.llm, self.profiles.plan, company_name, research_data, additional_context
        )
        if plan.is_structured:
            logger.info("Account plan for %s parsed into %d sections", company_name, len(plan.sections))
        else:
            logger.warning("No section headings found in plan for %s; returning full text only", company_name)
        return plan

    def update_section(self, section_name: str, current_content: str, instructions: str) -> str:
        request = SectionUpdateRequest(
            section_name=section_name,
            current_content=current_content,
            instructions=instructions,
        )
        return selective_update.regenerate_section(self.llm, self.profiles.update, request)

    def apply_section_update(self, plan: PlanDocument, request: SectionUpdateRequest) -> PlanDocument:
        """Regenerate one section and write it back into ``plan``."""

        if request.section_name not in plan.sections:
            raise ValidationError(f"Unknown section: {request.section_name}")
        updated = self.update_section(request.section_name, request.current_content, request.instructions)
        return selective_update.merge_section(plan, request.section_name, updated)

    def check_connection(self) -> str:
        return self.llm.chat(
            system_prompt="",
            messages=[{"role": "user", "content": prompts.CONNECTION_CHECK_PROMPT}],
            profile=self.profiles.connection_check,
        )
