"""Account plan generation from research text."""

from __future__ import annotations

from typing import Optional

from config import ModelProfile
from core.models import CANONICAL_TITLES, PlanDocument
from core.section_parser import parse_account_plan
from llm import prompts
from llm.client import LLMClient


def build_plan_prompt(company_name: str, research_data: str, additional_context: Optional[str] = None) -> str:
    context = additional_context.strip() if additional_context else ""
    return prompts.ACCOUNT_PLAN_PROMPT_TEMPLATE.format(
        company_name=company_name,
        research_data=research_data,
        additional_context=context or prompts.NO_CONTEXT_MARKER,
        section_list=prompts.SECTION_LIST,
    )


def generate_account_plan(
    llm: LLMClient,
    profile: ModelProfile,
    company_name: str,
    research_data: str,
    additional_context: Optional[str] = None,
) -> PlanDocument:
    """Ask for the ten-section plan and split the reply into sections."""

    plan_text = llm.chat(
        system_prompt=prompts.ACCOUNT_PLAN_SYSTEM_PROMPT,
        messages=[
            {
                "role": "user",
                "content": build_plan_prompt(company_name, research_data, additional_context),
            }
        ],
        profile=profile,
    )
    return parse_account_plan(plan_text, CANONICAL_TITLES)
