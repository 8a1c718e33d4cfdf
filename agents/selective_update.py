"""Selective regeneration of individual account plan sections."""

from __future__ import annotations

from config import ModelProfile
from core.models import PlanDocument, SectionUpdateRequest
from llm import prompts
from llm.client import LLMClient


def regenerate_section(llm: LLMClient, profile: ModelProfile, request: SectionUpdateRequest) -> str:
    """Return replacement text for one section; no plan is modified here."""

    user_prompt = prompts.SECTION_UPDATE_PROMPT_TEMPLATE.format(
        section_name=request.section_name,
        current_content=request.current_content,
        instructions=request.instructions,
    )
    return llm.chat(
        system_prompt=prompts.SECTION_UPDATE_SYSTEM_PROMPT,
        messages=[{"role": "user", "content": user_prompt}],
        profile=profile,
    )


def merge_section(plan: PlanDocument, section_name: str, updated_content: str) -> PlanDocument:
    """Overwrite one section of a held plan, leaving the others untouched."""

    return plan.update_section(section_name, updated_content)
