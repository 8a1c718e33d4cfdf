"""Single-call company research report."""

from __future__ import annotations

from typing import List

from config import ModelProfile
from core.models import ResearchPhase, ResearchResult
from llm import prompts
from llm.client import LLMClient


def build_research_phases(company_name: str) -> List[ResearchPhase]:
    """Fixed status lines the UI reveals on a timer while research loads.

    They do not track the model call; the report comes back in one piece.
    """

    return [
        ResearchPhase(
            phase="basic_info",
            update=f"Starting research on {company_name}... Gathering basic company information.",
        ),
        ResearchPhase(phase="market_analysis", update="Analyzing market position and competitors..."),
        ResearchPhase(phase="financials", update="Looking into financial data and business model..."),
        ResearchPhase(phase="synthesis", update="Synthesizing findings from multiple sources..."),
    ]


def research_company(llm: LLMClient, profile: ModelProfile, company_name: str) -> ResearchResult:
    user_prompt = prompts.RESEARCH_PROMPT_TEMPLATE.format(company_name=company_name)
    research = llm.chat(
        system_prompt=prompts.RESEARCH_SYSTEM_PROMPT,
        messages=[{"role": "user", "content": user_prompt}],
        profile=profile,
    )
    return ResearchResult(
        company_name=company_name,
        research=research,
        phases=build_research_phases(company_name),
    )
