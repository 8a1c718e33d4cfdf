"""Tests for the generation pipeline against a scripted model."""

import pytest

from agents.research_agent import build_research_phases
from config import ModelProfile
from core.errors import UpstreamError, ValidationError
from core.models import CANONICAL_TITLES, ConversationMessage, MessageRole, PlanDocument, SectionUpdateRequest
from llm import prompts

from conftest import PLAN_TEXT


class TestChat:
    def test_empty_history_is_system_plus_one_user_turn(self, pipeline, fake_llm):
        fake_llm.queue("Hello there")

        reply = pipeline.chat("conv-1", "Hi", [])

        assert reply == "Hello there"
        call = fake_llm.last_call
        assert call["system_prompt"] == prompts.CHAT_SYSTEM_PROMPT
        assert call["messages"] == [{"role": "user", "content": "Hi"}]

    def test_none_history(self, pipeline, fake_llm):
        pipeline.chat(None, "Hi")

        assert fake_llm.last_call["messages"] == [{"role": "user", "content": "Hi"}]

    def test_history_is_replayed_in_order(self, pipeline, fake_llm):
        history = [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "Tell me about Acme"},
            ConversationMessage(role=MessageRole.ASSISTANT, content="Acme makes anvils."),
            {"role": "bot", "content": "odd role"},
        ]

        pipeline.chat("conv-1", "And competitors?", history)

        assert fake_llm.last_call["messages"] == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "Tell me about Acme"},
            {"role": "assistant", "content": "Acme makes anvils."},
            {"role": "user", "content": "odd role"},
            {"role": "user", "content": "And competitors?"},
        ]

    def test_uses_chat_profile(self, pipeline, fake_llm, profiles):
        pipeline.chat("c", "Hi")

        assert fake_llm.last_call["profile"] == profiles.chat

    def test_system_prompt_lists_canonical_sections(self):
        for title in CANONICAL_TITLES:
            assert title in prompts.CHAT_SYSTEM_PROMPT


class TestResearch:
    def test_returns_raw_text_and_fixed_phases(self, pipeline, fake_llm):
        fake_llm.queue("Acme research report")

        result = pipeline.research_company("Acme Corp")

        assert result.research == "Acme research report"
        assert result.company_name == "Acme Corp"
        assert [phase.phase for phase in result.phases] == [
            "basic_info",
            "market_analysis",
            "financials",
            "synthesis",
        ]
        assert "Acme Corp" in result.phases[0].update

    def test_prompt_is_parameterized_by_company(self, pipeline, fake_llm):
        pipeline.research_company("Initech")

        call = fake_llm.last_call
        assert call["system_prompt"] == prompts.RESEARCH_SYSTEM_PROMPT
        assert 'Research the company "Initech"' in call["messages"][0]["content"]

    def test_phases_are_independent_of_the_model(self, fake_llm):
        assert build_research_phases("Acme") == build_research_phases("Acme")
        assert fake_llm.calls == []


class TestGenerateAccountPlan:
    def test_parses_sections(self, pipeline, fake_llm, profiles):
        fake_llm.queue(PLAN_TEXT)

        plan = pipeline.generate_account_plan("Acme Corp", "research text")

        assert isinstance(plan, PlanDocument)
        assert plan.section_titles() == list(CANONICAL_TITLES)
        assert plan.full_text == PLAN_TEXT
        assert fake_llm.last_call["profile"] == profiles.plan

    @pytest.mark.parametrize("context", [None, "", "   "])
    def test_missing_context_uses_marker(self, pipeline, fake_llm, context):
        pipeline.generate_account_plan("Acme", "research", context)

        content = fake_llm.last_call["messages"][0]["content"]
        assert "Additional Context:\nNone provided" in content

    def test_prompt_embeds_research_and_context(self, pipeline, fake_llm):
        pipeline.generate_account_plan("Acme", "Acme {makes} anvils", "Focus on EMEA")

        content = fake_llm.last_call["messages"][0]["content"]
        assert "Acme {makes} anvils" in content
        assert "Focus on EMEA" in content
        assert "use ## for section titles" in content
        for title in CANONICAL_TITLES:
            assert title in content

    def test_unstructured_reply_degrades_to_full_text(self, pipeline, fake_llm):
        fake_llm.queue("I could not produce a plan.")

        plan = pipeline.generate_account_plan("Acme", "research")

        assert plan.sections == {}
        assert plan.full_text == "I could not produce a plan."


class TestUpdateSection:
    def test_returns_raw_replacement(self, pipeline, fake_llm, profiles):
        fake_llm.queue("  New summary.  ")

        updated = pipeline.update_section("Executive Summary", "Old summary.", "Make it punchier")

        assert updated == "  New summary.  "
        call = fake_llm.last_call
        assert call["profile"] == profiles.update
        content = call["messages"][0]["content"]
        assert 'updating the "Executive Summary" section' in content
        assert "Old summary." in content
        assert "Make it punchier" in content

    def test_apply_update_stores_reply_verbatim_in_named_section(self, pipeline, fake_llm):
        fake_llm.queue(PLAN_TEXT, "\n- bullet one\n- bullet two\n\n")
        plan = pipeline.generate_account_plan("Acme", "research")
        others = {k: v for k, v in plan.sections.items() if k != "Executive Summary"}

        request = SectionUpdateRequest(
            section_name="Executive Summary",
            current_content=plan.sections["Executive Summary"],
            instructions="Make it punchier",
        )
        pipeline.apply_section_update(plan, request)

        assert plan.sections["Executive Summary"] == "\n- bullet one\n- bullet two\n\n"
        assert {k: v for k, v in plan.sections.items() if k != "Executive Summary"} == others

    def test_apply_update_rejects_unknown_section_before_calling_model(self, pipeline, fake_llm):
        plan = PlanDocument(full_text="x", sections={"Executive Summary": "a"})
        request = SectionUpdateRequest(section_name="Nope", current_content="a", instructions="b")

        with pytest.raises(ValidationError):
            pipeline.apply_section_update(plan, request)
        assert fake_llm.calls == []


class TestUpstreamFailures:
    @pytest.mark.parametrize(
        "operation",
        [
            lambda p: p.chat("c", "Hi"),
            lambda p: p.research_company("Acme"),
            lambda p: p.generate_account_plan("Acme", "research"),
            lambda p: p.update_section("Executive Summary", "a", "b"),
        ],
    )
    def test_errors_propagate_verbatim(self, pipeline, fake_llm, upstream_failure, operation):
        fake_llm.queue(upstream_failure)

        with pytest.raises(UpstreamError) as excinfo:
            operation(pipeline)

        assert str(excinfo.value) == "Rate limit reached for model in organization org-123"
        assert len(fake_llm.calls) == 1


def test_research_then_plan_end_to_end(pipeline, fake_llm):
    fake_llm.queue("Acme Corp research: anvils, rockets.", PLAN_TEXT)

    research = pipeline.research_company("Acme Corp")
    plan = pipeline.generate_account_plan("Acme Corp", research.research)

    assert 0 <= len(plan.sections) <= 10
    assert set(plan.sections) <= set(CANONICAL_TITLES)
    assert plan.full_text
    assert "Acme Corp research: anvils, rockets." in fake_llm.last_call["messages"][0]["content"]


def test_check_connection(pipeline, fake_llm):
    fake_llm.queue("Hello!")

    assert pipeline.check_connection() == "Hello!"
    assert fake_llm.last_call["messages"] == [{"role": "user", "content": prompts.CONNECTION_CHECK_PROMPT}]
    assert fake_llm.last_call["profile"] == ModelProfile(temperature=0.7, max_tokens=50)
