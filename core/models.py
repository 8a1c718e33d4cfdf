"""Dataclasses and enums describing conversations and account plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Tuple

from core.errors import ValidationError


class MessageRole(str, Enum):
    """Speaker of a conversation turn."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class PlanSection(str, Enum):
    """Canonical headings of a generated account plan."""

    EXECUTIVE_SUMMARY = "Executive Summary"
    COMPANY_OVERVIEW = "Company Overview"
    MARKET_POSITION = "Market Position & Competitors"
    KEY_STAKEHOLDERS = "Key Stakeholders"
    CHALLENGES_OPPORTUNITIES = "Business Challenges & Opportunities"
    PRODUCT_FIT = "Product/Service Fit"
    ENGAGEMENT_STRATEGY = "Engagement Strategy"
    SUCCESS_METRICS = "Success Metrics"
    TIMELINE = "Timeline & Milestones"
    RISK_ASSESSMENT = "Risk Assessment"

    @classmethod
    def ordered(cls) -> List["PlanSection"]:
        """Return sections in the order the plan prompt asks for them."""

        return list(cls)


CANONICAL_TITLES: Tuple[str, ...] = tuple(section.value for section in PlanSection.ordered())


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ConversationMessage:
    """One role-tagged turn; never modified after it is stored."""

    role: MessageRole
    content: str
    timestamp: str = field(default_factory=_timestamp)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ConversationMessage":
        try:
            role = MessageRole(str(payload.get("role", "user")).lower())
        except ValueError:
            role = MessageRole.USER
        content = payload.get("content") or ""
        timestamp = payload.get("timestamp")
        if timestamp:
            return cls(role=role, content=str(content), timestamp=str(timestamp))
        return cls(role=role, content=str(content))

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content, "timestamp": self.timestamp}


@dataclass
class PlanDocument:
    """A generated account plan: the raw model text plus its parsed sections.

    ``sections`` keeps the order in which headings were found in ``full_text``.
    An empty mapping means the plan could not be split and only the full text
    should be shown.
    """

    full_text: str
    sections: Dict[str, str] = field(default_factory=dict)

    @property
    def is_structured(self) -> bool:
        return bool(self.sections)

    def section_titles(self) -> List[str]:
        return list(self.sections.keys())

    def update_section(self, section_name: str, content: str) -> "PlanDocument":
        """Replace one existing section body in place."""

        if section_name not in self.sections:
            raise ValidationError(f"Unknown section: {section_name}")
        self.sections[section_name] = content
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {"fullText": self.full_text, "sections": dict(self.sections)}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PlanDocument":
        sections = payload.get("sections")
        if not isinstance(sections, dict):
            sections = {}
        return cls(
            full_text=payload.get("fullText") or "",
            sections={str(key): str(value) for key, value in sections.items()},
        )


@dataclass(frozen=True)
class SectionUpdateRequest:
    """Instructions for rewriting a single plan section."""

    section_name: str
    current_content: str
    instructions: str


@dataclass(frozen=True)
class ResearchPhase:
    """Fixed progress label shown while research runs."""

    phase: str
    update: str

    def to_dict(self) -> Dict[str, str]:
        return {"phase": self.phase, "update": self.update}


@dataclass
class ResearchResult:
    """Raw research text for a company plus its display phases."""

    company_name: str
    research: str
    phases: List[ResearchPhase] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"phases": [phase.to_dict() for phase in self.phases], "research": self.research}
