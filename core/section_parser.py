"""Split generated account plan text into its named sections."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from core.models import CANONICAL_TITLES, PlanDocument


def match_title(line: str, canonical_titles: Sequence[str] = CANONICAL_TITLES) -> Optional[str]:
    """Return the first canonical title contained in the stripped line.

    Containment, not equality: "## 1. Executive Summary:" matches, and so does
    a sentence that merely mentions a title.
    """

    stripped = line.strip()
    for title in canonical_titles:
        if title in stripped:
            return title
    return None


def parse_account_plan(plan_text: str, canonical_titles: Sequence[str] = CANONICAL_TITLES) -> PlanDocument:
    """Build a PlanDocument from raw model output. Never raises."""

    plan_text = plan_text or ""
    sections: Dict[str, str] = {}
    current: Optional[str] = None
    buffer: List[str] = []

    for line in plan_text.split("\n"):
        title = match_title(line, canonical_titles)
        if title is not None:
            if current is not None:
                sections[current] = "\n".join(buffer).strip()
            current = title
            buffer = []
            continue
        if current is not None:
            buffer.append(line)

    if current is not None:
        sections[current] = "\n".join(buffer).strip()

    return PlanDocument(full_text=plan_text, sections=sections)
