"""Free-form assistant chat with replayed conversation history."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Union

from config import ModelProfile
from core.models import ConversationMessage, MessageRole
from llm import prompts
from llm.client import LLMClient

HistoryItem = Union[ConversationMessage, Dict[str, str]]


def build_chat_messages(history: Optional[Iterable[HistoryItem]], user_message: str) -> List[Dict[str, str]]:
    """Turn prior history plus the new message into role-tagged turns."""

    messages: List[Dict[str, str]] = []
    for item in history or []:
        if not isinstance(item, ConversationMessage):
            item = ConversationMessage.from_dict(item)
        messages.append({"role": item.role.value, "content": item.content})
    messages.append({"role": MessageRole.USER.value, "content": user_message})
    return messages


def run_chat(
    llm: LLMClient,
    profile: ModelProfile,
    user_message: str,
    history: Optional[Iterable[HistoryItem]] = None,
) -> str:
    return llm.chat(
        system_prompt=prompts.CHAT_SYSTEM_PROMPT,
        messages=build_chat_messages(history, user_message),
        profile=profile,
    )
