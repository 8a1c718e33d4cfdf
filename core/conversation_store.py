"""In-memory conversation history used to replay context into chat prompts."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Iterable, List, Optional

from core.models import ConversationMessage, MessageRole

logger = logging.getLogger(__name__)


class ConversationStore:
    """Process-lifetime map of conversation id to an append-only message log.

    ``max_conversations`` of ``None`` or ``0`` keeps every conversation;
    otherwise the least recently touched conversation is dropped once the
    limit is exceeded.
    """

    def __init__(self, max_conversations: Optional[int] = None) -> None:
        self.max_conversations = max_conversations or None
        self._conversations: "OrderedDict[str, List[ConversationMessage]]" = OrderedDict()
        self._lock = threading.Lock()

    def append(self, conversation_id: str, messages: Iterable[ConversationMessage]) -> None:
        batch = list(messages)
        with self._lock:
            log = self._conversations.setdefault(conversation_id, [])
            log.extend(batch)
            self._conversations.move_to_end(conversation_id)
            self._evict()

    def record_exchange(self, conversation_id: str, user_message: str, assistant_message: str) -> None:
        """Store a user turn and the assistant reply as one append."""

        self.append(
            conversation_id,
            [
                ConversationMessage(role=MessageRole.USER, content=user_message),
                ConversationMessage(role=MessageRole.ASSISTANT, content=assistant_message),
            ],
        )

    def get(self, conversation_id: str) -> List[ConversationMessage]:
        with self._lock:
            log = self._conversations.get(conversation_id)
            if log is None:
                return []
            self._conversations.move_to_end(conversation_id)
            return list(log)

    def conversation_ids(self) -> List[str]:
        with self._lock:
            return list(self._conversations.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._conversations)

    def _evict(self) -> None:
        if not self.max_conversations:
            return
        while len(self._conversations) > self.max_conversations:
            evicted, _ = self._conversations.popitem(last=False)
            logger.info("Evicted conversation %s from history store", evicted)
