"""Dataclasses representing rendered chat messages and the conversation log."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterator


class ChatRole(str, Enum):
    """Author of a rendered message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    ERROR = "error"


@dataclass(slots=True)
class Message:
    """Single rendered message.

    Assistant messages are mutated in place while their turn streams; every
    other message is left untouched once appended.
    """

    index: int
    role: ChatRole
    text: str
    html: str = ""
    thought: str = ""
    thought_html: str = ""
    thinking_open: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def thinking_visible(self) -> bool:
        return bool(self.thought)

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "role": self.role.value,
            "text": self.text,
            "html": self.html,
            "thought": self.thought,
            "thought_html": self.thought_html,
            "thinking_visible": self.thinking_visible,
            "thinking_open": self.thinking_open,
            "created_at": self.created_at.isoformat(),
        }


class ConversationLog:
    """Append-only, ordered log of the messages shown in one chat session."""

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def append(self, role: ChatRole, text: str = "", *, html: str = "") -> Message:
        message = Message(index=len(self._messages), role=role, text=text, html=html)
        self._messages.append(message)
        return message

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))
