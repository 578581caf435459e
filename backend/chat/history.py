"""Projection of the conversation log into model-facing turn history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from backend.memory.models import ChatRole, Message

USER_ROLE = "user"
MODEL_ROLE = "model"


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One prior turn as the model sees it."""

    role: str
    text: str


def build_history(messages: Sequence[Message]) -> list[HistoryEntry]:
    """Project rendered messages into ``{role, text}`` pairs for the next call.

    Error messages are dropped, user messages map to ``user`` and everything
    else to ``model``. The most recent message is the reply currently being
    composed and is left out.

    The projection reads the rendered text only. Anything stripped before
    rendering, such as a confirmation block, is therefore never visible to
    later turns either; this bounds what the model remembers to what the user
    has seen.
    """

    projected = [
        HistoryEntry(
            role=USER_ROLE if message.role is ChatRole.USER else MODEL_ROLE,
            text=message.text.strip(),
        )
        for message in messages
        if message.role is not ChatRole.ERROR
    ]
    return projected[:-1]
