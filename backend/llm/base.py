"""Model streaming abstractions consumed by the chat orchestrator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import AsyncIterator, Sequence

from backend.chat.history import HistoryEntry
from backend.tools.base import ToolCall, ToolDeclaration, ToolResult


class PartKind(str, Enum):
    THOUGHT = "thought"
    TEXT = "text"
    TOOL_CALL = "tool_call"


@dataclass(slots=True)
class StreamPart:
    """Exactly one of reasoning text, output text or a tool call."""

    kind: PartKind
    text: str = ""
    tool_call: ToolCall | None = None

    @classmethod
    def thought(cls, text: str) -> "StreamPart":
        return cls(PartKind.THOUGHT, text=text)

    @classmethod
    def output(cls, text: str) -> "StreamPart":
        return cls(PartKind.TEXT, text=text)

    @classmethod
    def call(cls, name: str, arguments: dict | None = None, call_id: str | None = None) -> "StreamPart":
        return cls(PartKind.TOOL_CALL, tool_call=ToolCall(name=name, arguments=dict(arguments or {}), call_id=call_id))


@dataclass(slots=True)
class StreamChunk:
    parts: list[StreamPart] = field(default_factory=list)


class ModelStream(ABC):
    """One streaming turn.

    Results submitted for the tool calls of a model round are fed back to the
    model when that round ends, and the same stream continues with its answer.
    """

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[StreamChunk]:
        """Iterate over the chunks of the turn."""

    @abstractmethod
    def submit_tool_result(self, call: ToolCall, result: ToolResult) -> None:
        """Make ``result`` available to the model as the answer to ``call``."""


class ModelClient(ABC):
    """Factory for streaming turns."""

    @abstractmethod
    def open_stream(
        self,
        contents: Sequence[HistoryEntry],
        *,
        system_instruction: str,
        tools: Sequence[ToolDeclaration],
    ) -> ModelStream:
        """Start a turn whose last user entry in ``contents`` is the new input."""
