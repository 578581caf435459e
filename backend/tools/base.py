"""Base classes and types for tool calls crossing the tool transport."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence


@dataclass(slots=True)
class ToolCall:
    """A model-issued request to invoke a tool by name."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    call_id: str | None = None

    def as_payload(self) -> dict[str, Any]:
        return {"name": self.name, "arguments": self.arguments}


@dataclass(slots=True)
class ToolResult:
    """Outcome of a tool call as reported by the transport."""

    name: str
    content: str
    success: bool = True

    def as_response(self) -> dict[str, Any]:
        """Shape used when handing the result back to the model."""

        if self.success:
            return {"output": self.content}
        return {"error": self.content}


@dataclass(frozen=True, slots=True)
class ToolDeclaration:
    """A tool as announced to the model."""

    name: str
    description: str
    parameters: Mapping[str, Any] = field(default_factory=dict)


class ToolTransport(ABC):
    """Client side of the channel to the tool server."""

    @abstractmethod
    async def list_tools(self) -> Sequence[ToolDeclaration]:
        """Return the tools exposed by the server, under their transport names."""

    @abstractmethod
    async def call_tool(self, name: str, arguments: Mapping[str, Any]) -> ToolResult:
        """Invoke ``name`` on the server and wait for its result."""

    async def aclose(self) -> None:
        """Release the channel."""
