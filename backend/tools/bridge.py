"""Bridge between model function calls and the tool transport."""

from __future__ import annotations

import json
import logging
import re

from backend.tools.base import ToolCall, ToolDeclaration, ToolResult, ToolTransport

logger = logging.getLogger("llantera.tools.bridge")

_LOWER_UPPER = re.compile(r"([a-z])([A-Z])")
_UPPER_WORD = re.compile(r"([A-Z])([A-Z][a-z])")


def camel_to_dash(name: str) -> str:
    """Rename ``viewLocationGoogleMaps`` to ``view-location-google-maps``.

    Splits at lower->upper boundaries and before the last capital of an
    acronym followed by a lowercase letter, then lowercases everything.
    """

    name = _LOWER_UPPER.sub(r"\1-\2", name)
    name = _UPPER_WORD.sub(r"\1-\2", name)
    return name.lower()


def dash_to_camel(name: str) -> str:
    """Model-facing name for a dash- or underscore-separated transport name."""

    head, *rest = re.split(r"[-_]", name)
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def explain_tool_call(call: ToolCall) -> str:
    """Markdown explanation of a forwarded call, shown as its own message."""

    return "Calling function:\n```json\n" + json.dumps(call.as_payload(), indent=2, ensure_ascii=False) + "\n```"


class ToolCallBridge:
    """Rename-and-forward contract between the model and the tool server."""

    def __init__(self, transport: ToolTransport) -> None:
        self._transport = transport

    async def declarations(self) -> list[ToolDeclaration]:
        """Tools announced to the model, under mixed-case names."""

        tools = await self._transport.list_tools()
        return [
            ToolDeclaration(
                name=dash_to_camel(tool.name),
                description=tool.description,
                parameters=tool.parameters,
            )
            for tool in tools
        ]

    def translate(self, call: ToolCall) -> ToolCall:
        return ToolCall(name=camel_to_dash(call.name), arguments=dict(call.arguments), call_id=call.call_id)

    async def forward(self, call: ToolCall) -> ToolResult:
        """Relay ``call`` to the server under its transport name."""

        outgoing = self.translate(call)
        logger.info("Forwarding tool call %s as %s", call.name, outgoing.name)
        result = await self._transport.call_tool(outgoing.name, outgoing.arguments)
        if not result.success:
            logger.warning("Tool %s reported an error: %s", outgoing.name, result.content)
        return result
