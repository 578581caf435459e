"""Assembly of one streamed assistant reply."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from backend.chat.confirmation import redact_confirmation
from backend.chat.markdown import render_markdown
from backend.chat.state import ChatStateMachine
from backend.memory.models import ChatRole, ConversationLog, Message

PLACEHOLDER = "..."
COMPLETION_NOTICE = "Done."
LOCATION_TRIGGERS = ("click on the map", "clic en el mapa")


def wants_location_selection(text: str) -> bool:
    lowered = text.lower()
    return any(trigger in lowered for trigger in LOCATION_TRIGGERS)


@dataclass(slots=True)
class AssembledTurn:
    """Buffers and outcome of a finished stream."""

    output: str
    thought: str
    visible_text: str
    tool_messages: list[Message] = field(default_factory=list)

    @property
    def arms_location_selection(self) -> bool:
        return wants_location_selection(self.output)


class StreamAssembler:
    """Accumulate reasoning and output fragments into the reply message.

    Both buffers only grow; after every fragment the whole buffer is rendered
    again. A closed confirmation block is hidden from the rendered output as
    soon as its closing tag arrives.
    """

    def __init__(
        self,
        reply: Message,
        log: ConversationLog,
        state: ChatStateMachine,
        render: Callable[[str], str] = render_markdown,
    ) -> None:
        self._reply = reply
        self._log = log
        self._state = state
        self._render = render
        self._output = ""
        self._thought = ""
        self._tool_messages: list[Message] = []
        reply.text = PLACEHOLDER
        reply.html = PLACEHOLDER

    @property
    def output(self) -> str:
        return self._output

    def add_thought(self, text: str) -> None:
        self._state.thinking()
        self._thought += " " + text
        self._reply.thought = self._thought
        self._reply.thought_html = self._render(self._thought)
        self._reply.thinking_open = True

    def add_text(self, text: str) -> None:
        self._state.executing()
        self._output += text
        visible = redact_confirmation(self._output)
        self._reply.text = visible
        self._reply.html = self._render(visible)

    def add_tool_explanation(self, explanation: str) -> Message:
        """Insert the explanation of a pending tool call as its own message."""

        message = self._log.append(ChatRole.ASSISTANT, explanation, html=self._render(explanation))
        self._tool_messages.append(message)
        return message

    def finish(self) -> AssembledTurn:
        visible = redact_confirmation(self._output).strip()
        self._reply.thinking_open = False

        if visible:
            self._reply.text = visible
            self._reply.html = self._render(visible)
        elif self._tool_messages:
            self._reply.text = ""
            self._reply.html = ""
        else:
            self._reply.text = COMPLETION_NOTICE
            self._reply.html = self._render(COMPLETION_NOTICE)

        return AssembledTurn(
            output=self._output,
            thought=self._thought,
            visible_text=visible,
            tool_messages=list(self._tool_messages),
        )

    def abandon(self) -> None:
        """Clear the placeholder of a turn that failed before any output."""

        self._reply.thinking_open = False
        if self._reply.text == PLACEHOLDER:
            self._reply.text = ""
            self._reply.html = ""
