"""Turn orchestration: one user input through one streamed assistant reply."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from backend.chat.confirmation import ConfirmationRecord, extract_confirmation
from backend.chat.history import USER_ROLE, HistoryEntry, build_history
from backend.chat.markdown import render_markdown
from backend.chat.prompts import build_system_instruction
from backend.chat.state import ChatState, ChatStateMachine
from backend.chat.stream import AssembledTurn, StreamAssembler
from backend.core.metrics import MetricsCollector
from backend.llm.base import ModelClient, PartKind, StreamPart
from backend.memory.inventory import Inventory
from backend.memory.models import ChatRole, ConversationLog, Message
from backend.memory.services import ServiceHistory, ServiceHistoryItem
from backend.tools.base import ToolCall, ToolResult
from backend.tools.bridge import ToolCallBridge, explain_tool_call

logger = logging.getLogger("llantera.chat")

LOCATION_SELECTION_PROMPT = "Haga clic en el mapa para establecer su ubicación"


@dataclass(slots=True)
class LocationSelection:
    """Overlay state for picking the service address on the map."""

    armed: bool = False
    message: str = ""

    def arm(self) -> None:
        self.armed = True
        self.message = LOCATION_SELECTION_PROMPT

    def disarm(self) -> None:
        self.armed = False
        self.message = ""


@dataclass(slots=True)
class TurnResult:
    reply: Message
    tool_calls: list[ToolCall] = field(default_factory=list)
    confirmation: ConfirmationRecord | None = None
    service: ServiceHistoryItem | None = None
    speech_text: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ChatOrchestrator:
    """Run turns for a single session.

    At most one turn is live at a time: sends made while the state machine is
    not IDLE are dropped without effect. Every turn, successful or not, ends
    back in IDLE. There is no cancellation; a started turn runs until the
    stream completes or fails.
    """

    def __init__(
        self,
        *,
        log: ConversationLog,
        state: ChatStateMachine,
        model: ModelClient,
        bridge: ToolCallBridge,
        services: ServiceHistory,
        inventory: Inventory,
        location: LocationSelection | None = None,
        metrics: MetricsCollector | None = None,
        render: Callable[[str], str] = render_markdown,
    ) -> None:
        self.log = log
        self.state = state
        self.model = model
        self.bridge = bridge
        self.services = services
        self.inventory = inventory
        self.location = location or LocationSelection()
        self.metrics = metrics or MetricsCollector()
        self._render = render

    @property
    def chat_state(self) -> ChatState:
        return self.state.state

    async def send_message(self, text: str, role: ChatRole = ChatRole.USER) -> TurnResult | None:
        """Start a turn for ``text``; ``None`` when the send was not accepted.

        User messages are rendered into the log. System-role inputs, such as
        the greeting instruction, are only passed to the model.
        """

        if not self.state.is_idle:
            logger.debug("Send ignored while %s", self.state.state.value)
            self.metrics.record_rejected_send()
            return None

        message = text.strip()
        if not message:
            return None

        if role is ChatRole.USER:
            self.location.disarm()
            self.log.append(ChatRole.USER, message, html=self._render(message))

        reply = self.log.append(ChatRole.ASSISTANT)
        self.state.begin()
        self.metrics.record_turn()
        try:
            return await self._run_turn(message, role, reply)
        finally:
            self.state.reset()

    async def _run_turn(self, message: str, role: ChatRole, reply: Message) -> TurnResult:
        assembler = StreamAssembler(reply, self.log, self.state, render=self._render)
        result = TurnResult(reply=reply)

        try:
            contents = build_history(self.log.messages)
            if role is not ChatRole.USER:
                contents.append(HistoryEntry(role=USER_ROLE, text=message))

            system_instruction = build_system_instruction(self.inventory.list())
            tools = await self.bridge.declarations()
            stream = self.model.open_stream(contents, system_instruction=system_instruction, tools=tools)

            async for chunk in stream:
                for part in chunk.parts:
                    if part.kind is PartKind.TOOL_CALL and part.tool_call is not None:
                        tool_result = await self._dispatch_tool_call(part, assembler, result)
                        stream.submit_tool_result(part.tool_call, tool_result)
                    elif part.kind is PartKind.THOUGHT:
                        assembler.add_thought(part.text)
                    elif part.kind is PartKind.TEXT:
                        assembler.add_text(part.text)

            turn = assembler.finish()
            self._complete(turn, result)
        except Exception as exc:  # noqa: BLE001 - surfaced to the user as an error message
            logger.exception("Model turn failed")
            self.metrics.record_failure()
            assembler.abandon()
            result.error = str(exc) or exc.__class__.__name__
            error_text = f"Error: {result.error}"
            self.log.append(ChatRole.ERROR, error_text, html=self._render(error_text))

        return result

    async def _dispatch_tool_call(
        self, part: StreamPart, assembler: StreamAssembler, result: TurnResult
    ) -> ToolResult:
        call = part.tool_call
        outgoing = self.bridge.translate(call)
        logger.info("Function call %s %s", call.name, call.arguments)
        assembler.add_tool_explanation(explain_tool_call(outgoing))
        result.tool_calls.append(outgoing)
        self.metrics.record_tool_call(outgoing.name)
        return await self.bridge.forward(call)

    def _complete(self, turn: AssembledTurn, result: TurnResult) -> None:
        result.speech_text = turn.visible_text

        if turn.arms_location_selection:
            self.location.arm()

        record = extract_confirmation(turn.output)
        if record is not None:
            result.confirmation = record
            result.service = self.services.add(record)
            self.metrics.record_confirmation()
