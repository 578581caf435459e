"""Chat state machine gating one turn at a time."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

logger = logging.getLogger("llantera.chat.state")


class ChatState(str, Enum):
    """Externally visible phase of the current turn."""

    IDLE = "IDLE"
    GENERATING = "GENERATING"
    THINKING = "THINKING"
    EXECUTING = "EXECUTING"


StateListener = Callable[[ChatState, ChatState], None]


class ChatStateMachine:
    """Single state flag for a session.

    ``begin`` is the only way out of IDLE and refuses to start a turn while
    another one is live; ``reset`` always returns to IDLE.
    """

    def __init__(self) -> None:
        self._state = ChatState.IDLE
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> ChatState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state is ChatState.IDLE

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def begin(self) -> bool:
        if not self.is_idle:
            return False
        self._set(ChatState.GENERATING)
        return True

    def thinking(self) -> None:
        self._set(ChatState.THINKING)

    def executing(self) -> None:
        self._set(ChatState.EXECUTING)

    def reset(self) -> None:
        self._set(ChatState.IDLE)

    def _set(self, new_state: ChatState) -> None:
        previous = self._state
        if previous is new_state:
            return
        self._state = new_state
        logger.debug("Chat state %s -> %s", previous.value, new_state.value)
        for listener in self._listeners:
            listener(previous, new_state)
