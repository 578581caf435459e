"""Chat session wiring: log, state, map surface, tool transport and orchestrator."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable

from backend.chat.markdown import render_markdown
from backend.chat.orchestrator import ChatOrchestrator, LocationSelection, TurnResult
from backend.chat.prompts import GREETING_PROMPT
from backend.chat.state import ChatStateMachine
from backend.core.errors import MapError
from backend.core.metrics import MetricsCollector
from backend.llm.base import ModelClient
from backend.memory.inventory import Inventory
from backend.memory.models import ChatRole, ConversationLog
from backend.memory.services import ServiceHistory
from backend.tools.bridge import ToolCallBridge
from backend.tools.map_surface import MapSurface
from backend.tools.maps_server import build_maps_server
from backend.tools.router import MapQueryRouter
from backend.tools.transport import LinkedToolTransport

logger = logging.getLogger("llantera.session")

CONFIRMING_ADDRESS = "Confirmando dirección..."


class ChatSession:
    """Everything one user's conversation needs, created once and held open."""

    def __init__(
        self,
        session_id: str,
        *,
        surface: MapSurface,
        model: ModelClient,
        services: ServiceHistory,
        inventory: Inventory,
        metrics: MetricsCollector,
    ) -> None:
        self.id = session_id
        self.log = ConversationLog()
        self.state = ChatStateMachine()
        self.location = LocationSelection()
        self._resolving = False
        self.surface = surface
        self.router = MapQueryRouter(surface, self._report_error)
        self.transport = LinkedToolTransport(build_maps_server(self.router.handle_map_query))
        self.orchestrator = ChatOrchestrator(
            log=self.log,
            state=self.state,
            model=model,
            bridge=ToolCallBridge(self.transport),
            services=services,
            inventory=inventory,
            location=self.location,
            metrics=metrics,
        )

    async def open(self) -> None:
        await self.transport.start()

    async def close(self) -> None:
        await self.transport.aclose()

    async def send_message(self, text: str, role: ChatRole = ChatRole.USER) -> TurnResult | None:
        if self._resolving:
            logger.debug("Send ignored while session %s resolves a map click", self.id)
            return None
        return await self.orchestrator.send_message(text, role)

    async def greet(self) -> TurnResult | None:
        if len(self.log) > 0:
            return None
        return await self.orchestrator.send_message(GREETING_PROMPT, ChatRole.SYSTEM)

    async def select_location(self, lat: float, lng: float) -> TurnResult | None:
        """Answer a pending address request with the clicked point.

        While the click resolves, further clicks and sends are ignored so the
        picked address always becomes the next user message.
        """

        if self._resolving or not self.location.armed or not self.state.is_idle:
            return None

        self._resolving = True
        self.location.armed = False
        self.location.message = CONFIRMING_ADDRESS
        self.surface.place_selection_marker(lat, lng)
        try:
            address = await self.surface.reverse_geocode(lat, lng)
        except MapError as exc:
            self.location.arm()
            self.location.message = (
                "No se pudo determinar la dirección. Por favor, intente hacer clic de nuevo. "
                f"(Error: {exc.status})"
            )
            self.surface.clear_selection_marker()
            return None
        finally:
            self._resolving = False

        self.location.disarm()
        return await self.send_message(address, ChatRole.USER)

    def snapshot(self) -> dict[str, Any]:
        return {
            "session_id": self.id,
            "chat_state": self.state.state.value,
            "messages": [message.to_dict() for message in self.log],
            "location_selection": {"armed": self.location.armed, "message": self.location.message},
            "map": self.surface.view.to_dict(),
        }

    def _report_error(self, text: str) -> None:
        self.log.append(ChatRole.ERROR, text, html=render_markdown(text))


class SessionFactory:
    """Build and open sessions sharing the app-wide model, history and inventory."""

    def __init__(
        self,
        *,
        model: ModelClient,
        surface_factory: Callable[[], MapSurface],
        services: ServiceHistory,
        inventory: Inventory,
        metrics: MetricsCollector,
        greet: bool = True,
    ) -> None:
        self.model = model
        self.greet = greet
        self.surface_factory = surface_factory
        self.services = services
        self.inventory = inventory
        self.metrics = metrics

    async def create(self) -> ChatSession:
        session = ChatSession(
            uuid.uuid4().hex,
            surface=self.surface_factory(),
            model=self.model,
            services=self.services,
            inventory=self.inventory,
            metrics=self.metrics,
        )
        await session.open()
        logger.info("Opened chat session %s", session.id)
        return session
