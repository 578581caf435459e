from __future__ import annotations

from typing import Any, AsyncIterator, Mapping, Sequence

import pytest

from backend.chat.history import HistoryEntry
from backend.core.errors import MapError
from backend.llm.base import ModelClient, ModelStream, StreamChunk, StreamPart
from backend.tools.base import ToolCall, ToolDeclaration, ToolResult, ToolTransport
from backend.tools.map_surface import LatLng, MapSurface, Marker


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class FakeStream(ModelStream):
    """Replays scripted model rounds.

    Each round is a list of parts (one chunk per part) or exceptions to raise.
    A new round starts only when tool results were submitted in the previous one.
    """

    def __init__(self, rounds: list[list[Any]]) -> None:
        self._rounds = rounds
        self.submitted: list[tuple[ToolCall, ToolResult]] = []
        self._pending = 0

    def submit_tool_result(self, call: ToolCall, result: ToolResult) -> None:
        self.submitted.append((call, result))
        self._pending += 1

    def __aiter__(self) -> AsyncIterator[StreamChunk]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[StreamChunk]:
        for round_parts in self._rounds:
            self._pending = 0
            for item in round_parts:
                if isinstance(item, BaseException):
                    raise item
                yield StreamChunk(parts=[item])
            if not self._pending:
                return


class FakeModelClient(ModelClient):
    """Scripted model: every ``open_stream`` call consumes the next turn."""

    def __init__(self, turns: list[list[list[Any]]] | None = None) -> None:
        self.turns = list(turns or [])
        self.calls: list[dict[str, Any]] = []
        self.streams: list[FakeStream] = []

    def script(self, *rounds: list[Any]) -> None:
        self.turns.append(list(rounds))

    def open_stream(
        self,
        contents: Sequence[HistoryEntry],
        *,
        system_instruction: str,
        tools: Sequence[ToolDeclaration],
    ) -> ModelStream:
        self.calls.append(
            {"contents": list(contents), "system_instruction": system_instruction, "tools": list(tools)}
        )
        rounds = self.turns.pop(0) if self.turns else [[StreamPart.output("ok")]]
        stream = FakeStream(rounds)
        self.streams.append(stream)
        return stream


class FakeMapSurface(MapSurface):
    def __init__(self, address: str = "Calle Hidalgo 12, Mazamitla, Jal., México") -> None:
        super().__init__()
        self.address = address
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.fail_with: MapError | None = None

    async def view_location(self, query: str) -> None:
        self.calls.append(("view_location", (query,)))
        self._maybe_fail()
        self.clear()
        self.view.markers.append(Marker(position=LatLng(19.91, -103.02), label=query))

    async def compute_route(self, origin: str, destination: str) -> None:
        self.calls.append(("compute_route", (origin, destination)))
        self._maybe_fail()
        self.clear()
        self.view.route_polyline = "abc"

    async def reverse_geocode(self, lat: float, lng: float) -> str:
        self.calls.append(("reverse_geocode", (lat, lng)))
        self._maybe_fail()
        return self.address

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


class RecordingTransport(ToolTransport):
    def __init__(self, tools: Sequence[ToolDeclaration] | None = None) -> None:
        self.tools = list(
            tools
            or [
                ToolDeclaration(
                    name="view-location-google-maps",
                    description="View a place",
                    parameters={"type": "object", "properties": {"query": {"type": "string"}}},
                )
            ]
        )
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.result: ToolResult | None = None

    async def list_tools(self) -> Sequence[ToolDeclaration]:
        return self.tools

    async def call_tool(self, name: str, arguments: Mapping[str, Any]) -> ToolResult:
        self.calls.append((name, dict(arguments)))
        if self.result is not None:
            return self.result
        return ToolResult(name=name, content=f"Navigating to: {arguments.get('query')}")


@pytest.fixture
def fake_model() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def fake_surface() -> FakeMapSurface:
    return FakeMapSurface()


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()
