import pytest

from backend.core.errors import MapError
from backend.tools.maps_server import DIRECTIONS_TOOL, VIEW_LOCATION_TOOL, build_maps_server
from backend.tools.router import MapQueryRouter
from backend.tools.transport import LinkedToolTransport


@pytest.fixture
def errors():
    return []


@pytest.fixture
async def transport(fake_surface, errors):
    router = MapQueryRouter(fake_surface, errors.append)
    linked = LinkedToolTransport(build_maps_server(router.handle_map_query))
    await linked.start()
    yield linked
    await linked.aclose()


@pytest.mark.anyio
async def test_lists_map_tools_with_schemas(transport):
    tools = {tool.name: tool for tool in await transport.list_tools()}

    assert set(tools) == {VIEW_LOCATION_TOOL, DIRECTIONS_TOOL}
    assert "query" in tools[VIEW_LOCATION_TOOL].parameters["properties"]
    assert set(tools[DIRECTIONS_TOOL].parameters["required"]) == {"origin", "destination"}


@pytest.mark.anyio
async def test_view_location_round_trip(transport, fake_surface):
    result = await transport.call_tool(VIEW_LOCATION_TOOL, {"query": "Mazamitla, Jalisco"})

    assert result.success
    assert result.content == "Navigating to: Mazamitla, Jalisco"
    assert fake_surface.calls == [("view_location", ("Mazamitla, Jalisco",))]


@pytest.mark.anyio
async def test_directions_round_trip(transport, fake_surface):
    result = await transport.call_tool(DIRECTIONS_TOOL, {"origin": "Mazamitla", "destination": "Tamazula"})

    assert result.content == "Navigating from Mazamitla to Tamazula"
    assert fake_surface.calls == [("compute_route", ("Mazamitla", "Tamazula"))]


@pytest.mark.anyio
async def test_map_failure_comes_back_as_tool_error(transport, fake_surface, errors):
    fake_surface.fail_with = MapError("ZERO_RESULTS")

    result = await transport.call_tool(VIEW_LOCATION_TOOL, {"query": "Nowhere"})

    assert not result.success
    assert "ZERO_RESULTS" in result.content
    assert len(errors) == 1


@pytest.mark.anyio
async def test_closed_transport_refuses_calls(fake_surface, errors):
    router = MapQueryRouter(fake_surface, errors.append)
    linked = LinkedToolTransport(build_maps_server(router.handle_map_query))

    await linked.start()
    assert linked.connected
    await linked.aclose()

    assert not linked.connected
    with pytest.raises(RuntimeError):
        await linked.list_tools()
