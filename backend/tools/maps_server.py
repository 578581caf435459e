"""MCP server exposing the map tools to the model."""

from __future__ import annotations

from typing import Awaitable, Callable

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from backend.core.errors import MapError
from backend.tools.map_surface import MapQueryParams

VIEW_LOCATION_TOOL = "view-location-google-maps"
DIRECTIONS_TOOL = "directions-on-google-maps"

MapQueryHandler = Callable[[MapQueryParams], Awaitable[None]]


def build_maps_server(handler: MapQueryHandler) -> FastMCP:
    """Create a server whose tools resolve through ``handler``."""

    server = FastMCP("google-maps")

    @server.tool(
        name=VIEW_LOCATION_TOOL,
        description=(
            "View a specific place on Google Maps. Use the full address, including city "
            "and state, as the query."
        ),
    )
    async def view_location(query: str) -> str:
        await _run(handler, MapQueryParams(location=query))
        return f"Navigating to: {query}"

    @server.tool(
        name=DIRECTIONS_TOOL,
        description="Show driving directions between an origin and a destination on Google Maps.",
    )
    async def directions(origin: str, destination: str) -> str:
        await _run(handler, MapQueryParams(origin=origin, destination=destination))
        return f"Navigating from {origin} to {destination}"

    return server


async def _run(handler: MapQueryHandler, params: MapQueryParams) -> None:
    try:
        await handler(params)
    except MapError as exc:
        raise ToolError(f"Map query failed: {exc}") from exc
