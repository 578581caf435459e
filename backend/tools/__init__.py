"""Tool package exports."""

from .base import ToolCall, ToolDeclaration, ToolResult, ToolTransport
from .bridge import ToolCallBridge, camel_to_dash, dash_to_camel
from .map_surface import MapQueryParams, MapSurface
from .router import MapQueryRouter

__all__ = [
    "ToolCall",
    "ToolDeclaration",
    "ToolResult",
    "ToolTransport",
    "ToolCallBridge",
    "camel_to_dash",
    "dash_to_camel",
    "MapQueryParams",
    "MapSurface",
    "MapQueryRouter",
]
