"""In-memory MCP transport linking the tool bridge to the map server."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Sequence

from mcp import ClientSession
from mcp.server.fastmcp import FastMCP
from mcp.shared.memory import create_connected_server_and_client_session
from mcp.types import TextContent

from backend.tools.base import ToolDeclaration, ToolResult, ToolTransport

logger = logging.getLogger("llantera.tools.transport")


class LinkedToolTransport(ToolTransport):
    """Client end of a linked in-memory pair whose other end runs ``server``.

    The pair is created once by :meth:`start` and lives in a dedicated task
    until :meth:`aclose`, so it can be opened by one request and used or
    closed by later ones.
    """

    def __init__(self, server: FastMCP) -> None:
        self._server = server
        self._session: ClientSession | None = None
        self._task: asyncio.Task[None] | None = None
        self._closing = asyncio.Event()

    @property
    def connected(self) -> bool:
        return self._session is not None

    async def start(self) -> None:
        if self._task is not None:
            raise RuntimeError("Transport already started")
        ready: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._task = asyncio.create_task(self._serve(ready))
        await ready

    async def _serve(self, ready: asyncio.Future[None]) -> None:
        try:
            async with create_connected_server_and_client_session(self._server._mcp_server) as session:  # noqa: SLF001
                self._session = session
                ready.set_result(None)
                await self._closing.wait()
        except Exception as exc:
            if not ready.done():
                ready.set_exception(exc)
                return
            logger.exception("Tool transport stopped unexpectedly")
        finally:
            self._session = None

    async def list_tools(self) -> Sequence[ToolDeclaration]:
        result = await self._require_session().list_tools()
        return [
            ToolDeclaration(name=tool.name, description=tool.description or "", parameters=tool.inputSchema)
            for tool in result.tools
        ]

    async def call_tool(self, name: str, arguments: Mapping[str, Any]) -> ToolResult:
        result = await self._require_session().call_tool(name, dict(arguments))
        text = "\n".join(block.text for block in result.content if isinstance(block, TextContent))
        return ToolResult(name=name, content=text, success=not result.isError)

    async def aclose(self) -> None:
        if self._task is None:
            return
        self._closing.set()
        await self._task
        self._task = None

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise RuntimeError("Tool transport is not connected")
        return self._session
