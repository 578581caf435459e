"""Gemini model client built on the google-genai SDK."""

from __future__ import annotations

import logging
from typing import AsyncIterator, Sequence

from google import genai
from google.genai import types

from backend.chat.history import HistoryEntry
from backend.llm.base import ModelClient, ModelStream, StreamChunk, StreamPart
from backend.tools.base import ToolCall, ToolDeclaration, ToolResult

logger = logging.getLogger("llantera.llm")


def _convert_part(part: types.Part) -> list[StreamPart]:
    converted: list[StreamPart] = []
    if part.function_call is not None and part.function_call.name:
        converted.append(
            StreamPart.call(
                part.function_call.name,
                dict(part.function_call.args or {}),
                part.function_call.id,
            )
        )
    if part.text:
        converted.append(StreamPart.thought(part.text) if part.thought else StreamPart.output(part.text))
    return converted


def _to_contents(entries: Sequence[HistoryEntry]) -> list[types.Content]:
    return [
        types.Content(role=entry.role, parts=[types.Part(text=entry.text)])
        for entry in entries
        if entry.text
    ]


class GeminiStream(ModelStream):
    """Streaming turn that feeds submitted tool results back round by round."""

    def __init__(
        self,
        client: genai.Client,
        model: str,
        contents: list[types.Content],
        config: types.GenerateContentConfig,
        max_rounds: int,
    ) -> None:
        self._client = client
        self._model = model
        self._contents = contents
        self._config = config
        self._max_rounds = max_rounds
        self._pending: list[tuple[ToolCall, ToolResult]] = []

    def submit_tool_result(self, call: ToolCall, result: ToolResult) -> None:
        self._pending.append((call, result))

    def __aiter__(self) -> AsyncIterator[StreamChunk]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[StreamChunk]:
        contents = list(self._contents)
        for round_index in range(self._max_rounds):
            model_parts: list[types.Part] = []
            stream = await self._client.aio.models.generate_content_stream(
                model=self._model,
                contents=contents,
                config=self._config,
            )
            async for response in stream:
                chunk = StreamChunk()
                for candidate in response.candidates or []:
                    if candidate.content is None:
                        continue
                    for part in candidate.content.parts or []:
                        model_parts.append(part)
                        chunk.parts.extend(_convert_part(part))
                yield chunk

            if not self._pending:
                return

            logger.debug("Round %d ended with %d tool result(s)", round_index + 1, len(self._pending))
            contents.append(types.Content(role="model", parts=model_parts))
            contents.append(
                types.Content(
                    role="user",
                    parts=[
                        types.Part(
                            function_response=types.FunctionResponse(
                                id=call.call_id,
                                name=call.name,
                                response=result.as_response(),
                            )
                        )
                        for call, result in self._pending
                    ],
                )
            )
            self._pending.clear()

        logger.warning("Stopped after %d model rounds without a final answer", self._max_rounds)


class GeminiModelClient(ModelClient):
    """Open Gemini streaming turns with the session's tools declared."""

    def __init__(
        self,
        api_key: str | None,
        model: str = "gemini-2.5-flash",
        *,
        include_thoughts: bool = True,
        max_tool_rounds: int = 5,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._include_thoughts = include_thoughts
        self._max_tool_rounds = max_tool_rounds
        self._client: genai.Client | None = None

    def _ensure_client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise RuntimeError("GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def open_stream(
        self,
        contents: Sequence[HistoryEntry],
        *,
        system_instruction: str,
        tools: Sequence[ToolDeclaration],
    ) -> ModelStream:
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            tools=[
                types.Tool(
                    function_declarations=[
                        types.FunctionDeclaration(
                            name=tool.name,
                            description=tool.description,
                            parameters_json_schema=dict(tool.parameters),
                        )
                        for tool in tools
                    ]
                )
            ]
            if tools
            else None,
            thinking_config=types.ThinkingConfig(include_thoughts=self._include_thoughts),
            automatic_function_calling=types.AutomaticFunctionCallingConfig(disable=True),
        )
        return GeminiStream(
            self._ensure_client(),
            self._model,
            _to_contents(contents),
            config,
            self._max_tool_rounds,
        )
