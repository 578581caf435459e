"""API routes for chat sessions."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from backend.chat.orchestrator import TurnResult
from backend.chat.session import ChatSession, SessionFactory
from backend.memory.store import SessionStore


class MessageIn(BaseModel):
    content: str = Field(min_length=1)


class MapClickIn(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


def create_sessions_router(store: SessionStore, factory: SessionFactory) -> APIRouter:
    router = APIRouter(prefix="/sessions", tags=["sessions"])

    def _session_or_404(session_id: str) -> ChatSession:
        session = store.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="session not found")
        return session

    @router.post("", status_code=201)
    async def create_session() -> dict[str, Any]:
        session = await factory.create()
        store.add(session)
        if factory.greet:
            await session.greet()
        return session.snapshot()

    @router.get("")
    async def list_sessions() -> list[str]:
        return list(store.iter_sessions())

    @router.get("/{session_id}")
    async def get_session(session_id: str) -> dict[str, Any]:
        return _session_or_404(session_id).snapshot()

    @router.delete("/{session_id}", status_code=204)
    async def delete_session(session_id: str) -> None:
        session = store.pop(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="session not found")
        await session.close()

    @router.post("/{session_id}/messages")
    async def send_message(session_id: str, payload: MessageIn) -> dict[str, Any]:
        session = _session_or_404(session_id)
        result = await session.send_message(payload.content)
        return _turn_payload(session, result)

    @router.post("/{session_id}/map-click")
    async def map_click(session_id: str, payload: MapClickIn) -> dict[str, Any]:
        session = _session_or_404(session_id)
        result = await session.select_location(payload.lat, payload.lng)
        return _turn_payload(session, result)

    return router


def _turn_payload(session: ChatSession, result: TurnResult | None) -> dict[str, Any]:
    turn: dict[str, Any] | None = None
    if result is not None:
        turn = {
            "ok": result.ok,
            "error": result.error,
            "speech_text": result.speech_text,
            "tool_calls": [call.as_payload() for call in result.tool_calls],
            "service": result.service.to_dict() if result.service else None,
        }
    return {"accepted": result is not None, "turn": turn, "session": session.snapshot()}
