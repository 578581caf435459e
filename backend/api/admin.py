"""API routes for the service history and inventory admin views."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from backend.core.errors import NotFoundError
from backend.memory.inventory import Inventory, InventoryCategory
from backend.memory.services import ServiceHistory


class FinishIn(BaseModel):
    price: str = Field(min_length=1)


class InventoryIn(BaseModel):
    name: str = Field(min_length=1)
    category: InventoryCategory = InventoryCategory.SERVICE
    price: str = "0"
    description: str = ""


class InventoryPatch(BaseModel):
    name: str | None = None
    category: InventoryCategory | None = None
    price: str | None = None
    description: str | None = None


def create_admin_router(services: ServiceHistory, inventory: Inventory) -> APIRouter:
    router = APIRouter(tags=["admin"])

    @router.get("/services")
    async def list_services() -> list[dict[str, Any]]:
        return [item.to_dict() for item in services.list()]

    @router.post("/services/{service_id}/approve")
    async def approve_service(service_id: str) -> dict[str, Any]:
        try:
            item, notice = services.approve(service_id)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="service not found") from None
        return {"service": item.to_dict(), "notification": notice}

    @router.post("/services/{service_id}/start")
    async def start_service(service_id: str) -> dict[str, Any]:
        try:
            item, url = services.start(service_id)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="service not found") from None
        return {"service": item.to_dict(), "directions_url": url}

    @router.post("/services/{service_id}/finish")
    async def finish_service(service_id: str, payload: FinishIn) -> dict[str, Any]:
        try:
            item = services.finish(service_id, payload.price)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="service not found") from None
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from None
        return {"service": item.to_dict()}

    @router.get("/inventory")
    async def list_inventory() -> list[dict[str, Any]]:
        return [item.to_dict() for item in inventory.list()]

    @router.post("/inventory", status_code=201)
    async def add_inventory_item(payload: InventoryIn) -> dict[str, Any]:
        item = inventory.add(payload.name, payload.category, payload.price or "0", payload.description)
        return item.to_dict()

    @router.put("/inventory/{item_id}")
    async def update_inventory_item(item_id: str, payload: InventoryPatch) -> dict[str, Any]:
        try:
            item = inventory.update(item_id, **payload.model_dump())
        except NotFoundError:
            raise HTTPException(status_code=404, detail="inventory item not found") from None
        return item.to_dict()

    @router.delete("/inventory/{item_id}", status_code=204)
    async def delete_inventory_item(item_id: str) -> None:
        try:
            inventory.remove(item_id)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="inventory item not found") from None

    return router
