"""Products and services offered, read by the model on every turn."""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Iterable

from backend.core.errors import NotFoundError


class InventoryCategory(str, Enum):
    PRODUCT = "Producto"
    SERVICE = "Servicio"


@dataclass(slots=True)
class InventoryItem:
    id: str
    name: str
    category: InventoryCategory
    price: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        return data


class Inventory:
    """In-memory catalogue editable from the admin API."""

    def __init__(self, items: Iterable[InventoryItem] = ()) -> None:
        self._items: list[InventoryItem] = list(items)

    def __len__(self) -> int:
        return len(self._items)

    def list(self) -> list[InventoryItem]:
        return list(self._items)

    def add(
        self,
        name: str,
        category: InventoryCategory = InventoryCategory.SERVICE,
        price: str = "0",
        description: str = "",
        *,
        item_id: str | None = None,
    ) -> InventoryItem:
        item = InventoryItem(
            id=item_id or uuid.uuid4().hex,
            name=name,
            category=category,
            price=price,
            description=description,
        )
        self._items.append(item)
        return item

    def update(self, item_id: str, **changes: Any) -> InventoryItem:
        item = self._find(item_id)
        for key, value in changes.items():
            if value is not None and key in {"name", "category", "price", "description"}:
                setattr(item, key, value)
        return item

    def remove(self, item_id: str) -> None:
        item = self._find(item_id)
        self._items.remove(item)

    def _find(self, item_id: str) -> InventoryItem:
        for item in self._items:
            if item.id == item_id:
                return item
        raise NotFoundError(item_id)
