"""Inventory seeding on startup.

When the inventory is empty it is filled from the JSON file named by
``inventory_seed_path`` (a list of ``{name, category, price, description}``
objects) or, failing that, with the default catalogue below.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from backend.memory.inventory import Inventory, InventoryCategory

logger = logging.getLogger("llantera.init")

DEFAULT_ITEMS: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Reparación de Ponchadura",
        "category": "Servicio",
        "price": "150",
        "description": "Reparación de llanta ponchada. Tiempo estimado: 20-30 minutos.",
    },
    {
        "id": "2",
        "name": "Cambio de Llanta",
        "category": "Servicio",
        "price": "100",
        "description": (
            "Montaje de llanta de refacción. Tiempo estimado: 15-25 minutos. "
            "No incluye costo de llanta nueva."
        ),
    },
    {
        "id": "3",
        "name": "Llanta Nueva - Rin 15",
        "category": "Producto",
        "price": "1200",
        "description": "Precio por una llanta nueva de medida estándar para Rin 15. Marcas variadas.",
    },
]


def _load_seed_file(path: Path) -> list[dict[str, Any]] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Failed to read inventory seed %s: %s", path, exc)
        return None
    if not isinstance(data, list):
        logger.warning("Inventory seed %s is not a list; ignoring", path)
        return None
    categories = {category.value for category in InventoryCategory}
    entries = []
    for entry in data:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        category = entry.get("category", InventoryCategory.SERVICE.value)
        if category not in categories:
            logger.warning("Skipping inventory seed entry %r with unknown category %r", entry["name"], category)
            continue
        entries.append(entry)
    return entries


def seed_inventory(inventory: Inventory, seed_path: Path | None = None) -> int:
    """Fill an empty inventory and return how many items were added."""

    if len(inventory) > 0:
        return 0

    entries = None
    if seed_path is not None and Path(seed_path).exists():
        entries = _load_seed_file(Path(seed_path))
    if not entries:
        entries = DEFAULT_ITEMS

    for entry in entries:
        inventory.add(
            name=str(entry["name"]),
            category=InventoryCategory(entry.get("category", InventoryCategory.SERVICE.value)),
            price=str(entry.get("price", "0")),
            description=str(entry.get("description", "")),
            item_id=str(entry["id"]) if entry.get("id") else None,
        )
    logger.info("Seeded inventory with %d item(s)", len(entries))
    return len(entries)
