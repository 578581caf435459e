import json

import pytest

from backend.chat.prompts import EMPTY_INVENTORY, build_system_instruction, format_inventory
from backend.core.errors import NotFoundError
from backend.init_data import DEFAULT_ITEMS, seed_inventory
from backend.memory.inventory import Inventory, InventoryCategory


def test_default_seed_fills_empty_inventory_once():
    inventory = Inventory()

    assert seed_inventory(inventory) == len(DEFAULT_ITEMS)
    assert seed_inventory(inventory) == 0
    assert [item.id for item in inventory.list()] == ["1", "2", "3"]


def test_seed_file_overrides_defaults(tmp_path):
    seed = tmp_path / "inventory.json"
    seed.write_text(
        json.dumps([{"name": "Balanceo", "category": "Servicio", "price": "80"}, {"price": "1"}]),
        encoding="utf-8",
    )
    inventory = Inventory()

    assert seed_inventory(inventory, seed) == 1
    assert inventory.list()[0].name == "Balanceo"


def test_seed_entries_with_unknown_category_are_skipped(tmp_path):
    seed = tmp_path / "inventory.json"
    seed.write_text(
        json.dumps(
            [
                {"name": "Balanceo", "category": "servicio", "price": "80"},
                {"name": "Válvula", "category": "Producto", "price": "30"},
            ]
        ),
        encoding="utf-8",
    )
    inventory = Inventory()

    assert seed_inventory(inventory, seed) == 1
    assert [item.name for item in inventory.list()] == ["Válvula"]


def test_seed_falls_back_to_defaults_when_no_entry_is_usable(tmp_path):
    seed = tmp_path / "inventory.json"
    seed.write_text(json.dumps([{"name": "Balanceo", "category": "servicio"}]), encoding="utf-8")
    inventory = Inventory()

    assert seed_inventory(inventory, seed) == len(DEFAULT_ITEMS)


def test_update_ignores_unset_fields_and_remove(inventory):
    item = inventory.update("1", price="175", description=None)

    assert item.price == "175"
    assert item.description.startswith("Reparación")

    inventory.remove("1")
    with pytest.raises(NotFoundError):
        inventory.update("1", price="1")


def test_format_inventory_lines():
    inventory = Inventory()
    inventory.add("Balanceo", InventoryCategory.SERVICE, "80", "Por llanta.")
    inventory.add("Válvula", InventoryCategory.PRODUCT, " ", "")

    assert format_inventory(inventory.list()) == (
        "- Balanceo (Servicio): $80. Por llanta.\n"
        "- Válvula (Producto): Consultar."
    )


def test_system_instruction_embeds_inventory(inventory):
    instruction = build_system_instruction(inventory.list())

    assert "LLANTERA MÓVIL COFRADÍA" in instruction
    assert "INVENTARIO ACTUAL:\n- Reparación de Ponchadura (Servicio): $150." in instruction
    assert build_system_instruction([]).endswith(EMPTY_INVENTORY)
