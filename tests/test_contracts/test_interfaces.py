"""
Contract tests - Cross-module interfaces.

The ABCs in core/interfaces/ are what modules call on each other through the
registry. These tests pin their abstract surface and check that the
concrete providers implement it.

    pytest tests/test_contracts/test_interfaces.py -v
"""

import sys
from pathlib import Path

import pytest

BACKEND_DIR = Path(__file__).resolve().parents[2] / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from core.base import TrashCollection  # noqa: E402
from core.interfaces.inventory_store import InventoryStore  # noqa: E402
from core.interfaces.settings_provider import SettingsProvider  # noqa: E402
from core.interfaces.trash_bin import ArchiveAdapter, TrashBin  # noqa: E402


@pytest.mark.parametrize("iface, expected", [
    (InventoryStore, {
        "get_filament", "get_accessory", "filament_costs", "accessory_costs",
        "adjust_filament_stock", "adjust_accessory_stock", "receive_filament",
    }),
    (SettingsProvider, {"get_settings"}),
    (TrashBin, {"register_adapter", "archive", "trash", "restore", "purge", "list_trash"}),
    (ArchiveAdapter, {"load", "remove", "reinstate"}),
])
def test_abstract_surface(iface, expected):
    assert set(iface.__abstractmethods__) == expected
    with pytest.raises(TypeError):
        iface()


def test_providers_are_concrete():
    from modules.inventory.services import InventoryService, inventory_store
    from modules.system.services import SettingsService, settings_provider
    from modules.trash.services import TrashService, trash_bin

    assert isinstance(inventory_store, InventoryStore) and not InventoryService.__abstractmethods__
    assert isinstance(settings_provider, SettingsProvider) and not SettingsService.__abstractmethods__
    assert isinstance(trash_bin, TrashBin) and not TrashService.__abstractmethods__


def test_every_collection_has_an_adapter():
    from modules.clients.archive import ClientArchiveAdapter
    from modules.expenses.archive import ExpenseArchiveAdapter
    from modules.inventory.archive import AccessoryArchiveAdapter, FilamentArchiveAdapter
    from modules.quotes.archive import QuoteArchiveAdapter

    adapters = [
        ClientArchiveAdapter(), ExpenseArchiveAdapter(), FilamentArchiveAdapter(),
        AccessoryArchiveAdapter(), QuoteArchiveAdapter(),
    ]
    assert {a.collection for a in adapters} == set(TrashCollection)


def test_default_display_name_falls_back_to_id():
    from pydantic import BaseModel

    class Note(BaseModel):
        text: str = ""

    class NoteAdapter(ArchiveAdapter[Note]):
        collection = TrashCollection.CLIENTS
        schema = Note

        def load(self, db, original_id):
            return None

        def remove(self, db, record):
            return None

        def reinstate(self, db, original_id, snapshot):
            return snapshot

    assert NoteAdapter().display_name(Note(text="x"), 17) == "17"
