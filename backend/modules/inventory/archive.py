"""
modules/inventory/archive.py - Trash adapters for filaments and accessories.
"""

from core.base import TrashCollection
from core.interfaces.trash_bin import ArchiveAdapter
from modules.inventory.models import Accessory, Filament
from modules.inventory.schemas import AccessoryResponse, FilamentResponse


class FilamentArchiveAdapter(ArchiveAdapter[FilamentResponse]):
    collection = TrashCollection.FILAMENTS
    schema = FilamentResponse

    def load(self, db, original_id: int):
        return db.get(Filament, original_id)

    def remove(self, db, record) -> None:
        db.delete(record)

    def reinstate(self, db, original_id: int, snapshot: FilamentResponse):
        filament = Filament(id=original_id, **snapshot.model_dump(exclude={"id"}))
        db.add(filament)
        return filament

    def display_name(self, snapshot: FilamentResponse, original_id: int) -> str:
        return " ".join(p for p in (snapshot.name, snapshot.color) if p) or str(original_id)


class AccessoryArchiveAdapter(ArchiveAdapter[AccessoryResponse]):
    collection = TrashCollection.ACCESSORIES
    schema = AccessoryResponse

    def load(self, db, original_id: int):
        return db.get(Accessory, original_id)

    def remove(self, db, record) -> None:
        db.delete(record)

    def reinstate(self, db, original_id: int, snapshot: AccessoryResponse):
        accessory = Accessory(id=original_id, **snapshot.model_dump(exclude={"id"}))
        db.add(accessory)
        return accessory
