# core/interfaces/inventory_store.py
from abc import ABC, abstractmethod
from typing import Optional


class InventoryStore(ABC):
    """What the quotes and trash modules need from the inventory module.

    Stock adjustments are relative and atomic: implementations must never
    read a level and write back a computed value.
    """

    @abstractmethod
    def get_filament(self, db, filament_id: int):
        """Returns the Filament row, or None."""
        ...

    @abstractmethod
    def get_accessory(self, db, accessory_id: int):
        """Returns the Accessory row, or None."""
        ...

    @abstractmethod
    def filament_costs(self, db, ids) -> dict[int, float]:
        """cost_per_kg keyed by id, for the ids that exist."""
        ...

    @abstractmethod
    def accessory_costs(self, db, ids) -> dict[int, float]:
        """Unit cost keyed by id, for the ids that exist."""
        ...

    @abstractmethod
    def adjust_filament_stock(self, db, filament_id: int, delta_grams: float,
                              reason: str, quote_id: Optional[int] = None) -> float:
        """Add delta_grams (negative to debit). Returns the new stock level."""
        ...

    @abstractmethod
    def adjust_accessory_stock(self, db, accessory_id: int, delta_units: int,
                               reason: str, quote_id: Optional[int] = None) -> int:
        """Add delta_units (negative to debit). Returns the new stock level."""
        ...

    @abstractmethod
    def receive_filament(self, db, name: str, color: Optional[str], grams: float,
                         amount: float, material: Optional[str] = None):
        """Book a filament purchase into stock. Returns the Filament row."""
        ...
