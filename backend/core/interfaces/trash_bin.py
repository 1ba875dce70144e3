# core/interfaces/trash_bin.py
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Type, TypeVar

from pydantic import BaseModel

from core.base import TrashCollection

T = TypeVar("T", bound=BaseModel)


class ArchiveAdapter(ABC, Generic[T]):
    """Per-collection behaviour the trash needs to archive and reinstate records.

    `schema` is the pydantic model a snapshot is validated against, so the
    archived blob of each collection stays typed.
    """

    collection: TrashCollection
    schema: Type[T]

    @abstractmethod
    def load(self, db, original_id: int) -> Optional[Any]:
        """Returns the live row, or None."""
        ...

    @abstractmethod
    def remove(self, db, record: Any) -> None:
        """Delete the live row (and anything it owns)."""
        ...

    @abstractmethod
    def reinstate(self, db, original_id: int, snapshot: T) -> Any:
        """Write the snapshot back as a live row under original_id."""
        ...

    def snapshot(self, record: Any) -> dict:
        """Full field snapshot of a live row as JSON-safe data."""
        return self.schema.model_validate(record).model_dump(mode="json")

    def parse(self, data: dict) -> T:
        return self.schema.model_validate(data)

    def display_name(self, snapshot: T, original_id: int) -> str:
        return (
            getattr(snapshot, "name", None)
            or getattr(snapshot, "description", None)
            or str(original_id)
        )

    # Hooks. on_archive returns the stock lines it credited back, as JSON-safe
    # dicts, or None when nothing was reconciled. The trash item stores that
    # list as stock_credit and hands it back to on_restore / on_purge.
    def on_archive(self, db, snapshot: T) -> Optional[list[dict]]:
        return None

    def on_restore(self, db, snapshot: T, stock_credit: Optional[list[dict]]) -> None:
        return None

    def on_purge(self, db, snapshot: T, stock_credit: Optional[list[dict]]) -> None:
        return None


class TrashBin(ABC):
    """What domain modules call to delete records through the trash."""

    @abstractmethod
    def register_adapter(self, adapter: ArchiveAdapter) -> None: ...

    @abstractmethod
    def archive(self, db, collection: TrashCollection, original_id: int,
                snapshot: dict, stock_credit: Optional[list[dict]] = None) -> int:
        """Store a snapshot in the trash. Returns the trash item id."""
        ...

    @abstractmethod
    def trash(self, db, collection: TrashCollection, original_id: int):
        """Soft-delete a live record. Returns the trash item."""
        ...

    @abstractmethod
    def restore(self, db, trash_id: int):
        """Reinstate a trashed record under its original id."""
        ...

    @abstractmethod
    def purge(self, db, trash_id: int) -> None:
        """Permanently discard a trashed record."""
        ...

    @abstractmethod
    def list_trash(self, db) -> list:
        """Trash items, newest first."""
        ...
