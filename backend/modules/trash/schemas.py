"""
modules/trash/schemas.py - Pydantic schemas for the trash domain.
"""

from datetime import datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

from core.base import TrashCollection

T = TypeVar("T", bound=BaseModel)


class Archived(BaseModel, Generic[T]):
    """A trash item whose snapshot is typed by its collection's schema."""
    id: int
    original_id: int
    original_collection: TrashCollection
    deleted_at: Optional[datetime] = None
    stock_reconciled: bool = False
    stock_credit: Optional[list[dict[str, Any]]] = None
    data: T


class TrashItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    original_id: int
    original_collection: TrashCollection
    deleted_at: Optional[datetime] = None
    stock_reconciled: bool = False
    stock_credit: Optional[list[dict[str, Any]]] = None
    display_name: str
    data: dict[str, Any]


class TrashActionResponse(BaseModel):
    status: str
    trash_id: int
    original_collection: TrashCollection
    original_id: int
