"""
modules/inventory/schemas.py - Pydantic schemas for the inventory domain.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.base import StockItemKind, StockMovementReason


# ============== Filaments ==============

class FilamentBase(BaseModel):
    name: str = Field(..., min_length=1)
    color: Optional[str] = None
    material: Optional[str] = None
    cost_per_kg: float = Field(0.0, ge=0)


class FilamentCreate(FilamentBase):
    stock_level: float = Field(0.0, ge=0)


class FilamentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    color: Optional[str] = None
    material: Optional[str] = None
    cost_per_kg: Optional[float] = Field(None, ge=0)
    stock_level: Optional[float] = Field(None, ge=0)


class FilamentResponse(FilamentBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    stock_level: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============== Accessories ==============

class AccessoryBase(BaseModel):
    name: str = Field(..., min_length=1)
    cost: float = Field(0.0, ge=0)


class AccessoryCreate(AccessoryBase):
    stock_level: int = Field(0, ge=0)


class AccessoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    cost: Optional[float] = Field(None, ge=0)
    stock_level: Optional[int] = Field(None, ge=0)


class AccessoryResponse(AccessoryBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    stock_level: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============== Stock ==============

class StockAdjustRequest(BaseModel):
    """Relative stock change; negative to take stock out."""
    delta: float
    notes: Optional[str] = None


class StockMovementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_kind: StockItemKind
    item_id: int
    delta: float
    stock_after: float
    reason: StockMovementReason
    quote_id: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
