"""
modules/expenses/schemas.py - Pydantic schemas for the expenses domain.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.base import ExpenseCategory


class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    date: Optional[datetime] = None


class FilamentPurchaseCreate(BaseModel):
    """A filament bought by weight; matched to stock by name and color."""
    name: str = Field(..., min_length=1)
    color: Optional[str] = None
    material: Optional[str] = None
    grams: float = Field(..., gt=0)
    amount: float = Field(..., gt=0)
    date: Optional[datetime] = None


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    amount: float
    date: Optional[datetime] = None
    category: ExpenseCategory
    filament_id: Optional[int] = None
    grams: Optional[float] = None
    created_at: Optional[datetime] = None
