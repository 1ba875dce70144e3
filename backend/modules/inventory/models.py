"""
modules/inventory/models.py - ORM models for the inventory domain.

Owns tables: filaments, accessories, stock_movements
"""

from sqlalchemy import (
    Column, Integer, String, Float, DateTime, Text, Enum as SQLEnum
)
from sqlalchemy.sql import func

from core.base import Base, StockItemKind, StockMovementReason, _ENUM_VALUES


class Filament(Base):
    """A filament (by name and color) with its stock in grams."""
    __tablename__ = "filaments"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    color = Column(String(100), nullable=True)
    material = Column(String(50), nullable=True)  # PLA, PETG, ...
    stock_level = Column(Float, nullable=False, default=0.0)  # grams
    cost_per_kg = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Accessory(Base):
    """Countable extras sold with a print (magnets, keyrings, boxes)."""
    __tablename__ = "accessories"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    stock_level = Column(Integer, nullable=False, default=0)  # units
    cost = Column(Float, nullable=False, default=0.0)  # per unit

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class StockMovement(Base):
    """Append-only ledger of every stock change."""
    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True)
    item_kind = Column(SQLEnum(StockItemKind, values_callable=_ENUM_VALUES), nullable=False)
    item_id = Column(Integer, nullable=False, index=True)
    delta = Column(Float, nullable=False)
    stock_after = Column(Float, nullable=False)
    reason = Column(SQLEnum(StockMovementReason, values_callable=_ENUM_VALUES), nullable=False)
    quote_id = Column(Integer, nullable=True, index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
