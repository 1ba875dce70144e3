"""
modules/quotes/models.py - ORM models for the quotes domain.

Owns tables: quotes, quote_materials, quote_accessories
"""

from sqlalchemy import (
    Column, Integer, Float, DateTime, Text, ForeignKey, Enum as SQLEnum
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from core.base import Base, QuoteStatus, _ENUM_VALUES


class Quote(Base):
    """A priced print job for a client.

    While status is pending the quote's materials and accessories are
    already taken out of stock. Cost components are stored as they were at
    pricing time; the client name is looked up on read.
    """
    __tablename__ = "quotes"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, nullable=True, index=True)  # no FK: clients can be trashed
    description = Column(Text, nullable=True)
    printing_time_hours = Column(Float, nullable=False, default=0.0)

    price = Column(Float, nullable=False, default=0.0)
    status = Column(
        SQLEnum(QuoteStatus, values_callable=_ENUM_VALUES),
        nullable=False, default=QuoteStatus.PENDING, index=True,
    )
    date = Column(DateTime, server_default=func.now())

    # Cost breakdown
    material_cost = Column(Float, nullable=False, default=0.0)
    accessory_cost = Column(Float, nullable=False, default=0.0)
    machine_cost = Column(Float, nullable=False, default=0.0)
    electricity_cost = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    materials = relationship(
        "QuoteMaterial", cascade="all, delete-orphan", order_by="QuoteMaterial.id",
        back_populates="quote",
    )
    accessories = relationship(
        "QuoteAccessory", cascade="all, delete-orphan", order_by="QuoteAccessory.id",
        back_populates="quote",
    )

    @property
    def total_cost(self) -> float:
        return (
            (self.material_cost or 0)
            + (self.accessory_cost or 0)
            + (self.machine_cost or 0)
            + (self.electricity_cost or 0)
        )


class QuoteMaterial(Base):
    """Grams of a filament consumed by a quote."""
    __tablename__ = "quote_materials"

    id = Column(Integer, primary_key=True)
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True)
    filament_id = Column(Integer, nullable=False)  # no FK: filaments can be trashed
    grams = Column(Float, nullable=False)

    quote = relationship("Quote", back_populates="materials")


class QuoteAccessory(Base):
    """Units of an accessory consumed by a quote."""
    __tablename__ = "quote_accessories"

    id = Column(Integer, primary_key=True)
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True)
    accessory_id = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)

    quote = relationship("Quote", back_populates="accessories")
