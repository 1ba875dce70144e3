"""
modules/trash/models.py - ORM models for the trash domain.

Owns tables: trash_items
"""

from sqlalchemy import (
    Column, Integer, DateTime, Boolean, JSON, Enum as SQLEnum, UniqueConstraint
)
from sqlalchemy.sql import func

from core.base import Base, TrashCollection, _ENUM_VALUES


class TrashItem(Base):
    """A deleted record kept as a snapshot until restored or purged."""
    __tablename__ = "trash_items"
    __table_args__ = (
        UniqueConstraint("original_collection", "original_id", name="uq_trash_original"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    original_id = Column(Integer, nullable=False)
    original_collection = Column(
        SQLEnum(TrashCollection, values_callable=_ENUM_VALUES), nullable=False, index=True
    )
    deleted_at = Column(DateTime, server_default=func.now(), index=True)
    data = Column(JSON, nullable=False)

    # True once the snapshot's consumed stock has been credited back
    stock_reconciled = Column(Boolean, nullable=False, default=False)
    # The lines that credit actually moved: [{"kind", "item_id", "amount"}, ...]
    stock_credit = Column(JSON)
