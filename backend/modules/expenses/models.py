"""
modules/expenses/models.py - ORM models for the expenses domain.

Owns tables: expenses
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func

from core.base import Base, ExpenseCategory, _ENUM_VALUES


class Expense(Base):
    """Money spent running the business. Filament purchases also feed stock."""
    __tablename__ = "expenses"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    description = Column(String(500), nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(DateTime, server_default=func.now(), index=True)
    category = Column(
        SQLEnum(ExpenseCategory, values_callable=_ENUM_VALUES),
        nullable=False, default=ExpenseCategory.GENERAL,
    )

    # Set for filament purchases
    filament_id = Column(Integer, nullable=True)
    grams = Column(Float, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
