"""
core/base.py - Declarative Base and shared enums.

All ORM models import Base from here.
All shared enums (used across multiple domain modules) live here
to avoid circular imports between domain modules.
"""

from enum import Enum
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# SQLAlchemy 2.x defaults to using enum member NAMES as DB values.
# We want member VALUES (lowercase strings) instead.
_ENUM_VALUES = lambda x: [e.value for e in x]


class QuoteStatus(str, Enum):
    """Status progression for quotes."""
    PENDING = "pending"       # Quoted and confirmed, materials reserved
    PRINTING = "printing"     # On the printer
    DELIVERED = "delivered"   # Handed over to the client


class TrashCollection(str, Enum):
    """Collections whose records go through the trash on delete."""
    CLIENTS = "clients"
    QUOTES = "quotes"
    EXPENSES = "expenses"
    FILAMENTS = "filaments"
    ACCESSORIES = "accessories"


class StockRestorePolicy(str, Enum):
    """When a deleted quote's consumed stock is credited back.

    status_gated:  on soft-delete, only for pending quotes
    unconditional: on soft-delete, whatever the status
    on_purge:      on permanent delete, only for pending quotes
    """
    STATUS_GATED = "status_gated"
    UNCONDITIONAL = "unconditional"
    ON_PURGE = "on_purge"


class StockItemKind(str, Enum):
    FILAMENT = "filament"
    ACCESSORY = "accessory"


class StockMovementReason(str, Enum):
    QUOTE_CREATED = "quote_created"
    QUOTE_TRASHED = "quote_trashed"
    QUOTE_RESTORED = "quote_restored"
    QUOTE_PURGED = "quote_purged"
    PURCHASE = "purchase"
    MANUAL = "manual"


class ExpenseCategory(str, Enum):
    GENERAL = "general"
    FILAMENT = "filament"
