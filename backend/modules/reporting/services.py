"""
modules/reporting/services.py - Dashboard totals and JSON backups.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from core.base import QuoteStatus
from core.db import unit_of_work
from core.registry import registry
from modules.clients.models import Client
from modules.clients.schemas import ClientResponse
from modules.expenses.models import Expense
from modules.expenses.schemas import ExpenseResponse
from modules.inventory.models import Accessory, Filament
from modules.inventory.schemas import AccessoryResponse, FilamentResponse
from modules.quotes.models import Quote
from modules.quotes.schemas import QuoteRecord
from modules.system.services import get_config_value, set_config_value

log = logging.getLogger("printdesk.api")

LAST_BACKUP_KEY = "last_backup_at"


def dashboard_summary(db: Session) -> dict:
    """Revenue and production cost count delivered quotes only."""
    cost_settings = registry.require("SettingsProvider").get_settings(db)

    delivered = db.query(
        func.coalesce(func.sum(Quote.price), 0.0),
        func.coalesce(func.sum(
            Quote.material_cost + Quote.accessory_cost + Quote.machine_cost + Quote.electricity_cost
        ), 0.0),
        func.count(Quote.id),
    ).filter(Quote.status == QuoteStatus.DELIVERED).one()
    revenue, production_cost, delivered_count = delivered

    expenses_total, expense_count = db.query(
        func.coalesce(func.sum(Expense.amount), 0.0), func.count(Expense.id),
    ).one()

    counts = dict(
        db.query(Quote.status, func.count(Quote.id)).group_by(Quote.status).all()
    )
    quote_count = sum(counts.values())
    active = counts.get(QuoteStatus.PENDING, 0) + counts.get(QuoteStatus.PRINTING, 0)

    return {
        "currency": cost_settings.currency,
        "revenue": revenue,
        "production_cost": production_cost,
        "expenses": expenses_total,
        "net_profit": revenue - production_cost - expenses_total,
        "quote_count": quote_count,
        "delivered_quotes": delivered_count,
        "active_quotes": active,
        "quotes_by_status": {status.value: counts.get(status, 0) for status in QuoteStatus},
        "expense_count": expense_count,
        "client_count": db.query(func.count(Client.id)).scalar(),
    }


def build_backup(db: Session, now: Optional[datetime] = None) -> dict:
    """Every live collection plus settings, as JSON-ready data.

    Stamps last_backup_at so the reminder resets.
    """
    now = now or datetime.now(timezone.utc)

    def dump(schema, rows):
        return [schema.model_validate(r).model_dump(mode="json") for r in rows]

    quotes = (
        db.query(Quote)
        .options(selectinload(Quote.materials), selectinload(Quote.accessories))
        .order_by(Quote.id)
        .all()
    )
    backup = {
        "exported_at": now.isoformat(),
        "clients": dump(ClientResponse, db.query(Client).order_by(Client.id).all()),
        "filaments": dump(FilamentResponse, db.query(Filament).order_by(Filament.id).all()),
        "accessories": dump(AccessoryResponse, db.query(Accessory).order_by(Accessory.id).all()),
        "quotes": dump(QuoteRecord, quotes),
        "expenses": dump(ExpenseResponse, db.query(Expense).order_by(Expense.id).all()),
        "settings": registry.require("SettingsProvider").get_settings(db).model_dump(mode="json"),
    }

    with unit_of_work(db):
        set_config_value(db, LAST_BACKUP_KEY, now.isoformat())
    log.info(
        f"Backup exported: {len(backup['clients'])} clients, {len(backup['quotes'])} quotes, "
        f"{len(backup['expenses'])} expenses"
    )
    return backup


def backup_status(db: Session, now: Optional[datetime] = None) -> dict:
    """Whether a backup is due (never made, or older than the reminder period)."""
    now = now or datetime.now(timezone.utc)
    reminder_days = registry.require("SettingsProvider").get_settings(db).backup_reminder_days
    raw = get_config_value(db, LAST_BACKUP_KEY)

    last_backup_at = datetime.fromisoformat(raw) if raw else None
    if last_backup_at is not None and last_backup_at.tzinfo is None:
        last_backup_at = last_backup_at.replace(tzinfo=timezone.utc)
    due = last_backup_at is None or now - last_backup_at > timedelta(days=reminder_days)
    return {
        "last_backup_at": last_backup_at.isoformat() if last_backup_at else None,
        "reminder_days": reminder_days,
        "due": due,
    }
