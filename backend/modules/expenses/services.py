"""
modules/expenses/services.py - Recording expenses and filament purchases.
"""

import logging

from sqlalchemy.orm import Session

from core.base import ExpenseCategory
from core.db import unit_of_work
from core.errors import ValidationFailed
from core.registry import registry
from modules.expenses.models import Expense
from modules.expenses.schemas import ExpenseCreate, FilamentPurchaseCreate

log = logging.getLogger("printdesk.api")


def record_expense(db: Session, data: ExpenseCreate) -> Expense:
    if not data.description.strip():
        raise ValidationFailed("An expense needs a description")
    with unit_of_work(db):
        expense = Expense(
            description=data.description.strip(),
            amount=data.amount,
            category=ExpenseCategory.GENERAL,
        )
        if data.date:
            expense.date = data.date
        db.add(expense)
    db.refresh(expense)
    log.info(f"Recorded expense #{expense.id}: {expense.amount:g} ({expense.description})")
    return expense


def record_filament_purchase(db: Session, data: FilamentPurchaseCreate) -> Expense:
    """Record the expense and add the grams to stock in one transaction."""
    inventory = registry.require("InventoryStore")
    label = " ".join(p for p in (data.name, data.color) if p)
    with unit_of_work(db):
        filament = inventory.receive_filament(
            db, data.name, data.color, data.grams, data.amount, material=data.material,
        )
        expense = Expense(
            description=f"Purchase of {data.grams:g}g of filament {label}",
            amount=data.amount,
            category=ExpenseCategory.FILAMENT,
            filament_id=filament.id,
            grams=data.grams,
        )
        if data.date:
            expense.date = data.date
        db.add(expense)
    db.refresh(expense)
    log.info(f"Recorded filament purchase #{expense.id}: {data.grams:g} g of '{label}' for {data.amount:g}")
    return expense
