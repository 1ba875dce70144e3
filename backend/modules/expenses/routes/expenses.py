"""Expense endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.base import ExpenseCategory, TrashCollection
from core.db import get_db
from core.errors import NotFound
from core.registry import registry
from modules.expenses.models import Expense
from modules.expenses.schemas import ExpenseCreate, ExpenseResponse, FilamentPurchaseCreate
from modules.expenses.services import record_expense, record_filament_purchase

router = APIRouter(prefix="/expenses", tags=["Expenses"])


@router.get("", response_model=list[ExpenseResponse])
def list_expenses(category: Optional[ExpenseCategory] = None, db: Session = Depends(get_db)):
    """List expenses, most recent first."""
    query = db.query(Expense)
    if category:
        query = query.filter(Expense.category == category)
    return query.order_by(Expense.date.desc(), Expense.id.desc()).all()


@router.post("", response_model=ExpenseResponse, status_code=201)
def create_expense(data: ExpenseCreate, db: Session = Depends(get_db)):
    return record_expense(db, data)


@router.post("/filament-purchase", response_model=ExpenseResponse, status_code=201)
def create_filament_purchase(data: FilamentPurchaseCreate, db: Session = Depends(get_db)):
    """Record a filament purchase and add it to stock."""
    return record_filament_purchase(db, data)


@router.get("/{expense_id}", response_model=ExpenseResponse)
def get_expense(expense_id: int, db: Session = Depends(get_db)):
    expense = db.get(Expense, expense_id)
    if not expense:
        raise NotFound("Expense not found", expense_id=expense_id)
    return expense


@router.delete("/{expense_id}")
def delete_expense(expense_id: int, db: Session = Depends(get_db)):
    """Move an expense to the trash."""
    item = registry.require("TrashBin").trash(db, TrashCollection.EXPENSES, expense_id)
    return {"status": "trashed", "trash_id": item.id}
