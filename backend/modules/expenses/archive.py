"""
modules/expenses/archive.py - Trash adapter for expenses.

Trashing a filament purchase does not take the grams back out of stock.
"""

from core.base import TrashCollection
from core.interfaces.trash_bin import ArchiveAdapter
from modules.expenses.models import Expense
from modules.expenses.schemas import ExpenseResponse


class ExpenseArchiveAdapter(ArchiveAdapter[ExpenseResponse]):
    collection = TrashCollection.EXPENSES
    schema = ExpenseResponse

    def load(self, db, original_id: int):
        return db.get(Expense, original_id)

    def remove(self, db, record) -> None:
        db.delete(record)

    def reinstate(self, db, original_id: int, snapshot: ExpenseResponse):
        expense = Expense(id=original_id, **snapshot.model_dump(exclude={"id"}))
        db.add(expense)
        return expense
