"""Stock movement ledger."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.base import StockItemKind
from core.db import get_db
from modules.inventory.models import StockMovement
from modules.inventory.schemas import StockMovementResponse

router = APIRouter(prefix="/stock-movements", tags=["Stock"])


@router.get("", response_model=list[StockMovementResponse])
def list_stock_movements(
    item_kind: Optional[StockItemKind] = None,
    item_id: Optional[int] = None,
    quote_id: Optional[int] = None,
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """Newest movements first."""
    query = db.query(StockMovement)
    if item_kind:
        query = query.filter(StockMovement.item_kind == item_kind)
    if item_id is not None:
        query = query.filter(StockMovement.item_id == item_id)
    if quote_id is not None:
        query = query.filter(StockMovement.quote_id == quote_id)
    return query.order_by(StockMovement.id.desc()).limit(limit).all()
