"""Quote pricing, creation, status and delete endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.base import QuoteStatus
from core.db import get_db
from modules.quotes.schemas import (
    QuoteBreakdown, QuoteCreate, QuoteDraft, QuoteResponse, QuoteStatusUpdate,
)
from modules.quotes.services import quote_service

router = APIRouter(prefix="/quotes", tags=["Quotes"])


# /preview registers before /{quote_id}
@router.post("/preview", response_model=QuoteBreakdown)
def preview_quote(draft: QuoteDraft, db: Session = Depends(get_db)):
    """Price a draft quote. Nothing is saved and no stock moves."""
    return quote_service.preview(db, draft)


@router.get("", response_model=list[QuoteResponse])
def list_quotes(
    status: Optional[QuoteStatus] = None,
    client_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    return quote_service.list_quotes(db, status=status, client_id=client_id)


@router.post("", response_model=QuoteResponse, status_code=201)
def create_quote(data: QuoteCreate, db: Session = Depends(get_db)):
    """Confirm a quote: reprice it and take its materials out of stock."""
    return quote_service.create_quote(db, data)


@router.get("/{quote_id}", response_model=QuoteResponse)
def get_quote(quote_id: int, db: Session = Depends(get_db)):
    return quote_service.get_quote(db, quote_id)


@router.patch("/{quote_id}/status", response_model=QuoteResponse)
def update_quote_status(quote_id: int, data: QuoteStatusUpdate, db: Session = Depends(get_db)):
    return quote_service.update_quote_status(db, quote_id, data.status)


@router.delete("/{quote_id}")
def delete_quote(quote_id: int, db: Session = Depends(get_db)):
    """Move a quote to the trash."""
    item = quote_service.delete_quote(db, quote_id)
    return {"status": "trashed", "trash_id": item.id, "stock_reconciled": item.stock_reconciled}
