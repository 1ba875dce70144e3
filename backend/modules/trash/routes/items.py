"""Trash listing, restore and permanent delete endpoints."""

from typing import Optional
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.base import TrashCollection
from core.db import get_db
from modules.trash.schemas import TrashItemResponse, TrashActionResponse
from modules.trash.services import trash_bin

log = logging.getLogger("printdesk.api")
router = APIRouter(prefix="/trash", tags=["Trash"])


def _to_response(item) -> TrashItemResponse:
    return TrashItemResponse(
        id=item.id,
        original_id=item.original_id,
        original_collection=item.original_collection,
        deleted_at=item.deleted_at,
        stock_reconciled=item.stock_reconciled,
        stock_credit=item.stock_credit,
        display_name=trash_bin.display_name(item),
        data=item.data,
    )


@router.get("", response_model=list[TrashItemResponse])
def list_trash(collection: Optional[TrashCollection] = None, db: Session = Depends(get_db)):
    """List trashed records, newest first."""
    return [_to_response(item) for item in trash_bin.list_trash(db, collection)]


@router.get("/{trash_id}")
def get_trash_item(trash_id: int, db: Session = Depends(get_db)):
    """A single trashed record with its typed snapshot."""
    return trash_bin.get_archived(db, trash_id).model_dump(mode="json")


@router.post("/{trash_id}/restore", response_model=TrashActionResponse)
def restore_trash_item(trash_id: int, db: Session = Depends(get_db)):
    """Put a trashed record back under its original id."""
    archived = trash_bin.get_archived(db, trash_id)
    trash_bin.restore(db, trash_id)
    return TrashActionResponse(
        status="restored",
        trash_id=trash_id,
        original_collection=archived.original_collection,
        original_id=archived.original_id,
    )


@router.delete("/{trash_id}", response_model=TrashActionResponse)
def purge_trash_item(trash_id: int, db: Session = Depends(get_db)):
    """Permanently delete a trashed record."""
    archived = trash_bin.get_archived(db, trash_id)
    trash_bin.purge(db, trash_id)
    return TrashActionResponse(
        status="purged",
        trash_id=trash_id,
        original_collection=archived.original_collection,
        original_id=archived.original_id,
    )
