"""Accessory CRUD and manual stock adjustment endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.base import StockItemKind, StockMovementReason, TrashCollection
from core.db import get_db, unit_of_work
from core.dependencies import log_audit
from core.errors import NotFound
from core.registry import registry
from modules.inventory.models import Accessory
from modules.inventory.schemas import (
    AccessoryCreate, AccessoryUpdate, AccessoryResponse, StockAdjustRequest,
)
from modules.inventory.services import inventory_store

log = logging.getLogger("printdesk.api")
router = APIRouter(prefix="/accessories", tags=["Accessories"])


def _get_or_404(db: Session, accessory_id: int) -> Accessory:
    accessory = inventory_store.get_accessory(db, accessory_id)
    if not accessory:
        raise NotFound("Accessory not found", accessory_id=accessory_id)
    return accessory


@router.get("", response_model=list[AccessoryResponse])
def list_accessories(db: Session = Depends(get_db)):
    return db.query(Accessory).order_by(Accessory.name).all()


@router.post("", response_model=AccessoryResponse, status_code=201)
def create_accessory(data: AccessoryCreate, db: Session = Depends(get_db)):
    """Create an accessory."""
    with unit_of_work(db):
        accessory = Accessory(**data.model_dump())
        db.add(accessory)
    db.refresh(accessory)
    log.info(f"Created accessory #{accessory.id} '{accessory.name}'")
    return accessory


@router.get("/{accessory_id}", response_model=AccessoryResponse)
def get_accessory(accessory_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, accessory_id)


@router.patch("/{accessory_id}", response_model=AccessoryResponse)
def update_accessory(accessory_id: int, data: AccessoryUpdate, db: Session = Depends(get_db)):
    accessory = _get_or_404(db, accessory_id)
    fields = data.model_dump(exclude_unset=True)
    new_level = fields.pop("stock_level", None)
    with unit_of_work(db):
        for key, value in fields.items():
            setattr(accessory, key, value)
        if new_level is not None:
            inventory_store.set_stock_level(
                db, StockItemKind.ACCESSORY, accessory_id, new_level, notes="Edited stock level",
            )
    db.refresh(accessory)
    return accessory


@router.post("/{accessory_id}/adjust", response_model=AccessoryResponse)
def adjust_accessory(accessory_id: int, data: StockAdjustRequest, db: Session = Depends(get_db)):
    """Add or remove units of stock."""
    _get_or_404(db, accessory_id)
    with unit_of_work(db):
        level = inventory_store.adjust_accessory_stock(
            db, accessory_id, data.delta, StockMovementReason.MANUAL, notes=data.notes,
        )
        log_audit(db, "stock_adjust", "accessories", accessory_id,
                  details={"delta": data.delta, "stock_after": level, "notes": data.notes},
                  commit=False)
    return _get_or_404(db, accessory_id)


@router.delete("/{accessory_id}")
def delete_accessory(accessory_id: int, db: Session = Depends(get_db)):
    """Move an accessory to the trash."""
    item = registry.require("TrashBin").trash(db, TrashCollection.ACCESSORIES, accessory_id)
    return {"status": "trashed", "trash_id": item.id}
