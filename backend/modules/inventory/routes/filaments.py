"""Filament CRUD and manual stock adjustment endpoints."""

from typing import Optional
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.base import StockItemKind, StockMovementReason, TrashCollection
from core.db import get_db, unit_of_work
from core.dependencies import log_audit
from core.errors import NotFound
from core.registry import registry
from modules.inventory.models import Filament
from modules.inventory.schemas import (
    FilamentCreate, FilamentUpdate, FilamentResponse, StockAdjustRequest,
)
from modules.inventory.services import inventory_store

log = logging.getLogger("printdesk.api")
router = APIRouter(prefix="/filaments", tags=["Filaments"])


def _get_or_404(db: Session, filament_id: int) -> Filament:
    filament = inventory_store.get_filament(db, filament_id)
    if not filament:
        raise NotFound("Filament not found", filament_id=filament_id)
    return filament


@router.get("", response_model=list[FilamentResponse])
def list_filaments(material: Optional[str] = None, db: Session = Depends(get_db)):
    """List filaments ordered by name."""
    query = db.query(Filament)
    if material:
        query = query.filter(Filament.material == material)
    return query.order_by(Filament.name, Filament.color).all()


@router.post("", response_model=FilamentResponse, status_code=201)
def create_filament(data: FilamentCreate, db: Session = Depends(get_db)):
    """Create a filament."""
    with unit_of_work(db):
        filament = Filament(**data.model_dump())
        db.add(filament)
    db.refresh(filament)
    log.info(f"Created filament #{filament.id} '{filament.name}'")
    return filament


@router.get("/{filament_id}", response_model=FilamentResponse)
def get_filament(filament_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, filament_id)


@router.patch("/{filament_id}", response_model=FilamentResponse)
def update_filament(filament_id: int, data: FilamentUpdate, db: Session = Depends(get_db)):
    """Update filament fields. A stock_level change is booked as a manual movement."""
    filament = _get_or_404(db, filament_id)
    fields = data.model_dump(exclude_unset=True)
    new_level = fields.pop("stock_level", None)
    with unit_of_work(db):
        for key, value in fields.items():
            setattr(filament, key, value)
        if new_level is not None:
            inventory_store.set_stock_level(
                db, StockItemKind.FILAMENT, filament_id, new_level, notes="Edited stock level",
            )
    db.refresh(filament)
    return filament


@router.post("/{filament_id}/adjust", response_model=FilamentResponse)
def adjust_filament(filament_id: int, data: StockAdjustRequest, db: Session = Depends(get_db)):
    """Add or remove grams of stock."""
    _get_or_404(db, filament_id)
    with unit_of_work(db):
        level = inventory_store.adjust_filament_stock(
            db, filament_id, data.delta, StockMovementReason.MANUAL, notes=data.notes,
        )
        log_audit(db, "stock_adjust", "filaments", filament_id,
                  details={"delta": data.delta, "stock_after": level, "notes": data.notes},
                  commit=False)
    return _get_or_404(db, filament_id)


@router.delete("/{filament_id}")
def delete_filament(filament_id: int, db: Session = Depends(get_db)):
    """Move a filament to the trash."""
    item = registry.require("TrashBin").trash(db, TrashCollection.FILAMENTS, filament_id)
    return {"status": "trashed", "trash_id": item.id}
