"""
modules/inventory/services.py - Filament and accessory stock.

All stock changes are single relative UPDATE statements
(stock_level = stock_level + delta), guarded so a debit cannot take the
level below zero. Each change writes one stock_movements row in the same
transaction.
"""

import logging
from typing import Optional

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session
from sqlalchemy.orm.util import identity_key

from core.base import StockItemKind, StockMovementReason
from core.config import settings
from core.db import unit_of_work, on_commit
from core.errors import InsufficientStock, ReferenceNotFound, ValidationFailed
from core.event_bus import emit
from core.events import STOCK_ADJUSTED
from core.interfaces.inventory_store import InventoryStore
from modules.inventory.models import Accessory, Filament, StockMovement

log = logging.getLogger("printdesk.inventory")

_MODELS = {
    StockItemKind.FILAMENT: Filament,
    StockItemKind.ACCESSORY: Accessory,
}


def _expire_stock(db: Session, model, item_id: int, *attrs) -> None:
    """Drop cached column values after a bulk UPDATE so the next read hits the row."""
    cached = db.identity_map.get(identity_key(model, item_id))
    if cached is not None:
        db.expire(cached, list(attrs))


class InventoryService(InventoryStore):

    def get_filament(self, db: Session, filament_id: int) -> Optional[Filament]:
        return db.get(Filament, filament_id)

    def get_accessory(self, db: Session, accessory_id: int) -> Optional[Accessory]:
        return db.get(Accessory, accessory_id)

    def filament_costs(self, db: Session, ids) -> dict[int, float]:
        """cost_per_kg for each existing filament id."""
        ids = set(ids)
        if not ids:
            return {}
        rows = db.execute(select(Filament.id, Filament.cost_per_kg).where(Filament.id.in_(ids)))
        return {row.id: row.cost_per_kg or 0.0 for row in rows}

    def accessory_costs(self, db: Session, ids) -> dict[int, float]:
        """Unit cost for each existing accessory id."""
        ids = set(ids)
        if not ids:
            return {}
        rows = db.execute(select(Accessory.id, Accessory.cost).where(Accessory.id.in_(ids)))
        return {row.id: row.cost or 0.0 for row in rows}

    # ------------------------------------------------------------------
    # Stock adjustments
    # ------------------------------------------------------------------

    def _adjust(self, db: Session, kind: StockItemKind, item_id: int, delta,
                reason, quote_id: Optional[int] = None, notes: Optional[str] = None):
        model = _MODELS[kind]
        reason = StockMovementReason(reason)
        stmt = (
            update(model)
            .where(model.id == item_id)
            .values(stock_level=model.stock_level + delta)
        )
        if delta < 0 and not settings.allow_negative_stock:
            stmt = stmt.where(model.stock_level + delta >= 0)

        with unit_of_work(db):
            result = db.execute(stmt.execution_options(synchronize_session=False))
            _expire_stock(db, model, item_id, "stock_level")
            level = db.execute(select(model.stock_level).where(model.id == item_id)).scalar_one_or_none()
            if result.rowcount == 0:
                if level is None:
                    raise ReferenceNotFound(
                        f"{kind.value.capitalize()} #{item_id} does not exist",
                        item_kind=kind.value, item_id=item_id,
                    )
                raise InsufficientStock(
                    f"Not enough stock for {kind.value} #{item_id}: "
                    f"{level} available, {-delta} requested",
                    item_kind=kind.value, item_id=item_id, available=level, requested=-delta,
                )
            db.add(StockMovement(
                item_kind=kind,
                item_id=item_id,
                delta=delta,
                stock_after=level,
                reason=reason,
                quote_id=quote_id,
                notes=notes,
            ))
            on_commit(
                db, emit, STOCK_ADJUSTED, "inventory",
                item_kind=kind.value, item_id=item_id, delta=delta,
                stock_level=level, reason=reason.value, quote_id=quote_id,
            )
        log.info(f"Stock {kind.value} #{item_id} {delta:+g} -> {level:g} ({reason.value})")
        return level

    def adjust_filament_stock(self, db: Session, filament_id: int, delta_grams: float,
                              reason, quote_id: Optional[int] = None,
                              notes: Optional[str] = None) -> float:
        return self._adjust(db, StockItemKind.FILAMENT, filament_id, float(delta_grams),
                            reason, quote_id, notes)

    def adjust_accessory_stock(self, db: Session, accessory_id: int, delta_units: int,
                               reason, quote_id: Optional[int] = None,
                               notes: Optional[str] = None) -> int:
        if int(delta_units) != delta_units:
            raise ValidationFailed("Accessory stock moves in whole units", delta=delta_units)
        return int(self._adjust(db, StockItemKind.ACCESSORY, accessory_id, int(delta_units),
                                reason, quote_id, notes))

    def set_stock_level(self, db: Session, kind: StockItemKind, item_id: int,
                        new_level, notes: Optional[str] = None):
        """Direct edit of a stock level, recorded as a manual movement."""
        model = _MODELS[kind]
        with unit_of_work(db):
            current = db.execute(select(model.stock_level).where(model.id == item_id)).scalar_one_or_none()
            if current is None:
                raise ReferenceNotFound(f"{kind.value.capitalize()} #{item_id} does not exist")
            delta = new_level - current
            if delta:
                self._adjust(db, kind, item_id, delta, StockMovementReason.MANUAL, notes=notes)
        return new_level

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------

    def receive_filament(self, db: Session, name: str, color: Optional[str],
                         grams: float, amount: float,
                         material: Optional[str] = None) -> Filament:
        """Add purchased filament to stock.

        An existing filament with the same name and color gets its cost_per_kg
        replaced by the weighted average of the stock on hand and the purchase.
        Otherwise a new filament is created priced at the purchase.
        """
        if grams <= 0 or amount <= 0:
            raise ValidationFailed("A filament purchase needs grams > 0 and amount > 0")

        with unit_of_work(db):
            filament = (
                db.query(Filament)
                .filter(Filament.name == name, Filament.color == color)
                .order_by(Filament.id)
                .first()
            )
            if filament is None:
                filament = Filament(
                    name=name,
                    color=color,
                    material=material,
                    stock_level=0.0,
                    cost_per_kg=amount / grams * 1000,
                )
                db.add(filament)
                db.flush()
                log.info(f"Created filament #{filament.id} '{name}' ({color}) from purchase")
            else:
                total = Filament.stock_level + grams
                db.execute(
                    update(Filament)
                    .where(Filament.id == filament.id)
                    .values(cost_per_kg=case(
                        (total > 0,
                         ((Filament.cost_per_kg / 1000 * Filament.stock_level) + amount) / total * 1000),
                        else_=0.0,
                    ))
                    .execution_options(synchronize_session=False)
                )
                _expire_stock(db, Filament, filament.id, "cost_per_kg")
            self._adjust(
                db, StockItemKind.FILAMENT, filament.id, float(grams),
                StockMovementReason.PURCHASE, notes=f"Purchase of {grams:g} g for {amount:g}",
            )
        db.refresh(filament)
        return filament


inventory_store = InventoryService()
