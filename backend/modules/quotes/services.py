"""
modules/quotes/services.py - Quote lifecycle.

Creating a quote prices it from the stored costs and takes its materials
and accessories out of stock in the same transaction. Deleting goes through
the trash, where the quote archive adapter decides when consumed stock is
credited back.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from core.base import QuoteStatus, StockMovementReason, TrashCollection
from core.config import settings
from core.db import unit_of_work, on_commit
from core.errors import NotFound, ReferenceNotFound, ValidationFailed
from core.event_bus import emit
from core.events import QUOTE_CREATED, QUOTE_STATUS_CHANGED
from core.registry import registry
from modules.clients.models import Client
from modules.quotes.models import Quote, QuoteAccessory, QuoteMaterial
from modules.quotes.pricing import compute_price, split_lines
from modules.quotes.schemas import (
    QuoteBreakdown, QuoteCreate, QuoteDraft, QuoteRecord, QuoteResponse,
)

log = logging.getLogger("printdesk.quotes")


def _client_names(db: Session, client_ids) -> dict[int, str]:
    ids = {cid for cid in client_ids if cid is not None}
    if not ids:
        return {}
    rows = db.query(Client.id, Client.name).filter(Client.id.in_(ids)).all()
    return {row.id: row.name for row in rows}


def to_response(quote: Quote, client_names: dict[int, str]) -> QuoteResponse:
    record = QuoteRecord.model_validate(quote)
    total_cost = quote.total_cost
    return QuoteResponse(
        **record.model_dump(),
        client_name=client_names.get(quote.client_id),
        total_cost=total_cost,
        profit=(quote.price or 0) - total_cost,
    )


class QuoteService:

    def _price(self, db: Session, materials, accessories, hours: float) -> QuoteBreakdown:
        inventory = registry.require("InventoryStore")
        cost_settings = registry.require("SettingsProvider").get_settings(db)
        return compute_price(
            materials,
            accessories,
            hours,
            cost_settings,
            inventory.filament_costs(db, [m.filament_id for m in materials]),
            inventory.accessory_costs(db, [a.accessory_id for a in accessories]),
        )

    def preview(self, db: Session, draft: QuoteDraft) -> QuoteBreakdown:
        """Price a draft without writing anything."""
        materials, accessories = split_lines(draft.items)
        return self._price(db, materials, accessories, draft.printing_time_hours)

    def create_quote(self, db: Session, data: QuoteCreate) -> QuoteResponse:
        """Persist a pending quote and debit its stock, or change nothing."""
        inventory = registry.require("InventoryStore")
        materials, accessories = split_lines(data.items)

        with unit_of_work(db):
            if data.client_id is None:
                raise ValidationFailed("A quote needs a client")
            if db.get(Client, data.client_id) is None:
                raise ReferenceNotFound("Client does not exist", client_id=data.client_id)
            if not materials and not accessories and data.printing_time_hours <= 0:
                raise ValidationFailed("A quote needs at least one material, accessory or print time")

            breakdown = self._price(db, materials, accessories, data.printing_time_hours)
            unknown_f = breakdown.unknown_filament_ids
            unknown_a = breakdown.unknown_accessory_ids
            if (unknown_f or unknown_a) and settings.reject_unknown_references:
                raise ReferenceNotFound(
                    "Quote references filaments or accessories that do not exist",
                    filament_ids=unknown_f, accessory_ids=unknown_a,
                )
            if breakdown.price <= 0:
                raise ValidationFailed("The quote has no cost, so its price would be zero")
            if data.price is not None and data.price != breakdown.price:
                log.info(f"Ignoring client price {data.price:g}, repriced at {breakdown.price:g}")

            quote = Quote(
                client_id=data.client_id,
                description=data.description,
                printing_time_hours=data.printing_time_hours,
                price=breakdown.price,
                status=QuoteStatus.PENDING,
                material_cost=breakdown.material_cost,
                accessory_cost=breakdown.accessory_cost,
                machine_cost=breakdown.machine_cost,
                electricity_cost=breakdown.electricity_cost,
                materials=[QuoteMaterial(filament_id=m.filament_id, grams=m.grams) for m in materials],
                accessories=[QuoteAccessory(accessory_id=a.accessory_id, quantity=a.quantity) for a in accessories],
            )
            if data.date:
                quote.date = data.date
            db.add(quote)
            db.flush()
            quote_id = quote.id

            for line in materials:
                if line.filament_id in unknown_f:
                    continue
                inventory.adjust_filament_stock(
                    db, line.filament_id, -line.grams, StockMovementReason.QUOTE_CREATED, quote_id=quote_id,
                )
            for line in accessories:
                if line.accessory_id in unknown_a:
                    continue
                inventory.adjust_accessory_stock(
                    db, line.accessory_id, -line.quantity, StockMovementReason.QUOTE_CREATED, quote_id=quote_id,
                )

            on_commit(
                db, emit, QUOTE_CREATED, "quotes",
                quote_id=quote_id, client_id=data.client_id, price=breakdown.price,
            )

        log.info(
            f"Created quote #{quote_id} for client #{data.client_id}: "
            f"{breakdown.price:g} {breakdown.currency} "
            f"({len(materials)} materials, {len(accessories)} accessories)"
        )
        return self.get_quote(db, quote_id)

    def _get_or_404(self, db: Session, quote_id: int) -> Quote:
        quote = db.get(Quote, quote_id)
        if quote is None:
            raise NotFound("Quote not found", quote_id=quote_id)
        return quote

    def get_quote(self, db: Session, quote_id: int) -> QuoteResponse:
        quote = self._get_or_404(db, quote_id)
        return to_response(quote, _client_names(db, [quote.client_id]))

    def list_quotes(self, db: Session, status: Optional[QuoteStatus] = None,
                    client_id: Optional[int] = None) -> list[QuoteResponse]:
        """Quotes newest first."""
        query = db.query(Quote).options(
            selectinload(Quote.materials), selectinload(Quote.accessories),
        )
        if status:
            query = query.filter(Quote.status == status)
        if client_id is not None:
            query = query.filter(Quote.client_id == client_id)
        quotes = query.order_by(Quote.date.desc(), Quote.id.desc()).all()
        names = _client_names(db, [q.client_id for q in quotes])
        return [to_response(q, names) for q in quotes]

    def update_quote_status(self, db: Session, quote_id: int, status: QuoteStatus) -> QuoteResponse:
        """Move a quote to any status. Stock is not touched."""
        status = QuoteStatus(status)
        with unit_of_work(db):
            quote = self._get_or_404(db, quote_id)
            old_status = QuoteStatus(quote.status)
            quote.status = status
            on_commit(
                db, emit, QUOTE_STATUS_CHANGED, "quotes",
                quote_id=quote_id, old_status=old_status.value, new_status=status.value,
            )
        log.info(f"Quote #{quote_id} status {old_status.value} -> {status.value}")
        return self.get_quote(db, quote_id)

    def delete_quote(self, db: Session, quote_id: int):
        """Soft delete. Returns the trash item."""
        return registry.require("TrashBin").trash(db, TrashCollection.QUOTES, quote_id)


quote_service = QuoteService()
