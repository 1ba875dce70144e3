"""
modules/quotes/archive.py - Trash adapter for quotes.

Applies the configured stock restore policy:

    policy          soft delete              restore              purge
    status_gated    credit if pending        re-debit if credited  -
    unconditional   always credit            re-debit if credited  -
    on_purge        -                        -                     credit if pending

The trash item keeps the lines a credit actually moved (stock_credit), so a
quote's consumption is credited at most once and a restore re-debits only
what was credited.
"""

import logging
from typing import Optional

from core.base import QuoteStatus, StockItemKind, StockMovementReason, StockRestorePolicy, TrashCollection
from core.config import settings
from core.dependencies import log_audit
from core.interfaces.trash_bin import ArchiveAdapter
from core.registry import registry
from modules.quotes.models import Quote, QuoteAccessory, QuoteMaterial
from modules.quotes.schemas import QuoteRecord

log = logging.getLogger("printdesk.quotes")


class QuoteArchiveAdapter(ArchiveAdapter[QuoteRecord]):
    collection = TrashCollection.QUOTES
    schema = QuoteRecord

    def load(self, db, original_id: int):
        return db.get(Quote, original_id)

    def remove(self, db, record) -> None:
        db.delete(record)

    def reinstate(self, db, original_id: int, snapshot: QuoteRecord):
        fields = snapshot.model_dump(exclude={"id", "materials", "accessories"})
        quote = Quote(
            id=original_id,
            **fields,
            materials=[QuoteMaterial(filament_id=m.filament_id, grams=m.grams) for m in snapshot.materials],
            accessories=[QuoteAccessory(accessory_id=a.accessory_id, quantity=a.quantity) for a in snapshot.accessories],
        )
        db.add(quote)
        return quote

    def display_name(self, snapshot: QuoteRecord, original_id: int) -> str:
        return snapshot.description or f"Quote #{original_id}"

    # ------------------------------------------------------------------

    @staticmethod
    def _lines(snapshot: QuoteRecord) -> list[dict]:
        lines = [
            {"kind": StockItemKind.FILAMENT.value, "item_id": m.filament_id, "amount": m.grams}
            for m in snapshot.materials
        ]
        lines += [
            {"kind": StockItemKind.ACCESSORY.value, "item_id": a.accessory_id, "amount": a.quantity}
            for a in snapshot.accessories
        ]
        return lines

    def _skip_missing(self, db, snapshot: QuoteRecord, line: dict, reason) -> None:
        log.warning(
            f"Quote #{snapshot.id}: {line['kind']} #{line['item_id']} no longer exists, "
            f"{line['amount']:g} not reconciled ({reason.value})"
        )
        log_audit(
            db, "stock_reconcile_skipped", "quotes", snapshot.id,
            details={
                "item_kind": line["kind"], "item_id": line["item_id"],
                "amount": line["amount"], "reason": reason.value,
            },
            commit=False,
        )

    def _move_stock(self, db, snapshot: QuoteRecord, lines: list[dict], sign: int,
                    reason: StockMovementReason) -> list[dict]:
        """Apply lines to stock (sign=+1 credits, sign=-1 debits) and return the ones moved.

        Lines whose filament or accessory no longer exists are skipped and audited.
        """
        inventory = registry.require("InventoryStore")
        moved = []
        for line in lines:
            if line["kind"] == StockItemKind.FILAMENT.value:
                exists, adjust = inventory.get_filament, inventory.adjust_filament_stock
            else:
                exists, adjust = inventory.get_accessory, inventory.adjust_accessory_stock
            if exists(db, line["item_id"]) is None:
                self._skip_missing(db, snapshot, line, reason)
                continue
            adjust(db, line["item_id"], sign * line["amount"], reason, quote_id=snapshot.id)
            moved.append(line)
        return moved

    def on_archive(self, db, snapshot: QuoteRecord) -> Optional[list[dict]]:
        policy = settings.stock_restore_policy
        if policy == StockRestorePolicy.ON_PURGE:
            return None
        if policy == StockRestorePolicy.STATUS_GATED and snapshot.status != QuoteStatus.PENDING:
            return None
        return self._move_stock(db, snapshot, self._lines(snapshot), +1, StockMovementReason.QUOTE_TRASHED)

    def on_restore(self, db, snapshot: QuoteRecord, stock_credit: Optional[list[dict]]) -> None:
        # Only what the soft delete actually credited is taken out again.
        if stock_credit:
            self._move_stock(db, snapshot, stock_credit, -1, StockMovementReason.QUOTE_RESTORED)

    def on_purge(self, db, snapshot: QuoteRecord, stock_credit: Optional[list[dict]]) -> None:
        if stock_credit is not None:
            return
        if (
            settings.stock_restore_policy == StockRestorePolicy.ON_PURGE
            and snapshot.status == QuoteStatus.PENDING
        ):
            self._move_stock(db, snapshot, self._lines(snapshot), +1, StockMovementReason.QUOTE_PURGED)
