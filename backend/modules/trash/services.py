"""
modules/trash/services.py - Soft delete, restore and purge.

Every deletion in the application goes through here. The trash does not
know about quotes or stock: collection-specific work (loading the live row,
writing it back, crediting consumed stock) lives in the ArchiveAdapter each
module registers.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from core.base import TrashCollection
from core.db import unit_of_work, on_commit
from core.dependencies import log_audit
from core.errors import NotFound, RestoreConflict, ValidationFailed
from core.event_bus import emit
from core.events import TRASH_ARCHIVED, TRASH_RESTORED, TRASH_PURGED
from core.interfaces.trash_bin import ArchiveAdapter, TrashBin
from modules.trash.models import TrashItem
from modules.trash.schemas import Archived

log = logging.getLogger("printdesk.trash")


class TrashService(TrashBin):

    def __init__(self):
        self._adapters: dict[TrashCollection, ArchiveAdapter] = {}

    def register_adapter(self, adapter: ArchiveAdapter) -> None:
        self._adapters[TrashCollection(adapter.collection)] = adapter
        log.debug(f"Trash adapter registered for '{adapter.collection.value}'")

    def adapter_for(self, collection) -> ArchiveAdapter:
        adapter = self._adapters.get(TrashCollection(collection))
        if adapter is None:
            raise ValidationFailed(f"Records of '{TrashCollection(collection).value}' cannot be trashed")
        return adapter

    def _get_item(self, db: Session, trash_id: int) -> TrashItem:
        item = db.get(TrashItem, trash_id)
        if item is None:
            raise NotFound("Trash item not found", trash_id=trash_id)
        return item

    # ------------------------------------------------------------------

    def archive(self, db: Session, collection, original_id: int,
                snapshot: dict, stock_credit: Optional[list[dict]] = None) -> int:
        collection = TrashCollection(collection)
        stock_reconciled = stock_credit is not None
        with unit_of_work(db):
            item = TrashItem(
                original_id=original_id,
                original_collection=collection,
                data=snapshot,
                stock_reconciled=stock_reconciled,
                stock_credit=stock_credit,
            )
            db.add(item)
            db.flush()
            trash_id = item.id
            on_commit(
                db, emit, TRASH_ARCHIVED, "trash",
                trash_id=trash_id,
                collection=collection.value,
                original_id=original_id,
                stock_reconciled=stock_reconciled,
            )
        return trash_id

    def trash(self, db: Session, collection, original_id: int) -> TrashItem:
        collection = TrashCollection(collection)
        adapter = self.adapter_for(collection)
        with unit_of_work(db):
            record = adapter.load(db, original_id)
            if record is None:
                raise NotFound(
                    f"{collection.value} record not found",
                    collection=collection.value, original_id=original_id,
                )
            data = adapter.snapshot(record)
            credit = adapter.on_archive(db, adapter.parse(data))
            reconciled = credit is not None
            adapter.remove(db, record)
            db.flush()
            trash_id = self.archive(db, collection, original_id, data, stock_credit=credit)
            log_audit(
                db, "trash", collection.value, original_id,
                details={"trash_id": trash_id, "stock_credit": credit},
                commit=False,
            )
        log.info(
            f"Trashed {collection.value} #{original_id} as trash item #{trash_id}"
            f"{' (stock credited)' if reconciled else ''}"
        )
        return self._get_item(db, trash_id)

    def restore(self, db: Session, trash_id: int):
        with unit_of_work(db):
            item = self._get_item(db, trash_id)
            collection = TrashCollection(item.original_collection)
            original_id = item.original_id
            adapter = self.adapter_for(collection)
            if adapter.load(db, original_id) is not None:
                raise RestoreConflict(
                    f"{collection.value} #{original_id} already exists",
                    collection=collection.value, original_id=original_id,
                )
            credit = item.stock_credit
            snapshot = adapter.parse(item.data)
            record = adapter.reinstate(db, original_id, snapshot)
            db.flush()
            adapter.on_restore(db, snapshot, credit)
            db.delete(item)
            log_audit(
                db, "restore", collection.value, original_id,
                details={"trash_id": trash_id, "stock_credit": credit},
                commit=False,
            )
            on_commit(
                db, emit, TRASH_RESTORED, "trash",
                trash_id=trash_id, collection=collection.value, original_id=original_id,
            )
        log.info(f"Restored {collection.value} #{original_id} from trash item #{trash_id}")
        return record

    def purge(self, db: Session, trash_id: int) -> None:
        with unit_of_work(db):
            item = self._get_item(db, trash_id)
            collection = TrashCollection(item.original_collection)
            original_id = item.original_id
            adapter = self._adapters.get(collection)
            if adapter is not None:
                adapter.on_purge(db, adapter.parse(item.data), item.stock_credit)
            else:
                log.warning(f"No trash adapter for '{collection.value}', purging trash item #{trash_id} as-is")
            db.delete(item)
            log_audit(
                db, "purge", collection.value, original_id,
                details={"trash_id": trash_id}, commit=False,
            )
            on_commit(
                db, emit, TRASH_PURGED, "trash",
                trash_id=trash_id, collection=collection.value, original_id=original_id,
            )
        log.info(f"Purged {collection.value} #{original_id} (trash item #{trash_id})")

    # ------------------------------------------------------------------

    def display_name(self, item: TrashItem) -> str:
        adapter = self._adapters.get(TrashCollection(item.original_collection))
        if adapter is None:
            data = item.data or {}
            return data.get("name") or data.get("description") or str(item.original_id)
        return adapter.display_name(adapter.parse(item.data), item.original_id)

    def list_trash(self, db: Session, collection=None) -> list[TrashItem]:
        query = db.query(TrashItem)
        if collection:
            query = query.filter(TrashItem.original_collection == TrashCollection(collection))
        return query.order_by(TrashItem.deleted_at.desc(), TrashItem.id.desc()).all()

    def get_archived(self, db: Session, trash_id: int) -> Archived:
        """A trash item with its snapshot parsed into the collection's schema."""
        item = self._get_item(db, trash_id)
        adapter = self.adapter_for(item.original_collection)
        return Archived[adapter.schema](
            id=item.id,
            original_id=item.original_id,
            original_collection=item.original_collection,
            deleted_at=item.deleted_at,
            stock_reconciled=item.stock_reconciled,
            stock_credit=item.stock_credit,
            data=adapter.parse(item.data),
        )


trash_bin = TrashService()
