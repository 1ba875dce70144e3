"""
PrintDesk - Quote lifecycle tests.

Creation with stock debits, validation before any write, reads with the
joined client name, status changes and the events published after commit.

Run:
    pytest tests/test_quote_lifecycle.py -v
"""

import pytest

from core.base import QuoteStatus, StockMovementReason
from core.config import settings
from core.errors import InsufficientStock, NotFound, ReferenceNotFound, ValidationFailed
from core.event_bus import get_event_bus
from modules.inventory.models import Accessory, Filament, StockMovement
from modules.quotes.models import Quote
from modules.quotes.schemas import QuoteDraft, MaterialLine
from modules.quotes.services import quote_service
from helpers import (
    make_accessory, make_client, make_filament, quote_payload, stock_of,
    use_worked_example_settings,
)


@pytest.fixture()
def events():
    received = []
    bus = get_event_bus()
    bus.subscribe("*", received.append)
    yield received
    bus.unsubscribe("*", received.append)


@pytest.fixture()
def shop(db):
    """Worked-example settings, one client, two filaments, one accessory."""
    use_worked_example_settings(db)
    return {
        "client": make_client(db),
        "pla": make_filament(db, name="PLA", color="Black", stock_level=1000, cost_per_kg=25000),
        "petg": make_filament(db, name="PETG", color="White", stock_level=1000, cost_per_kg=30000),
        "keyring": make_accessory(db, name="Keyring", stock_level=10, cost=300),
    }


class TestCreateQuote:
    def test_worked_example_price(self, db, shop):
        quote = quote_service.create_quote(
            db, quote_payload(shop["client"].id, materials=[(shop["pla"].id, 150)], hours=8),
        )
        assert quote.price == 10400
        assert quote.status == QuoteStatus.PENDING
        assert quote.total_cost == pytest.approx(7930)
        assert quote.profit == pytest.approx(10400 - 7930)

    def test_debits_exactly_the_quoted_grams(self, db, shop):
        quote_service.create_quote(
            db, quote_payload(shop["client"].id, materials=[(shop["pla"].id, 150)]),
        )
        assert stock_of(db, Filament, shop["pla"].id) == 850
        assert stock_of(db, Filament, shop["petg"].id) == 1000

    def test_debits_accessories_by_quantity(self, db, shop):
        quote = quote_service.create_quote(
            db, quote_payload(shop["client"].id, accessories=[(shop["keyring"].id, 3)], hours=1),
        )
        assert stock_of(db, Accessory, shop["keyring"].id) == 7
        assert quote.accessory_cost == 900

    def test_writes_one_movement_per_line(self, db, shop):
        quote = quote_service.create_quote(db, quote_payload(
            shop["client"].id,
            materials=[(shop["pla"].id, 100), (shop["petg"].id, 50)],
            accessories=[(shop["keyring"].id, 2)],
        ))
        movements = db.query(StockMovement).filter(StockMovement.quote_id == quote.id).all()
        assert len(movements) == 3
        assert {m.reason for m in movements} == {StockMovementReason.QUOTE_CREATED}

    def test_empty_lines_are_not_stored(self, db, shop):
        quote = quote_service.create_quote(db, quote_payload(
            shop["client"].id, materials=[(shop["pla"].id, 100), (shop["petg"].id, 0)],
        ))
        assert [(m.filament_id, m.grams) for m in quote.materials] == [(shop["pla"].id, 100)]

    def test_client_price_is_ignored(self, db, shop):
        quote = quote_service.create_quote(db, quote_payload(
            shop["client"].id, materials=[(shop["pla"].id, 150)], price=1,
        ))
        assert quote.price == 10400

    def test_price_uses_current_cost(self, db, shop):
        shop["pla"].cost_per_kg = 50000
        db.commit()
        quote = quote_service.create_quote(
            db, quote_payload(shop["client"].id, materials=[(shop["pla"].id, 100)], hours=0),
        )
        assert quote.material_cost == pytest.approx(5000)


class TestCreateQuoteRejections:
    def test_missing_client(self, db, shop):
        with pytest.raises(ValidationFailed):
            quote_service.create_quote(db, quote_payload(None, materials=[(shop["pla"].id, 10)]))

    def test_unknown_client(self, db, shop):
        with pytest.raises(ReferenceNotFound):
            quote_service.create_quote(db, quote_payload(999, materials=[(shop["pla"].id, 10)]))

    def test_empty_quote_without_print_time(self, db, shop):
        with pytest.raises(ValidationFailed):
            quote_service.create_quote(db, quote_payload(shop["client"].id, hours=0))
        assert db.query(Quote).count() == 0

    def test_zero_price(self, db, shop):
        free = make_filament(db, name="Sample", stock_level=100, cost_per_kg=0)
        with pytest.raises(ValidationFailed):
            quote_service.create_quote(db, quote_payload(shop["client"].id, materials=[(free.id, 10)], hours=0))
        assert stock_of(db, Filament, free.id) == 100

    def test_unknown_filament_writes_nothing(self, db, shop):
        with pytest.raises(ReferenceNotFound) as exc:
            quote_service.create_quote(db, quote_payload(
                shop["client"].id, materials=[(shop["pla"].id, 100), (404, 10)],
            ))
        assert exc.value.context["filament_ids"] == [404]
        assert db.query(Quote).count() == 0
        assert stock_of(db, Filament, shop["pla"].id) == 1000

    def test_unknown_filament_priced_at_zero_when_allowed(self, db, shop, monkeypatch):
        monkeypatch.setattr(settings, "reject_unknown_references", False)
        quote = quote_service.create_quote(db, quote_payload(
            shop["client"].id, materials=[(shop["pla"].id, 100), (404, 10)], hours=0,
        ))
        assert quote.material_cost == pytest.approx(2500)
        assert stock_of(db, Filament, shop["pla"].id) == 900

    def test_insufficient_stock_rolls_back_every_line(self, db, shop):
        with pytest.raises(InsufficientStock):
            quote_service.create_quote(db, quote_payload(
                shop["client"].id, materials=[(shop["pla"].id, 100), (shop["petg"].id, 5000)],
            ))
        assert db.query(Quote).count() == 0
        assert db.query(StockMovement).count() == 0
        assert stock_of(db, Filament, shop["pla"].id) == 1000
        assert stock_of(db, Filament, shop["petg"].id) == 1000


class TestPreview:
    def test_preview_prices_without_writing(self, db, shop):
        breakdown = quote_service.preview(db, QuoteDraft(
            client_id=shop["client"].id,
            items=[MaterialLine(filament_id=shop["pla"].id, grams=150)],
            printing_time_hours=8,
        ))
        assert breakdown.price == 10400
        assert db.query(Quote).count() == 0
        assert stock_of(db, Filament, shop["pla"].id) == 1000

    def test_preview_reports_unknown_ids(self, db, shop):
        breakdown = quote_service.preview(db, QuoteDraft(
            items=[MaterialLine(filament_id=55, grams=10)], printing_time_hours=1,
        ))
        assert breakdown.unknown_filament_ids == [55]


class TestReadQuotes:
    def test_client_name_is_joined(self, db, shop):
        created = quote_service.create_quote(
            db, quote_payload(shop["client"].id, materials=[(shop["pla"].id, 10)]),
        )
        assert quote_service.get_quote(db, created.id).client_name == "Ana Gomez"

    def test_missing_client_reads_as_none(self, db, shop):
        created = quote_service.create_quote(
            db, quote_payload(shop["client"].id, materials=[(shop["pla"].id, 10)]),
        )
        db.delete(shop["client"])
        db.commit()
        assert quote_service.get_quote(db, created.id).client_name is None

    def test_unknown_quote(self, db):
        with pytest.raises(NotFound):
            quote_service.get_quote(db, 1)

    def test_list_newest_first_and_filter_by_status(self, db, shop):
        first = quote_service.create_quote(db, quote_payload(shop["client"].id, materials=[(shop["pla"].id, 10)]))
        second = quote_service.create_quote(db, quote_payload(shop["client"].id, materials=[(shop["pla"].id, 20)]))
        quote_service.update_quote_status(db, first.id, QuoteStatus.DELIVERED)

        assert [q.id for q in quote_service.list_quotes(db)] == [second.id, first.id]
        delivered = quote_service.list_quotes(db, status=QuoteStatus.DELIVERED)
        assert [q.id for q in delivered] == [first.id]


class TestStatusChange:
    def test_any_transition_and_no_stock_effect(self, db, shop):
        quote = quote_service.create_quote(db, quote_payload(shop["client"].id, materials=[(shop["pla"].id, 150)]))
        for status in (QuoteStatus.DELIVERED, QuoteStatus.PRINTING, QuoteStatus.PENDING):
            assert quote_service.update_quote_status(db, quote.id, status).status == status
        assert stock_of(db, Filament, shop["pla"].id) == 850

    def test_unknown_quote(self, db):
        with pytest.raises(NotFound):
            quote_service.update_quote_status(db, 42, QuoteStatus.PRINTING)


class TestEvents:
    def test_created_quote_publishes_after_commit(self, db, shop, events):
        quote = quote_service.create_quote(db, quote_payload(shop["client"].id, materials=[(shop["pla"].id, 150)]))
        types = [e.event_type for e in events]
        assert "quote.created" in types
        assert types.count("inventory.stock_adjusted") == 1
        created = next(e for e in events if e.event_type == "quote.created")
        assert created.data["quote_id"] == quote.id
        assert created.data["price"] == 10400

    def test_failed_create_publishes_nothing(self, db, shop, events):
        with pytest.raises(InsufficientStock):
            quote_service.create_quote(db, quote_payload(
                shop["client"].id, materials=[(shop["pla"].id, 100), (shop["petg"].id, 5000)],
            ))
        assert events == []

    def test_status_change_event(self, db, shop, events):
        quote = quote_service.create_quote(db, quote_payload(shop["client"].id, materials=[(shop["pla"].id, 1)]))
        events.clear()
        quote_service.update_quote_status(db, quote.id, QuoteStatus.PRINTING)
        assert [(e.event_type, e.data["old_status"], e.data["new_status"]) for e in events] == [
            ("quote.status_changed", "pending", "printing"),
        ]
