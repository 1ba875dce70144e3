"""
PrintDesk - HTTP API tests.

Drives the application through FastAPI's TestClient: settings, clients,
the full quote flow through trash and back, expenses, the dashboard and
the backup export.

Run:
    pytest tests/test_api.py -v
"""

import pytest

from core.config import settings
from core.models import AuditLog

WORKED_SETTINGS = {
    "machine_cost": 500,
    "electricity_cost": 150,
    "printer_consumption_watts": 150,
    "profit_margin": 30,
}


def _create(client, path, payload):
    r = client.post(path, json=payload)
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture()
def stocked(client):
    """Worked-example settings, a client, a filament and an accessory, via the API."""
    assert client.put("/api/settings", json=WORKED_SETTINGS).status_code == 200
    return {
        "client": _create(client, "/api/clients", {"name": "Ana Gomez", "email": "ana@example.com"}),
        "filament": _create(client, "/api/filaments", {
            "name": "PLA", "color": "Black", "stock_level": 1000, "cost_per_kg": 25000,
        }),
        "accessory": _create(client, "/api/accessories", {"name": "Keyring", "stock_level": 10, "cost": 300}),
    }


def _quote_body(stocked, grams=150, quantity=0, hours=8):
    items = [{"kind": "material", "filament_id": stocked["filament"]["id"], "grams": grams}]
    if quantity:
        items.append({"kind": "accessory", "accessory_id": stocked["accessory"]["id"], "quantity": quantity})
    return {"client_id": stocked["client"]["id"], "items": items, "printing_time_hours": hours}


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "ok"
        assert body["database"] == "ok"
        assert "version" in body


class TestSettings:
    def test_defaults(self, client):
        r = client.get("/api/settings")
        assert r.status_code == 200
        assert r.json()["currency"] == "ARS$"
        assert r.json()["profit_margin"] == 30

    def test_partial_update_keeps_other_fields(self, client):
        client.put("/api/settings", json={"profit_margin": 45, "company_name": "Capa 3D"})
        r = client.put("/api/v1/settings", json={"currency": "USD"})
        body = r.json()
        assert (body["profit_margin"], body["company_name"], body["currency"]) == (45, "Capa 3D", "USD")

    def test_negative_values_are_rejected(self, client):
        r = client.put("/api/settings", json={"machine_cost": -1})
        assert r.status_code == 422
        assert client.get("/api/settings").json()["machine_cost"] == 0.5


class TestClients:
    def test_crud_and_search(self, client):
        ana = _create(client, "/api/clients", {"name": "Ana"})
        _create(client, "/api/v1/clients", {"name": "Bruno", "email": "bruno@shop.test"})

        assert [c["name"] for c in client.get("/api/clients").json()] == ["Ana", "Bruno"]
        assert [c["name"] for c in client.get("/api/clients", params={"search": "shop"}).json()] == ["Bruno"]

        r = client.patch(f"/api/clients/{ana['id']}", json={"phone": "555-0101"})
        assert r.json()["phone"] == "555-0101"

        r = client.delete(f"/api/clients/{ana['id']}")
        assert r.json()["status"] == "trashed"
        assert client.get(f"/api/clients/{ana['id']}").status_code == 404

    def test_missing_client_is_404(self, client):
        r = client.get("/api/clients/77")
        assert r.status_code == 404
        assert r.json()["error"] == "not_found"


class TestQuoteFlow:
    def test_preview_then_create(self, client, stocked):
        r = client.post("/api/quotes/preview", json=_quote_body(stocked))
        assert r.status_code == 200
        assert r.json()["price"] == 10400
        assert client.get(f"/api/filaments/{stocked['filament']['id']}").json()["stock_level"] == 1000

        r = client.post("/api/quotes", json={**_quote_body(stocked), "price": 5})
        assert r.status_code == 201
        quote = r.json()
        assert quote["price"] == 10400
        assert quote["status"] == "pending"
        assert quote["client_name"] == "Ana Gomez"
        assert client.get(f"/api/filaments/{stocked['filament']['id']}").json()["stock_level"] == 850

    def test_trash_restore_and_purge(self, client, stocked):
        quote = client.post("/api/quotes", json=_quote_body(stocked, quantity=2)).json()
        filament_url = f"/api/filaments/{stocked['filament']['id']}"

        r = client.delete(f"/api/quotes/{quote['id']}")
        assert r.json()["stock_reconciled"] is True
        trash_id = r.json()["trash_id"]
        assert client.get(filament_url).json()["stock_level"] == 1000

        listed = client.get("/api/trash", params={"collection": "quotes"}).json()
        assert [(i["id"], i["original_id"]) for i in listed] == [(trash_id, quote["id"])]

        r = client.post(f"/api/trash/{trash_id}/restore")
        assert r.json()["status"] == "restored"
        assert client.get(f"/api/quotes/{quote['id']}").json() == quote
        assert client.get(filament_url).json()["stock_level"] == 850

        trash_id = client.delete(f"/api/quotes/{quote['id']}").json()["trash_id"]
        r = client.delete(f"/api/trash/{trash_id}")
        assert r.json()["status"] == "purged"
        assert client.get("/api/trash").json() == []
        assert client.get(filament_url).json()["stock_level"] == 1000

    def test_status_change(self, client, stocked):
        quote = client.post("/api/quotes", json=_quote_body(stocked)).json()
        r = client.patch(f"/api/quotes/{quote['id']}/status", json={"status": "delivered"})
        assert r.json()["status"] == "delivered"
        assert client.patch(f"/api/quotes/{quote['id']}/status", json={"status": "lost"}).status_code == 422

    def test_insufficient_stock_is_409(self, client, stocked):
        r = client.post("/api/quotes", json=_quote_body(stocked, grams=5000))
        assert r.status_code == 409
        assert r.json()["error"] == "insufficient_stock"
        assert client.get("/api/quotes").json() == []

    def test_unknown_filament_is_422(self, client, stocked):
        body = _quote_body(stocked)
        body["items"].append({"kind": "material", "filament_id": 999, "grams": 10})
        r = client.post("/api/quotes", json=body)
        assert r.status_code == 422
        assert r.json()["error"] == "reference_not_found"

    def test_oversized_inputs_are_422_not_500(self, client, stocked):
        body = _quote_body(stocked)
        body["items"][0]["grams"] = 1e308
        r = client.post("/api/quotes/preview", json=body)
        assert r.status_code == 422

        client.put("/api/settings", json={"machine_cost": 1e300})
        for path in ("/api/quotes/preview", "/api/quotes"):
            r = client.post(path, json=_quote_body(stocked))
            assert r.status_code == 422
            assert r.json()["error"] == "validation_failed"
        assert client.get("/api/quotes").json() == []
        assert client.get(f"/api/filaments/{stocked['filament']['id']}").json()["stock_level"] == 1000

    def test_unknown_quote_is_404(self, client):
        assert client.get("/api/quotes/1").status_code == 404
        assert client.delete("/api/quotes/1").status_code == 404


class TestInventoryRoutes:
    def test_adjust_and_movements(self, client, stocked):
        accessory_id = stocked["accessory"]["id"]
        r = client.post(f"/api/accessories/{accessory_id}/adjust", json={"delta": -4, "notes": "damaged"})
        assert r.status_code == 200
        assert r.json()["stock_level"] == 6

        movements = client.get("/api/stock-movements", params={"item_kind": "accessory"}).json()
        assert [(m["delta"], m["reason"]) for m in movements] == [(-4, "manual")]

    def test_adjust_is_audited(self, client, db, stocked):
        accessory_id = stocked["accessory"]["id"]
        client.post(f"/api/accessories/{accessory_id}/adjust", json={"delta": 3, "notes": "restock"})
        entry = db.query(AuditLog).filter(AuditLog.action == "stock_adjust").one()
        assert (entry.entity_type, entry.entity_id) == ("accessories", accessory_id)
        assert entry.details == {"delta": 3, "stock_after": 13, "notes": "restock"}
        assert entry.created_at is not None

    def test_adjust_below_zero_is_409(self, client, stocked):
        r = client.post(f"/api/filaments/{stocked['filament']['id']}/adjust", json={"delta": -2000})
        assert r.status_code == 409


class TestExpenses:
    def test_expense_and_filament_purchase(self, client):
        _create(client, "/api/expenses", {"description": "Nozzles", "amount": 3500})
        purchase = _create(client, "/api/expenses/filament-purchase", {
            "name": "PETG", "color": "Blue", "grams": 1000, "amount": 20000,
        })
        assert purchase["category"] == "filament"
        assert purchase["description"] == "Purchase of 1000g of filament PETG Blue"

        filaments = client.get("/api/filaments").json()
        assert [(f["name"], f["stock_level"], f["cost_per_kg"]) for f in filaments] == [("PETG", 1000, 20000)]
        assert len(client.get("/api/expenses").json()) == 2
        assert len(client.get("/api/expenses", params={"category": "filament"}).json()) == 1

    def test_invalid_expense(self, client):
        assert client.post("/api/expenses", json={"description": "", "amount": 10}).status_code == 422
        assert client.post("/api/expenses", json={"description": "Tape", "amount": 0}).status_code == 422


class TestReporting:
    def test_dashboard_counts_delivered_quotes(self, client, stocked):
        delivered = client.post("/api/quotes", json=_quote_body(stocked)).json()
        client.post("/api/quotes", json=_quote_body(stocked, grams=10, hours=1))
        client.patch(f"/api/quotes/{delivered['id']}/status", json={"status": "delivered"})
        _create(client, "/api/expenses", {"description": "Rent", "amount": 1000})

        summary = client.get("/api/dashboard/summary").json()
        assert summary["revenue"] == 10400
        assert summary["production_cost"] == pytest.approx(7930)
        assert summary["expenses"] == 1000
        assert summary["net_profit"] == pytest.approx(10400 - 7930 - 1000)
        assert summary["quotes_by_status"] == {"pending": 1, "printing": 0, "delivered": 1}

    def test_backup_export_resets_reminder(self, client, stocked):
        assert client.get("/api/backup/status").json()["due"] is True

        r = client.get("/api/backup")
        assert r.status_code == 200
        assert "attachment" in r.headers["content-disposition"]
        backup = r.json()
        assert [c["name"] for c in backup["clients"]] == ["Ana Gomez"]
        assert backup["settings"]["machine_cost"] == 500

        status = client.get("/api/backup/status").json()
        assert status["due"] is False
        assert status["last_backup_at"] is not None


class TestApiKey:
    def test_key_required_when_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "api_key", "s3cret")
        assert client.get("/api/clients").status_code == 401
        assert client.get("/api/clients", headers={"X-API-Key": "wrong"}).status_code == 401
        assert client.get("/api/clients", headers={"X-API-Key": "s3cret"}).status_code == 200
        assert client.get("/health").status_code == 200
