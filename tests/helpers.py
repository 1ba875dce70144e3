"""
Shared test helpers for the PrintDesk test suite.

Small factories that write straight through the ORM so tests can set up
state without going through the code under test.
"""

from core.schemas import CostSettingsUpdate
from modules.clients.models import Client
from modules.inventory.models import Accessory, Filament
from modules.quotes.schemas import AccessoryLine, MaterialLine, QuoteCreate
from modules.system.services import settings_provider


def make_client(db, name="Ana Gomez", **fields):
    client = Client(name=name, **fields)
    db.add(client)
    db.commit()
    return client


def make_filament(db, name="PLA", color="Black", stock_level=1000.0, cost_per_kg=25000.0, **fields):
    filament = Filament(name=name, color=color, stock_level=stock_level, cost_per_kg=cost_per_kg, **fields)
    db.add(filament)
    db.commit()
    return filament


def make_accessory(db, name="Keyring", stock_level=10, cost=300.0):
    accessory = Accessory(name=name, stock_level=stock_level, cost=cost)
    db.add(accessory)
    db.commit()
    return accessory


def use_worked_example_settings(db):
    """500/h machine, 150 W at 150/kWh, 30 % margin."""
    return settings_provider.update_settings(db, CostSettingsUpdate(
        machine_cost=500,
        electricity_cost=150,
        printer_consumption_watts=150,
        profit_margin=30,
    ))


def quote_payload(client_id, materials=(), accessories=(), hours=8.0, **fields) -> QuoteCreate:
    """materials: (filament_id, grams) pairs; accessories: (accessory_id, quantity) pairs."""
    items = [MaterialLine(filament_id=f, grams=g) for f, g in materials]
    items += [AccessoryLine(accessory_id=a, quantity=q) for a, q in accessories]
    return QuoteCreate(client_id=client_id, items=items, printing_time_hours=hours, **fields)


def stock_of(db, model, item_id):
    """Stock level as stored, bypassing the session's identity map."""
    db.expire_all()
    return db.get(model, item_id).stock_level
