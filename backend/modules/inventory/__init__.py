MODULE_ID = "inventory"
MODULE_VERSION = "1.0.0"
MODULE_DESCRIPTION = "Filament and accessory stock with a movement ledger"

ROUTES = [
    "inventory.routes",
]

TABLES = [
    "filaments",
    "accessories",
    "stock_movements",
]

PUBLISHES = [
    "inventory.stock_adjusted",
]

SUBSCRIBES = []

IMPLEMENTS = ["InventoryStore"]

REQUIRES = ["TrashBin"]

DAEMONS = []


def register(app, registry) -> None:
    """Register the inventory module routes, provider and trash adapters."""
    from modules.inventory import routes
    from modules.inventory.archive import AccessoryArchiveAdapter, FilamentArchiveAdapter
    from modules.inventory.services import inventory_store

    registry.register_provider("InventoryStore", inventory_store)

    trash_bin = registry.require("TrashBin")
    trash_bin.register_adapter(FilamentArchiveAdapter())
    trash_bin.register_adapter(AccessoryArchiveAdapter())

    app.include_router(routes.router, prefix="/api")
    app.include_router(routes.router, prefix="/api/v1")
