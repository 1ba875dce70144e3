MODULE_ID = "quotes"
MODULE_VERSION = "1.0.0"
MODULE_DESCRIPTION = "Quote pricing, lifecycle with stock reconciliation, and pricing advice"

ROUTES = [
    "quotes.routes",
]

TABLES = [
    "quotes",
    "quote_materials",
    "quote_accessories",
]

PUBLISHES = [
    "quote.created",
    "quote.status_changed",
]

SUBSCRIBES = []

IMPLEMENTS = []

REQUIRES = ["InventoryStore", "SettingsProvider", "TrashBin"]

DAEMONS = []


def register(app, registry) -> None:
    """Register the quotes module routes and trash adapter."""
    from modules.quotes import routes
    from modules.quotes.archive import QuoteArchiveAdapter

    registry.require("TrashBin").register_adapter(QuoteArchiveAdapter())

    app.include_router(routes.router, prefix="/api")
    app.include_router(routes.router, prefix="/api/v1")
