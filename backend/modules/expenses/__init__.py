MODULE_ID = "expenses"
MODULE_VERSION = "1.0.0"
MODULE_DESCRIPTION = "General expenses and filament purchases"

ROUTES = [
    "expenses.routes",
]

TABLES = [
    "expenses",
]

PUBLISHES = []

SUBSCRIBES = []

IMPLEMENTS = []

REQUIRES = ["InventoryStore", "TrashBin"]

DAEMONS = []


def register(app, registry) -> None:
    """Register the expenses module routes and trash adapter."""
    from modules.expenses import routes
    from modules.expenses.archive import ExpenseArchiveAdapter

    registry.require("TrashBin").register_adapter(ExpenseArchiveAdapter())

    app.include_router(routes.router, prefix="/api")
    app.include_router(routes.router, prefix="/api/v1")
