MODULE_ID = "clients"
MODULE_VERSION = "1.0.0"
MODULE_DESCRIPTION = "Client records referenced by quotes"

ROUTES = [
    "clients.routes",
]

TABLES = [
    "clients",
]

PUBLISHES = []

SUBSCRIBES = []

IMPLEMENTS = []

REQUIRES = ["TrashBin"]

DAEMONS = []


def register(app, registry) -> None:
    """Register the clients module routes and trash adapter."""
    from modules.clients import routes
    from modules.clients.archive import ClientArchiveAdapter

    registry.require("TrashBin").register_adapter(ClientArchiveAdapter())

    app.include_router(routes.router, prefix="/api")
    app.include_router(routes.router, prefix="/api/v1")
