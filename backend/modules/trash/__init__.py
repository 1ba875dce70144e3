MODULE_ID = "trash"
MODULE_VERSION = "1.0.0"
MODULE_DESCRIPTION = "Soft delete with restore under the original id, and permanent purge"

ROUTES = [
    "trash.routes",
]

TABLES = [
    "trash_items",
]

PUBLISHES = [
    "trash.archived",
    "trash.restored",
    "trash.purged",
]

SUBSCRIBES = []

IMPLEMENTS = ["TrashBin"]

REQUIRES = []

DAEMONS = []


def register(app, registry) -> None:
    """Register the trash module routes and the TrashBin provider."""
    from modules.trash import routes
    from modules.trash.services import trash_bin

    registry.register_provider("TrashBin", trash_bin)

    app.include_router(routes.router, prefix="/api")
    app.include_router(routes.router, prefix="/api/v1")
