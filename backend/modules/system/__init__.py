MODULE_ID = "system"
MODULE_VERSION = "1.0.0"
MODULE_DESCRIPTION = "Cost settings used by pricing, and company metadata"

ROUTES = [
    "system.routes_settings",
]

TABLES = [
    "system_config",
    "audit_logs",
]

PUBLISHES = []

SUBSCRIBES = []

IMPLEMENTS = ["SettingsProvider"]

REQUIRES = []

DAEMONS = []


def register(app, registry) -> None:
    """Register the system module routes and the SettingsProvider."""
    from modules.system import routes_settings
    from modules.system.services import settings_provider

    registry.register_provider("SettingsProvider", settings_provider)

    app.include_router(routes_settings.router, prefix="/api")
    app.include_router(routes_settings.router, prefix="/api/v1")
