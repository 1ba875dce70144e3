# core/app.py - PrintDesk application factory
#
# Builds the FastAPI app: finds the feature packages under modules/, orders
# them so interface providers register before the modules that need them,
# then hands each one the app and the shared registry.
#
# main.py: from core.app import create_app; app = create_app()

import heapq
import hmac
import importlib
import logging
import pathlib
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

log = logging.getLogger("printdesk.api")

try:
    __version__ = version("printdesk")
except PackageNotFoundError:
    __version__ = "1.0.0"

MODULES_DIR = pathlib.Path(__file__).resolve().parent.parent / "modules"

# Paths the API key check never guards.
_OPEN_API_PREFIXES = ("/api/v1/docs", "/api/v1/redoc", "/api/v1/openapi.json")


def discover_module_packages() -> list[str]:
    """Dotted names of every feature package under modules/ that declares a MODULE_ID."""
    packages = []
    for candidate in sorted(p for p in MODULES_DIR.iterdir() if (p / "__init__.py").is_file()):
        dotted = f"modules.{candidate.name}"
        try:
            manifest = importlib.import_module(dotted)
        except ImportError as exc:
            log.warning(f"Ignoring {dotted}: import failed ({exc})")
            continue
        if getattr(manifest, "MODULE_ID", None):
            packages.append(dotted)
    return packages


def module_load_order(packages: list[str]) -> list[str]:
    """Order packages so each one comes after the providers of its REQUIRES.

    Ties break alphabetically. Packages caught in a cycle, or needing an
    interface nobody implements, are appended last in their given order.
    """
    manifests = {name: importlib.import_module(name) for name in packages}
    provider_of = {
        iface: name
        for name, manifest in manifests.items()
        for iface in getattr(manifest, "IMPLEMENTS", [])
    }

    waiting_on: dict[str, set[str]] = {}
    for name, manifest in manifests.items():
        waiting_on[name] = {
            provider_of[iface]
            for iface in getattr(manifest, "REQUIRES", [])
            if provider_of.get(iface, name) != name
        }

    ready = [name for name, deps in waiting_on.items() if not deps]
    heapq.heapify(ready)
    order: list[str] = []
    while ready:
        name = heapq.heappop(ready)
        order.append(name)
        for other, deps in waiting_on.items():
            if name in deps:
                deps.discard(name)
                if not deps:
                    heapq.heappush(ready, other)

    stuck = [name for name in packages if name not in order]
    if stuck:
        log.warning(f"Unresolved module dependencies, loading last: {stuck}")
    return order + stuck


def _add_cors(app: FastAPI, origins_setting: str) -> None:
    origins = [o.strip() for o in origins_setting.split(",") if o.strip()]
    if "*" in origins:
        # Browsers refuse a wildcard origin on credentialed requests.
        log.warning("Ignoring CORS_ORIGINS='*'; list the allowed origins explicitly")
        origins = []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "X-API-Key", "Accept"],
    )


def _add_api_key_guard(app: FastAPI) -> None:
    from core.config import settings

    @app.middleware("http")
    async def require_api_key(request: Request, call_next):
        """Reject /api/* calls without the configured X-API-Key."""
        path = request.url.path
        guarded = (
            bool(settings.api_key)
            and path.startswith("/api/")
            and not path.startswith(_OPEN_API_PREFIXES)
            and request.method != "OPTIONS"
        )
        if guarded:
            supplied = request.headers.get("X-API-Key", "")
            if not hmac.compare_digest(supplied, settings.api_key):
                return JSONResponse(status_code=401, content={"detail": "Invalid or missing API key"})
        return await call_next(request)


def create_app() -> FastAPI:
    """Build the PrintDesk application.

    Module routers and registry providers are wired up here, at build time;
    table creation and the provider check run in the lifespan hook.
    """
    from core.config import settings
    from core.db import engine, init_db
    from core.errors import register_exception_handlers
    from core.registry import registry

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    packages = module_load_order(discover_module_packages())
    log.info(f"Loading modules: {', '.join(p.rsplit('.', 1)[-1] for p in packages)}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db()
        registry.validate_dependencies()
        if not settings.api_key:
            log.warning("API_KEY unset: /api routes accept unauthenticated requests")
        log.info(f"Stock restore policy: {settings.stock_restore_policy.value}")
        yield

    app = FastAPI(
        title="PrintDesk",
        description="Quotes, inventory and expenses for a 3D printing business",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    # Starlette runs the last-added middleware first.
    _add_cors(app, settings.cors_origins)
    _add_api_key_guard(app)
    register_exception_handlers(app)

    @app.get("/health", tags=["System"])
    def health():
        """Liveness plus a database round trip."""
        database = "ok"
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as exc:
            log.error(f"Health check could not reach the database: {exc}")
            database = "unavailable"
        return {"status": "ok", "version": __version__, "database": database}

    for name in packages:
        manifest = importlib.import_module(name)
        registry.record_requires(manifest.MODULE_ID, getattr(manifest, "REQUIRES", []))
        manifest.register(app, registry)
        log.debug(f"Registered {manifest.MODULE_ID}")

    return app
