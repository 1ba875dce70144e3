"""
PrintDesk - Domain errors and their HTTP mapping.

Services raise these; the app factory installs one exception handler that
turns them into JSON responses of the form {"detail": ..., "error": ...}.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

log = logging.getLogger("printdesk.api")


class PrintDeskError(Exception):
    """Base class for every error a service raises on purpose."""
    status_code = 400
    code = "error"

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context


class ValidationFailed(PrintDeskError):
    """Input is well-formed but not acceptable (no client, no lines, zero price)."""
    status_code = 422
    code = "validation_failed"


class ReferenceNotFound(PrintDeskError):
    """A line item or foreign id points at a record that does not exist."""
    status_code = 422
    code = "reference_not_found"


class NotFound(PrintDeskError):
    status_code = 404
    code = "not_found"


class InsufficientStock(PrintDeskError):
    """A debit would take a stock level below zero."""
    status_code = 409
    code = "insufficient_stock"


class RestoreConflict(PrintDeskError):
    """The original id of a trashed record is already in use."""
    status_code = 409
    code = "restore_conflict"


class PersistenceError(PrintDeskError):
    """The database rejected the commit; nothing was written."""
    status_code = 503
    code = "persistence_error"


class UpstreamUnavailable(PrintDeskError):
    """An external service we depend on failed or answered nonsense."""
    status_code = 502
    code = "upstream_unavailable"


async def _printdesk_error_handler(request: Request, exc: PrintDeskError):
    if exc.status_code >= 500:
        log.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        log.info(f"{request.method} {request.url.path} rejected ({exc.code}): {exc.message}")
    body = {"detail": exc.message, "error": exc.code}
    if exc.context:
        body["context"] = exc.context
    return JSONResponse(status_code=exc.status_code, content=body)


async def _unhandled_error_handler(request: Request, exc: Exception):
    log.error(f"{request.method} {request.url.path} crashed: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error", "error": "internal"})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain and fallback error handlers to the app."""
    app.add_exception_handler(PrintDeskError, _printdesk_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
