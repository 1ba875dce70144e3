"""Clients routes package."""

from fastapi import APIRouter
from .clients import router as clients_router

router = APIRouter()
router.include_router(clients_router)
