"""Reporting routes package - assembles all sub-routers."""

from fastapi import APIRouter
from .dashboard import router as dashboard_router
from .backup import router as backup_router

router = APIRouter()
router.include_router(dashboard_router)
router.include_router(backup_router)
