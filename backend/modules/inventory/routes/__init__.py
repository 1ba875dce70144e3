"""Inventory routes package - assembles all sub-routers."""

from fastapi import APIRouter
from .filaments import router as filaments_router
from .accessories import router as accessories_router
from .movements import router as movements_router

router = APIRouter()
router.include_router(filaments_router)
router.include_router(accessories_router)
router.include_router(movements_router)
