"""Quotes routes package."""

from fastapi import APIRouter
from .quotes import router as quotes_router
from .advisor import router as advisor_router

router = APIRouter()
router.include_router(quotes_router)
router.include_router(advisor_router)
