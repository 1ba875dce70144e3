"""Expenses routes package."""

from fastapi import APIRouter
from .expenses import router as expenses_router

router = APIRouter()
router.include_router(expenses_router)
