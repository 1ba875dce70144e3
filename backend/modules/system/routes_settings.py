"""Cost settings endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.db import get_db
from core.schemas import CostSettings, CostSettingsUpdate
from modules.system.services import settings_provider

router = APIRouter(tags=["Settings"])


@router.get("/settings", response_model=CostSettings)
def get_settings(db: Session = Depends(get_db)):
    """Current cost settings merged over defaults."""
    return settings_provider.get_settings(db)


@router.put("/settings", response_model=CostSettings)
def update_settings(data: CostSettingsUpdate, db: Session = Depends(get_db)):
    """Update cost settings. Omitted fields keep their stored value."""
    return settings_provider.update_settings(db, data)
