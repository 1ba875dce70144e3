"""Dashboard totals."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.db import get_db
from modules.reporting.services import dashboard_summary

router = APIRouter(tags=["Dashboard"])


@router.get("/dashboard/summary")
def get_dashboard_summary(db: Session = Depends(get_db)):
    """Revenue, production cost, expenses and net profit."""
    return dashboard_summary(db)
