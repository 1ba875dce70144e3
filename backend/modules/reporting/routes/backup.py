"""JSON backup export and reminder status."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from core.db import get_db
from modules.reporting.services import backup_status, build_backup

router = APIRouter(tags=["Backup"])


@router.get("/backup")
def export_backup(db: Session = Depends(get_db)):
    """Download all collections as one JSON document."""
    now = datetime.now(timezone.utc)
    filename = f"printdesk-backup-{now.strftime('%Y%m%d-%H%M%S')}.json"
    return JSONResponse(
        content=build_backup(db, now=now),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/backup/status")
def get_backup_status(db: Session = Depends(get_db)):
    return backup_status(db)
