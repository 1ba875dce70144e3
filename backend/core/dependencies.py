"""
PrintDesk - Audit logging shared by the services and routes.
"""

from typing import Optional

from sqlalchemy.orm import Session

from core.models import AuditLog


def log_audit(
    db: Session,
    action: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    details: Optional[dict] = None,
    commit: bool = True,
) -> AuditLog:
    """Append an AuditLog row describing a destructive or reconciling action.

    Pass commit=False from inside a unit_of_work so the entry is written
    (or discarded) together with the change it describes.
    """
    entry = AuditLog(action=action, entity_type=entity_type, entity_id=entity_id, details=details)
    db.add(entry)
    if commit:
        db.commit()
    return entry
