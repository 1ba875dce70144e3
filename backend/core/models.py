"""
core/models.py - Tables the core owns: system_config and audit_logs.
"""

from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from core.base import Base


class SystemConfig(Base):
    """JSON values by key: the cost settings and backup bookkeeping."""
    __tablename__ = "system_config"

    key = Column(String(100), primary_key=True)
    value = Column(JSON, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class AuditLog(Base):
    """One row per trash, restore, purge or stock reconciliation step."""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime, server_default=func.now(), index=True)
    # trash, restore, purge, stock_adjust, stock_reconcile_skipped
    action = Column(String(50), nullable=False)
    # collection name: quotes, filaments, ...
    entity_type = Column(String(50))
    entity_id = Column(Integer)
    details = Column(JSON)
