"""
modules/clients/models.py - ORM models for the clients domain.

Owns tables: clients
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func

from core.base import Base


class Client(Base):
    __tablename__ = "clients"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
