"""
core/schemas.py - Core/general Pydantic schemas.
"""

from typing import Optional
from pydantic import BaseModel, Field


class HealthCheck(BaseModel):
    status: str = "ok"
    version: str
    database: str


class CostSettings(BaseModel):
    """Cost and company configuration read by pricing on every calculation."""
    electricity_cost: float = Field(0.15, ge=0)          # currency per kWh
    machine_cost: float = Field(0.5, ge=0)               # currency per print hour
    printer_consumption_watts: float = Field(150, ge=0)
    profit_margin: float = Field(30, ge=0)               # percent
    currency: str = Field("ARS$", min_length=1)

    company_name: Optional[str] = None
    company_email: Optional[str] = None
    company_phone: Optional[str] = None
    company_address: Optional[str] = None

    backup_reminder_days: int = Field(7, ge=0)


class CostSettingsUpdate(BaseModel):
    electricity_cost: Optional[float] = Field(None, ge=0)
    machine_cost: Optional[float] = Field(None, ge=0)
    printer_consumption_watts: Optional[float] = Field(None, ge=0)
    profit_margin: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=1)
    company_name: Optional[str] = None
    company_email: Optional[str] = None
    company_phone: Optional[str] = None
    company_address: Optional[str] = None
    backup_reminder_days: Optional[int] = Field(None, ge=0)
