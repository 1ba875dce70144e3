"""
modules/quotes/schemas.py - Pydantic schemas for the quotes domain.
"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from core.base import QuoteStatus

# Upper bounds for a single quote
MAX_LINE_GRAMS = 1_000_000
MAX_LINE_QUANTITY = 100_000
MAX_PRINT_HOURS = 10_000


# ============== Line items ==============

class MaterialLine(BaseModel):
    kind: Literal["material"] = "material"
    filament_id: Optional[int] = None
    grams: float = Field(0.0, le=MAX_LINE_GRAMS, allow_inf_nan=False)


class AccessoryLine(BaseModel):
    kind: Literal["accessory"] = "accessory"
    accessory_id: Optional[int] = None
    quantity: int = Field(0, le=MAX_LINE_QUANTITY)


LineItem = Annotated[Union[MaterialLine, AccessoryLine], Field(discriminator="kind")]


# ============== Drafts ==============

class QuoteDraft(BaseModel):
    """What the quote form sends on every change to get a price."""
    client_id: Optional[int] = None
    description: Optional[str] = None
    items: list[LineItem] = Field(default_factory=list)
    printing_time_hours: float = Field(0.0, ge=0, le=MAX_PRINT_HOURS, allow_inf_nan=False)


class QuoteCreate(QuoteDraft):
    date: Optional[datetime] = None
    # Accepted for compatibility with older clients; the server always reprices.
    price: Optional[float] = None


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus


class QuoteBreakdown(BaseModel):
    material_cost: float
    accessory_cost: float
    machine_cost: float
    electricity_cost: float
    total_cost: float
    price: float
    currency: str
    unknown_filament_ids: list[int] = Field(default_factory=list)
    unknown_accessory_ids: list[int] = Field(default_factory=list)


# ============== Stored quotes ==============

class QuoteMaterialRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    filament_id: int
    grams: float


class QuoteAccessoryRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    accessory_id: int
    quantity: int


class QuoteRecord(BaseModel):
    """Every persisted field of a quote, lines included."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: Optional[int] = None
    description: Optional[str] = None
    printing_time_hours: float
    price: float
    status: QuoteStatus
    date: Optional[datetime] = None
    material_cost: float
    accessory_cost: float
    machine_cost: float
    electricity_cost: float
    materials: list[QuoteMaterialRecord] = Field(default_factory=list)
    accessories: list[QuoteAccessoryRecord] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QuoteResponse(QuoteRecord):
    client_name: Optional[str] = None
    total_cost: float
    profit: float


# ============== Pricing advisor ==============

class AdvisorRequest(BaseModel):
    """A saved quote or a draft to advise on. Exactly one of the two is given."""
    quote_id: Optional[int] = None
    draft: Optional[QuoteDraft] = None
    market_data: str = ""
    # What comparable pieces sell for, when known
    market_price: Optional[float] = Field(None, gt=0, allow_inf_nan=False)


class AdvisorInput(BaseModel):
    """What an advisor is told about a quote."""
    market_data: str
    material_costs: str
    production_factors: str
    current_price: float
    total_cost: float
    profit_margin: float
    market_price: Optional[float] = None
    currency: str


class PricingAdvice(BaseModel):
    suggested_pricing_strategy: str
    suggested_price: Optional[float] = None
    estimated_profit: float
    justification: str
    advisor: str
