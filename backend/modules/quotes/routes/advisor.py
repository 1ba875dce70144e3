"""Pricing advice endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.db import get_db
from modules.quotes.advisor import PricingAdvisor, build_advisor_input, get_advisor
from modules.quotes.schemas import AdvisorRequest, PricingAdvice

router = APIRouter(prefix="/advisor", tags=["Advisor"])


@router.post("/pricing", response_model=PricingAdvice)
async def advise_on_pricing(
    body: AdvisorRequest,
    db: Session = Depends(get_db),
    advisor: PricingAdvisor = Depends(get_advisor),
):
    """Suggest a pricing strategy for a saved quote or a draft. The quote is not changed."""
    return await advisor.advise(build_advisor_input(db, body))
