"""
modules/quotes/advisor.py - Pricing advice for a quote.

A PricingAdvisor turns a quote's cost breakdown, the configured margin and
whatever is known about the market into a suggested pricing strategy.

    RuleBasedAdvisor    offline, from the numbers alone (default)
    RemoteAdvisor       POSTs the AdvisorInput to ADVISOR_URL, e.g. a
                        language-model gateway, and reads PricingAdvice back

Advisors only suggest. Nothing here changes a quote's price.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Optional

import httpx
from sqlalchemy.orm import Session

from core.config import settings
from core.errors import UpstreamUnavailable, ValidationFailed
from core.registry import registry
from modules.quotes.pricing import PRICE_STEP, round_up_price
from modules.quotes.schemas import AdvisorInput, AdvisorRequest, PricingAdvice
from modules.quotes.services import quote_service

log = logging.getLogger("printdesk.quotes")


def _markup(price: float, cost: float) -> float:
    """Profit as a percentage of cost, the way profit_margin is configured."""
    return (price - cost) / cost * 100


def _round_down_price(amount: float, step: int = PRICE_STEP) -> float:
    return float(math.floor(amount / step) * step)


class PricingAdvisor(ABC):
    name = "advisor"

    @abstractmethod
    async def advise(self, advisor_input: AdvisorInput) -> PricingAdvice: ...


class RuleBasedAdvisor(PricingAdvisor):
    name = "rules"

    async def advise(self, advisor_input: AdvisorInput) -> PricingAdvice:
        return self.evaluate(advisor_input)

    def evaluate(self, data: AdvisorInput) -> PricingAdvice:
        cost, price, cur = data.total_cost, data.current_price, data.currency
        if cost <= 0:
            return PricingAdvice(
                suggested_pricing_strategy="Price on perceived value",
                suggested_price=price or None,
                estimated_profit=price,
                justification="The quote has no recorded production cost, so the whole price is profit.",
                advisor=self.name,
            )

        target = round_up_price(cost * (1 + data.profit_margin / 100))
        break_even = round_up_price(cost)
        market = data.market_price

        if market is None:
            if price < target:
                strategy, suggested = "Raise to the target margin", target
                why = (
                    f"At {price:g} {cur} the markup is {_markup(price, cost):.0f}%, "
                    f"below the configured {data.profit_margin:g}%."
                )
            else:
                strategy, suggested = "Hold the current price", price
                why = (
                    f"{price:g} {cur} already gives a {_markup(price, cost):.0f}% markup over "
                    f"the {cost:.2f} {cur} production cost. Add a market price to compare."
                )
        elif market < cost:
            strategy, suggested = "Compete on value, not price", max(price, break_even)
            why = (
                f"Comparable pieces sell for {market:g} {cur}, below the {cost:.2f} {cur} this one "
                f"costs to make. Matching them loses money; sell on finish, turnaround or customisation."
            )
        elif market < price:
            strategy, suggested = "Match the market", max(_round_down_price(market), break_even)
            why = (
                f"The market sits at {market:g} {cur}, under the current {price:g}. "
                f"{suggested:g} {cur} stays competitive at a {_markup(suggested, cost):.0f}% markup."
            )
        else:
            suggested = max(_round_down_price(market), price)
            strategy = "Raise towards the market" if suggested > price else "Hold the current price"
            why = (
                f"Comparable pieces sell for {market:g} {cur}, at or above the current {price:g}. "
                f"{suggested:g} {cur} gives a {_markup(suggested, cost):.0f}% markup."
            )

        return PricingAdvice(
            suggested_pricing_strategy=strategy,
            suggested_price=suggested,
            estimated_profit=suggested - cost,
            justification=why,
            advisor=self.name,
        )


class RemoteAdvisor(PricingAdvisor):
    name = "remote"

    def __init__(self, url: str, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self.transport = transport

    async def advise(self, advisor_input: AdvisorInput) -> PricingAdvice:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(self.url, json=advisor_input.model_dump())
                resp.raise_for_status()
                body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            log.error(f"Pricing advisor at {self.url} failed: {e}")
            raise UpstreamUnavailable("Pricing advisor is unavailable") from e

        try:
            return PricingAdvice.model_validate({**body, "advisor": self.name})
        except (TypeError, ValueError) as e:
            log.error(f"Pricing advisor at {self.url} sent an unusable answer: {e}")
            raise UpstreamUnavailable("Pricing advisor sent an unusable answer") from e


def get_advisor() -> PricingAdvisor:
    """FastAPI dependency: the configured advisor."""
    if settings.advisor_url:
        return RemoteAdvisor(settings.advisor_url, timeout=settings.advisor_timeout)
    return RuleBasedAdvisor()


def build_advisor_input(db: Session, request: AdvisorRequest) -> AdvisorInput:
    """Describe a saved quote or a priced draft for an advisor."""
    if (request.quote_id is None) == (request.draft is None):
        raise ValidationFailed("Give either quote_id or draft")

    cost_settings = registry.require("SettingsProvider").get_settings(db)
    if request.quote_id is not None:
        quote = quote_service.get_quote(db, request.quote_id)
        costs, hours, price = quote, quote.printing_time_hours, quote.price
        total_cost = quote.total_cost
    else:
        costs = quote_service.preview(db, request.draft)
        hours, price, total_cost = request.draft.printing_time_hours, costs.price, costs.total_cost

    cur = cost_settings.currency
    return AdvisorInput(
        market_data=request.market_data or "No market data provided.",
        material_costs=(
            f"Filament {costs.material_cost:.2f} {cur}, accessories {costs.accessory_cost:.2f} {cur}"
        ),
        production_factors=(
            f"{hours:g} h of printing: machine time {costs.machine_cost:.2f} {cur}, "
            f"electricity {costs.electricity_cost:.2f} {cur}"
        ),
        current_price=price,
        total_cost=total_cost,
        profit_margin=cost_settings.profit_margin,
        market_price=request.market_price,
        currency=cur,
    )
