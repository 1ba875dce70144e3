"""
modules/quotes/pricing.py - Quote price calculation.

Pure functions: costs come in as plain mappings, nothing here touches the
database. The same inputs always give the same price.

    material    = sum(cost_per_kg / 1000 * grams)
    accessories = sum(unit cost * quantity)
    machine     = machine_cost * hours
    electricity = watts / 1000 * hours * electricity_cost
    price       = ceil(total * (1 + margin / 100) / 100) * 100
"""

import math
from typing import Iterable, Mapping

from core.errors import ValidationFailed
from core.schemas import CostSettings
from modules.quotes.schemas import AccessoryLine, MaterialLine, QuoteBreakdown

PRICE_STEP = 100

# Anything above this is an input mistake, not a quote.
MAX_PRICE = 1e12

# Digits kept before rounding up, so 103.00000000001 steps stays 103.
_CEIL_PRECISION = 6


def split_lines(items: Iterable) -> tuple[list[MaterialLine], list[AccessoryLine]]:
    """Separate line items by kind, dropping empty ones.

    A line without an id, or with zero or negative grams/quantity, is
    dropped: it is neither priced nor stored.
    """
    materials, accessories = [], []
    for item in items:
        if isinstance(item, MaterialLine):
            if item.filament_id and item.grams > 0:
                materials.append(item)
        elif isinstance(item, AccessoryLine):
            if item.accessory_id and item.quantity > 0:
                accessories.append(item)
    return materials, accessories


def round_up_price(amount: float, step: int = PRICE_STEP) -> float:
    """Round up to the next multiple of step. Never rounds down."""
    if amount <= 0:
        return 0.0
    steps = math.ceil(round(amount / step, _CEIL_PRECISION))
    return float(max(steps, 1) * step)


def compute_price(
    materials: list[MaterialLine],
    accessories: list[AccessoryLine],
    printing_time_hours: float,
    settings: CostSettings,
    filament_costs: Mapping[int, float],
    accessory_costs: Mapping[int, float],
) -> QuoteBreakdown:
    """Price a set of clean lines.

    filament_costs maps filament id -> cost_per_kg and accessory_costs maps
    accessory id -> unit cost, both as currently stored. Ids missing from
    the mappings cost nothing and are reported back.
    """
    unknown_filaments: list[int] = []
    unknown_accessories: list[int] = []

    material_cost = 0.0
    for line in materials:
        cost_per_kg = filament_costs.get(line.filament_id)
        if cost_per_kg is None:
            if line.filament_id not in unknown_filaments:
                unknown_filaments.append(line.filament_id)
            continue
        material_cost += (cost_per_kg / 1000) * line.grams

    accessory_cost = 0.0
    for line in accessories:
        unit_cost = accessory_costs.get(line.accessory_id)
        if unit_cost is None:
            if line.accessory_id not in unknown_accessories:
                unknown_accessories.append(line.accessory_id)
            continue
        accessory_cost += unit_cost * line.quantity

    hours = printing_time_hours or 0.0
    machine_cost = settings.machine_cost * hours
    electricity_cost = (settings.printer_consumption_watts / 1000) * hours * settings.electricity_cost

    total_cost = material_cost + accessory_cost + machine_cost + electricity_cost
    marked_up = total_cost * (1 + settings.profit_margin / 100)
    if not math.isfinite(marked_up) or marked_up > MAX_PRICE:
        raise ValidationFailed(
            "Quote price is out of range, check grams, quantities and hours",
            total_cost=total_cost if math.isfinite(total_cost) else None,
        )
    price = round_up_price(marked_up) if total_cost > 0 else 0.0

    return QuoteBreakdown(
        material_cost=material_cost,
        accessory_cost=accessory_cost,
        machine_cost=machine_cost,
        electricity_cost=electricity_cost,
        total_cost=total_cost,
        price=price,
        currency=settings.currency,
        unknown_filament_ids=unknown_filaments,
        unknown_accessory_ids=unknown_accessories,
    )
