"""
Module: catering_engines.revenue
Responsibility:
    Revenue and operating-cost side of an event: subtotal, gratuity,
    distance fee, total charged, and food / supplies / transportation
    costs. Accepts subtotal and food-cost overrides (e.g. from menu
    pricing) that replace the formula-derived figures verbatim.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import catering_kernel.domain (and sibling engine modules).

Invariants enforced:
    - Costs are a function of the subtotal only; labor figures are never
      consulted here.
    - Distance fee is a step function with ceiling increments: a partial
      increment is billed as a full one.
    - total_charged == subtotal + gratuity + distance_fee exactly.
    - No rounding: figures keep full Decimal precision.

Failure modes:
    - None on well-typed input. ``increment_miles <= 0`` bills the whole
      excess distance as a single increment instead of dividing by zero.

Usage:
    from catering_engines.revenue import calculate_revenue, calculate_operating_costs

    revenue = calculate_revenue(event, rules)
    costs = calculate_operating_costs(
        revenue.subtotal, event.resolved_slot, rules.costs,
        food_cost_override=event.food_cost_override,
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal

from catering_engines.tracer import traced_engine
from catering_kernel.domain.event import EventInput
from catering_kernel.domain.rules import (
    CostRules,
    DistanceRules,
    PricingSlot,
    RuleConfiguration,
)
from catering_kernel.domain.values import HUNDRED, ONE, ZERO, percent_of
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.revenue")


@dataclass(frozen=True)
class RevenueResult:
    """Revenue figures for one event.

    ``subtotal_overridden`` records whether ``subtotal`` came from an
    override rather than the per-guest formula.
    """

    guest_count: int
    adult_count: int
    child_count: int
    base_price: Decimal
    premium_add_on: Decimal
    subtotal: Decimal
    subtotal_overridden: bool
    gratuity_percent: Decimal
    gratuity: Decimal
    distance_fee: Decimal
    total_charged: Decimal


@dataclass(frozen=True)
class OperatingCosts:
    """Operating costs derived from the subtotal."""

    food_cost: Decimal
    food_cost_overridden: bool
    supplies_cost: Decimal
    transportation_cost: Decimal

    @property
    def total_costs(self) -> Decimal:
        return self.food_cost + self.supplies_cost + self.transportation_cost


def calculate_subtotal(
    adults: int,
    children: int,
    base_price: Decimal,
    child_discount_percent: Decimal,
    premium_add_on: Decimal = ZERO,
) -> Decimal:
    """Per-guest subtotal formula.

    ``adults * base + children * base * (1 - discount%) + guests * add_on``
    """
    child_price = base_price * (ONE - child_discount_percent / HUNDRED)
    guest_count = adults + children
    return (
        adults * base_price
        + children * child_price
        + guest_count * premium_add_on
    )


@traced_engine("distance_fee", "1.0", fingerprint_fields=("distance_miles",))
def calculate_distance_fee(distance_miles: Decimal, rules: DistanceRules) -> Decimal:
    """
    Travel fee for an event ``distance_miles`` away.

    Zero up to and including the free threshold; beyond it, the base fee
    plus one increment fee per started increment of excess distance.

    Example (free 10, increment 5, per-increment 15, base 25):
        25 miles -> 25 + ceil(15 / 5) * 15 = 70
    """
    if distance_miles <= rules.free_distance_miles:
        return ZERO

    extra_miles = distance_miles - rules.free_distance_miles
    if rules.increment_miles > ZERO:
        increments = (extra_miles / rules.increment_miles).to_integral_value(
            rounding=ROUND_CEILING
        )
    else:
        increments = ONE
    return rules.base_distance_fee + increments * rules.additional_fee_per_increment


@traced_engine(
    "revenue", "1.0",
    fingerprint_fields=("event",),
)
def calculate_revenue(event: EventInput, rules: RuleConfiguration) -> RevenueResult:
    """
    Subtotal, gratuity, distance fee and total charged for ``event``.

    Postconditions:
        - ``subtotal`` is ``event.subtotal_override`` verbatim when set,
          otherwise the per-guest formula on the slot's base price.
        - ``gratuity`` uses ``event.gratuity_percent_override`` when set,
          otherwise the rule document's default gratuity percent.
    """
    slot = event.resolved_slot
    base_price = rules.pricing.base_price_for(slot)

    if event.subtotal_override is not None:
        subtotal = event.subtotal_override
        overridden = True
    else:
        subtotal = calculate_subtotal(
            event.adults,
            event.children,
            base_price,
            rules.pricing.child_discount_percent,
            event.premium_add_on,
        )
        overridden = False

    gratuity_percent = (
        event.gratuity_percent_override
        if event.gratuity_percent_override is not None
        else rules.pricing.default_gratuity_percent
    )
    gratuity = percent_of(subtotal, gratuity_percent)
    distance_fee = calculate_distance_fee(event.distance_miles, rules.distance)

    logger.debug(
        "revenue_calculated",
        extra={
            "pricing_slot": slot.value,
            "subtotal": subtotal,
            "subtotal_overridden": overridden,
            "gratuity_percent": gratuity_percent,
            "distance_fee": distance_fee,
        },
    )

    return RevenueResult(
        guest_count=event.guest_count,
        adult_count=event.adults,
        child_count=event.children,
        base_price=base_price,
        premium_add_on=event.premium_add_on,
        subtotal=subtotal,
        subtotal_overridden=overridden,
        gratuity_percent=gratuity_percent,
        gratuity=gratuity,
        distance_fee=distance_fee,
        total_charged=subtotal + gratuity + distance_fee,
    )


@traced_engine(
    "operating_costs", "1.0",
    fingerprint_fields=("subtotal", "slot", "food_cost_override"),
)
def calculate_operating_costs(
    subtotal: Decimal,
    slot: PricingSlot,
    rules: CostRules,
    food_cost_override: Decimal | None = None,
) -> OperatingCosts:
    """
    Food, supplies and transportation costs for a subtotal.

    Food cost is the override verbatim when supplied, otherwise the slot's
    food-cost percent of the subtotal. Transportation is the flat stipend
    regardless of distance.
    """
    if food_cost_override is not None:
        food_cost = food_cost_override
    else:
        food_cost = percent_of(subtotal, rules.food_cost_percent_for(slot))

    return OperatingCosts(
        food_cost=food_cost,
        food_cost_overridden=food_cost_override is not None,
        supplies_cost=percent_of(subtotal, rules.supplies_cost_percent),
        transportation_cost=rules.transportation_stipend,
    )
