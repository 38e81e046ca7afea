"""
Module: catering_engines.financials
Responsibility:
    The financial facade: composes revenue, operating costs, staffing,
    labor, profit distribution and safety warnings into one
    ``EventFinancials`` per event. This is the only entry point external
    collaborators (booking screens, reports, payout ledgers) call.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Determinism: identical ``EventInput`` and ``RuleConfiguration`` give
      equal results on every call; nothing is read from clocks, files or
      shared state.
    - Conservation: ``total_charged - total_costs - total_labor_paid ==
      gross_profit`` exactly.
    - Costs never depend on labor; labor never feeds back into revenue.

Failure modes:
    - None on well-typed input. Unknown staffing-profile ids fall back to
      matching; division guards yield 0; policy inconsistencies become
      warnings.

Usage:
    from catering_engines.financials import calculate_event_financials
    from catering_config import get_active_rules

    financials = calculate_event_financials(event, get_active_rules())
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal

from catering_engines.distribution import calculate_gross_profit, distribute_profit
from catering_engines.labor import LaborCompensationEntry, calculate_labor
from catering_engines.revenue import calculate_operating_costs, calculate_revenue
from catering_engines.safety import calculate_ratios, collect_warnings
from catering_engines.staffing import StaffingPlan, resolve_staffing_plan
from catering_engines.tracer import traced_engine
from catering_kernel.domain.event import EventInput
from catering_kernel.domain.rules import PricingSlot, RuleConfiguration
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.financials")


@dataclass(frozen=True)
class EventFinancials:
    """Complete financial breakdown of one event."""

    # Revenue
    pricing_slot: PricingSlot
    guest_count: int
    adult_count: int
    child_count: int
    base_price: Decimal
    premium_add_on: Decimal
    subtotal: Decimal
    gratuity_percent: Decimal
    gratuity: Decimal
    distance_fee: Decimal
    total_charged: Decimal

    # Costs
    food_cost: Decimal
    food_cost_percent: Decimal
    supplies_cost: Decimal
    transportation_cost: Decimal
    total_costs: Decimal

    # Labor
    staffing_plan: StaffingPlan
    labor_compensation: tuple[LaborCompensationEntry, ...]
    total_labor_base: Decimal
    total_labor_paid: Decimal
    total_excess_to_profit: Decimal
    labor_percent_of_revenue: Decimal

    # Profit
    gross_profit: Decimal
    retained_percent: Decimal
    retained_amount: Decimal
    distribution_percent: Decimal
    distribution_amount: Decimal
    owner_distributions: Mapping[str, Decimal]

    warnings: tuple[str, ...] = ()


@traced_engine(
    "event_financials", "1.0",
    fingerprint_fields=("event",),
)
def calculate_event_financials(
    event: EventInput,
    rules: RuleConfiguration,
) -> EventFinancials:
    """
    Derive every financial figure for ``event`` under ``rules``.

    Order: revenue -> operating costs -> staffing plan -> labor -> gross
    profit -> distribution -> warnings. Each step reads only the outputs
    of the steps before it.
    """
    slot = event.resolved_slot

    revenue = calculate_revenue(event, rules)
    costs = calculate_operating_costs(
        revenue.subtotal,
        slot,
        rules.costs,
        food_cost_override=event.food_cost_override,
    )

    plan = resolve_staffing_plan(
        event.guest_count,
        event.event_category,
        slot,
        rules,
        staffing_profile_id=event.staffing_profile_id,
    )
    labor = calculate_labor(
        plan,
        revenue.subtotal,
        revenue.gratuity,
        rules.labor,
        overrides=event.staff_pay_overrides,
    )

    total_costs = costs.total_costs
    total_labor_paid = labor.total_labor_paid
    gross_profit = calculate_gross_profit(
        revenue.total_charged, total_costs, total_labor_paid
    )
    distribution = distribute_profit(gross_profit, rules.profit_distribution)

    ratios = calculate_ratios(
        total_labor_paid, revenue.total_charged, costs.food_cost, revenue.subtotal
    )
    warnings = collect_warnings(ratios, plan, rules)

    logger.info(
        "event_financials_calculated",
        extra={
            "event_category": event.event_category.value,
            "pricing_slot": slot.value,
            "guest_count": event.guest_count,
            "total_charged": revenue.total_charged,
            "total_labor_paid": total_labor_paid,
            "gross_profit": gross_profit,
            "staff_count": plan.total_staff_count,
            "warning_count": len(warnings),
        },
    )

    return EventFinancials(
        pricing_slot=slot,
        guest_count=revenue.guest_count,
        adult_count=revenue.adult_count,
        child_count=revenue.child_count,
        base_price=revenue.base_price,
        premium_add_on=revenue.premium_add_on,
        subtotal=revenue.subtotal,
        gratuity_percent=revenue.gratuity_percent,
        gratuity=revenue.gratuity,
        distance_fee=revenue.distance_fee,
        total_charged=revenue.total_charged,
        food_cost=costs.food_cost,
        food_cost_percent=ratios.food_cost_percent,
        supplies_cost=costs.supplies_cost,
        transportation_cost=costs.transportation_cost,
        total_costs=total_costs,
        staffing_plan=plan,
        labor_compensation=labor.entries,
        total_labor_base=labor.total_labor_base,
        total_labor_paid=total_labor_paid,
        total_excess_to_profit=labor.total_excess_to_profit,
        labor_percent_of_revenue=ratios.labor_percent,
        gross_profit=gross_profit,
        retained_percent=distribution.retained_percent,
        retained_amount=distribution.retained_amount,
        distribution_percent=distribution.distribution_percent,
        distribution_amount=distribution.distribution_amount,
        owner_distributions=distribution.owner_distributions,
        warnings=warnings,
    )
