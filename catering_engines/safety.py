"""
Module: catering_engines.safety
Responsibility:
    Advisory warnings for a computed event: labor and food cost ratios
    against the configured safety limits, plus the policy inconsistencies
    of the rule document that affect this event (owner equity, retained vs.
    distribution split, gratuity split of the groups actually staffed).

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Warnings never alter computed values.
    - No warnings at all when ``warn_when_exceeded`` is disabled.
    - Ratios with a zero denominator are 0, never NaN or Infinity.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from catering_engines.staffing import StaffingPlan
from catering_kernel.domain.policy import (
    gratuity_split_message,
    owner_equity_message,
    retained_split_message,
)
from catering_kernel.domain.rules import RuleConfiguration, SafetyLimits
from catering_kernel.domain.values import format_percent, format_plain, safe_ratio_percent


@dataclass(frozen=True)
class SafetyRatios:
    labor_percent: Decimal
    food_cost_percent: Decimal


def calculate_ratios(
    total_labor_paid: Decimal,
    total_charged: Decimal,
    food_cost: Decimal,
    subtotal: Decimal,
) -> SafetyRatios:
    """Labor as % of total charged and food cost as % of subtotal."""
    return SafetyRatios(
        labor_percent=safe_ratio_percent(total_labor_paid, total_charged),
        food_cost_percent=safe_ratio_percent(food_cost, subtotal),
    )


def limit_warnings(ratios: SafetyRatios, limits: SafetyLimits) -> list[str]:
    warnings: list[str] = []
    if ratios.labor_percent > limits.max_total_labor_percent:
        warnings.append(
            f"Labor cost ({format_percent(ratios.labor_percent)}%) exceeds maximum "
            f"({format_plain(limits.max_total_labor_percent)}%) of total charged"
        )
    if ratios.food_cost_percent > limits.max_food_cost_percent:
        warnings.append(
            f"Food cost ({format_percent(ratios.food_cost_percent)}%) exceeds maximum "
            f"({format_plain(limits.max_food_cost_percent)}%)"
        )
    return warnings


def policy_warnings(plan: StaffingPlan, rules: RuleConfiguration) -> list[str]:
    """Rule-document inconsistencies relevant to this event's plan."""
    context = (
        f"staffing profile '{plan.matched_profile_id}'"
        if plan.matched_profile_id
        else "this staffing plan"
    )
    messages = (
        owner_equity_message(rules.profit_distribution),
        retained_split_message(rules.profit_distribution),
        gratuity_split_message(plan.gratuity_groups, rules.labor, context),
    )
    return [message for message in messages if message is not None]


def collect_warnings(
    ratios: SafetyRatios,
    plan: StaffingPlan,
    rules: RuleConfiguration,
) -> tuple[str, ...]:
    """All advisory warnings for one event, limit breaches first."""
    if not rules.safety_limits.warn_when_exceeded:
        return ()
    return tuple(
        limit_warnings(ratios, rules.safety_limits) + policy_warnings(plan, rules)
    )
