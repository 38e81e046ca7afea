"""
Tests for advisory safety and policy warnings.
"""

import dataclasses
from decimal import Decimal

from catering_engines.safety import (
    SafetyRatios,
    calculate_ratios,
    collect_warnings,
    limit_warnings,
    policy_warnings,
)
from catering_engines.staffing import StaffingPlan, StaffSlot
from catering_kernel.domain.rules import (
    Owner,
    ProfitDistributionRules,
    SafetyLimits,
)


def _plan(*groups, profile_id=None):
    return StaffingPlan(
        slots=tuple(StaffSlot(i, group, group) for i, group in enumerate(groups)),
        matched_profile_id=profile_id,
    )


class TestRatios:
    """Tests for calculate_ratios."""

    def test_labor_against_total_charged(self):
        ratios = calculate_ratios(Decimal("258"), Decimal("720"), Decimal("108"), Decimal("600"))
        assert ratios.food_cost_percent == Decimal("18")
        assert Decimal("35.83") < ratios.labor_percent < Decimal("35.84")

    def test_zero_denominators(self):
        ratios = calculate_ratios(Decimal("50"), Decimal("0"), Decimal("10"), Decimal("0"))
        assert ratios == SafetyRatios(Decimal("0"), Decimal("0"))


class TestLimitWarnings:
    """Tests for limit breach messages."""

    def test_labor_breach_message(self):
        warnings = limit_warnings(
            SafetyRatios(Decimal("32.5"), Decimal("10")), SafetyLimits()
        )
        assert warnings == ["Labor cost (32.5%) exceeds maximum (30%) of total charged"]

    def test_food_breach_message(self):
        warnings = limit_warnings(
            SafetyRatios(Decimal("10"), Decimal("35")), SafetyLimits()
        )
        assert warnings == ["Food cost (35.0%) exceeds maximum (30%)"]

    def test_at_limit_is_not_a_breach(self):
        assert limit_warnings(SafetyRatios(Decimal("30"), Decimal("30")), SafetyLimits()) == []


class TestPolicyWarnings:
    """Tests for rule-document inconsistencies surfaced per event."""

    def test_consistent_defaults(self, default_rules):
        assert policy_warnings(_plan("chef", "assistant"), default_rules) == []

    def test_equity_not_summing_to_100(self, default_rules):
        rules = dataclasses.replace(
            default_rules,
            profit_distribution=ProfitDistributionRules(
                owners=(Owner("a", "A", Decimal("40")), Owner("b", "B", Decimal("50")))
            ),
        )
        warnings = policy_warnings(_plan("chef", "assistant"), rules)
        assert warnings == ["Owner equity percentages sum to 90%, not 100%"]

    def test_retained_split(self, default_rules):
        rules = dataclasses.replace(
            default_rules,
            profit_distribution=ProfitDistributionRules(
                business_retained_percent=Decimal("35"),
            ),
        )
        warnings = policy_warnings(_plan("chef", "assistant"), rules)
        assert warnings == [
            "Retained (35%) plus owner distribution (70%) sum to 105%, not 100%"
        ]

    def test_gratuity_groups_of_plan(self, default_rules):
        # chef alone draws 55%; the assistant share is never paid out
        warnings = policy_warnings(_plan("chef", profile_id="solo"), default_rules)
        assert warnings == [
            "Gratuity splits for staffing profile 'solo' (chef) sum to 55%, not 100%"
        ]

    def test_default_plan_context(self, default_rules):
        warnings = policy_warnings(_plan("chef"), default_rules)
        assert "this staffing plan" in warnings[0]


class TestCollectWarnings:
    """Tests for the combined warning list."""

    def test_limits_before_policy(self, default_rules):
        ratios = SafetyRatios(Decimal("40"), Decimal("10"))
        warnings = collect_warnings(ratios, _plan("chef"), default_rules)

        assert warnings[0].startswith("Labor cost (40.0%)")
        assert warnings[1].startswith("Gratuity splits")

    def test_disabled(self, default_rules):
        rules = dataclasses.replace(
            default_rules, safety_limits=SafetyLimits(warn_when_exceeded=False)
        )
        ratios = SafetyRatios(Decimal("99"), Decimal("99"))
        assert collect_warnings(ratios, _plan("chef"), rules) == ()
