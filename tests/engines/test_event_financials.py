"""
Tests for the financial facade (calculate_event_financials).

End-to-end figures for reference events under the built-in rules, plus
the conservation and determinism guarantees.
"""

import dataclasses
from decimal import Decimal

import pytest

from catering_engines.financials import calculate_event_financials
from catering_kernel.domain.event import EventInput, StaffPayOverride
from catering_kernel.domain.rules import (
    DistanceRules,
    EventCategory,
    PricingSlot,
    SafetyLimits,
)


# ============================================================================
# Reference event
# ============================================================================


class TestTenAdultPrivateDinner:
    """10 adults, private dinner, no travel, no add-on, default rules."""

    @pytest.fixture
    def financials(self, make_event, default_rules):
        return calculate_event_financials(make_event(), default_rules)

    def test_revenue(self, financials):
        assert financials.pricing_slot is PricingSlot.PRIMARY
        assert financials.guest_count == 10
        assert financials.subtotal == Decimal("600")
        assert financials.gratuity == Decimal("120")
        assert financials.distance_fee == Decimal("0")
        assert financials.total_charged == Decimal("720")

    def test_costs(self, financials):
        assert financials.food_cost == Decimal("108")
        assert financials.supplies_cost == Decimal("42")
        assert financials.transportation_cost == Decimal("50")
        assert financials.total_costs == Decimal("200")

    def test_staffing(self, financials):
        assert financials.staffing_plan.chef_roles == ("lead",)
        assert financials.staffing_plan.assistant_needed

    def test_labor(self, financials):
        lead, assistant = financials.labor_compensation
        assert lead.final_pay == Decimal("156")
        assert assistant.final_pay == Decimal("102")
        assert financials.total_labor_paid == Decimal("258")
        assert financials.total_excess_to_profit == Decimal("0")

    def test_profit(self, financials):
        assert financials.gross_profit == Decimal("262")
        assert financials.retained_amount == Decimal("78.6")
        assert financials.distribution_amount == Decimal("183.4")
        assert financials.owner_distributions["owner-a"] == Decimal("73.36")
        assert financials.owner_distributions["owner-b"] == Decimal("110.04")

    def test_labor_ratio_warning(self, financials):
        assert financials.warnings == (
            "Labor cost (35.8%) exceeds maximum (30%) of total charged",
        )


# ============================================================================
# Other scenarios
# ============================================================================


class TestScenarios:
    """Assorted end-to-end scenarios."""

    def test_buffet_with_travel(self, default_rules):
        rules = dataclasses.replace(
            default_rules,
            distance=DistanceRules(
                free_distance_miles=Decimal("10"),
                base_distance_fee=Decimal("25"),
                additional_fee_per_increment=Decimal("15"),
                increment_miles=Decimal("5"),
            ),
        )
        event = EventInput(
            adults=8,
            children=4,
            event_category=EventCategory.BUFFET,
            distance_miles=Decimal("25"),
        )
        financials = calculate_event_financials(event, rules)

        assert financials.subtotal == Decimal("320")
        assert financials.distance_fee == Decimal("70")
        assert financials.total_charged == Decimal("320") + Decimal("64") + Decimal("70")
        assert financials.staffing_plan.roles == ("buffet",)

    def test_menu_overrides_replace_formula(self, make_event, default_rules):
        event = make_event(
            subtotal_override=Decimal("512.50"), food_cost_override=Decimal("140.25")
        )
        financials = calculate_event_financials(event, default_rules)

        assert financials.subtotal == Decimal("512.50")
        assert financials.food_cost == Decimal("140.25")
        assert financials.supplies_cost == Decimal("35.875")

    def test_capped_excess_stays_in_profit(self, make_event, default_rules):
        capped = make_event(
            staff_pay_overrides=(StaffPayOverride(slot_index=0, cap_amount=Decimal("100")),)
        )
        base = calculate_event_financials(make_event(), default_rules)
        result = calculate_event_financials(capped, default_rules)

        assert result.total_excess_to_profit == Decimal("56")
        assert result.gross_profit == base.gross_profit + Decimal("56")

    def test_role_only_booking_override_applies(self, default_rules):
        event = EventInput.from_mapping({
            "adults": 10,
            "eventType": "private-dinner",
            "staffPayOverrides": [
                {"role": "assistant", "basePayPercent": 20, "gratuitySplitPercent": 45},
            ],
        })
        financials = calculate_event_financials(event, default_rules)
        lead, assistant = financials.labor_compensation

        assert lead.overridden is False
        assert assistant.overridden is True
        assert assistant.base_pay == Decimal("120")
        assert assistant.final_pay == Decimal("174")

    def test_role_only_overrides_by_occurrence(self, default_rules):
        event = EventInput.from_mapping({
            "adults": 40,
            "eventType": "private-dinner",
            "staffPayOverrides": [
                {"role": "full", "basePayPercent": 1},
                {"role": "full", "basePayPercent": 2},
            ],
        })
        financials = calculate_event_financials(event, default_rules)
        fulls = [e for e in financials.labor_compensation if e.role == "full"]

        assert [e.base_pay_percent for e in fulls] == [Decimal("1"), Decimal("2")]

    def test_zero_guest_buffet_pays_no_one(self, default_rules):
        event = EventInput(adults=0, children=0, event_category=EventCategory.BUFFET)
        financials = calculate_event_financials(event, default_rules)

        assert financials.staffing_plan.total_staff_count == 0
        assert financials.labor_compensation == ()
        assert financials.total_labor_paid == Decimal("0")

    def test_negative_profit_allowed(self, make_event, default_rules):
        event = make_event(
            staff_pay_overrides=(StaffPayOverride(slot_index=0, base_pay_percent=Decimal("200")),)
        )
        financials = calculate_event_financials(event, default_rules)
        assert financials.gross_profit < 0

    def test_zero_guests(self, make_event, default_rules):
        financials = calculate_event_financials(make_event(adults=0), default_rules)

        assert financials.subtotal == Decimal("0")
        assert financials.labor_percent_of_revenue == Decimal("0")
        assert financials.food_cost_percent == Decimal("0")

    def test_warnings_disabled(self, make_event, default_rules):
        rules = dataclasses.replace(
            default_rules, safety_limits=SafetyLimits(warn_when_exceeded=False)
        )
        assert calculate_event_financials(make_event(), rules).warnings == ()


# ============================================================================
# Guarantees
# ============================================================================


class TestGuarantees:
    """Conservation and determinism."""

    def test_conservation(self, make_event, profiled_rules):
        event = make_event(
            adults=23,
            children=7,
            distance_miles=Decimal("41.5"),
            premium_add_on=Decimal("7.25"),
        )
        f = calculate_event_financials(event, profiled_rules)
        assert f.total_charged - f.total_costs - f.total_labor_paid == f.gross_profit

    def test_idempotent(self, make_event, profiled_rules):
        event = make_event(adults=18, children=3, distance_miles=Decimal("26"))
        assert calculate_event_financials(event, profiled_rules) == calculate_event_financials(
            event, profiled_rules
        )

    def test_result_is_frozen(self, make_event, default_rules):
        financials = calculate_event_financials(make_event(), default_rules)
        with pytest.raises(dataclasses.FrozenInstanceError):
            financials.subtotal = Decimal("0")
