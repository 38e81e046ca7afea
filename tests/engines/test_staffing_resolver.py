"""
Tests for the staffing plan resolver.

Covers profile matching (explicit id, first match wins, category
wildcard, unbounded ranges), the default per-chef capacity rule and slot
index assignment.
"""

import dataclasses

from catering_engines.staffing import (
    StaffingPlan,
    StaffSlot,
    chefs_needed,
    find_matching_profile,
    resolve_staffing_plan,
)
from catering_kernel.domain.rules import (
    EventCategory,
    PricingSlot,
    SlotStaffing,
    StaffingProfile,
    StaffingRules,
)


def _plan(guests, category, rules, slot=None, profile_id=None):
    if slot is None:
        slot = (
            PricingSlot.PRIMARY
            if category == EventCategory.PRIVATE_DINNER
            else PricingSlot.SECONDARY
        )
    return resolve_staffing_plan(guests, category, slot, rules, staffing_profile_id=profile_id)


# ============================================================================
# Default rule
# ============================================================================


class TestDefaultRule:
    """Tests for the per-chef capacity fallback."""

    def test_ten_guest_private_dinner(self, default_rules):
        plan = _plan(10, EventCategory.PRIVATE_DINNER, default_rules)

        assert plan.chef_roles == ("lead",)
        assert plan.assistant_needed is True
        assert plan.total_staff_count == 2
        assert plan.matched_profile_id is None

    def test_overflow_chefs(self, default_rules):
        plan = _plan(31, EventCategory.PRIVATE_DINNER, default_rules)
        assert plan.roles == ("lead", "full", "full", "assistant")

    def test_exact_capacity_boundary(self, default_rules):
        plan = _plan(15, EventCategory.PRIVATE_DINNER, default_rules)
        assert plan.chef_roles == ("lead",)

    def test_buffet_has_no_assistant(self, default_rules):
        plan = _plan(30, EventCategory.BUFFET, default_rules)

        assert plan.roles == ("buffet", "buffet")
        assert plan.assistant_needed is False

    def test_zero_guest_buffet_has_no_staff(self, default_rules):
        plan = _plan(0, EventCategory.BUFFET, default_rules)

        assert plan.roles == ()
        assert plan.total_staff_count == 0

    def test_zero_guest_private_dinner_keeps_lead(self, default_rules):
        plan = _plan(0, EventCategory.PRIVATE_DINNER, default_rules)
        assert plan.roles == ("lead", "assistant")

    def test_chefs_needed_for_empty_event(self):
        assert chefs_needed(0, 15) == 0

    def test_chefs_needed_guards_non_positive_capacity(self):
        assert chefs_needed(7, 0) == 7
        assert chefs_needed(7, -3) == 7

    def test_chefs_needed_rounds_up(self):
        assert chefs_needed(26, 25) == 2
        assert chefs_needed(25, 25) == 1


# ============================================================================
# Profile matching
# ============================================================================


class TestProfileMatching:
    """Tests for staffing profile selection."""

    def test_category_and_range_match(self, profiled_rules):
        plan = _plan(12, EventCategory.PRIVATE_DINNER, profiled_rules)

        assert plan.matched_profile_id == "small-private"
        assert plan.matched_profile_name == "Small private dinner"
        assert plan.roles == ("lead", "assistant")

    def test_first_match_wins(self, profiled_rules):
        """12 guests also fits 'any-mid'; the earlier profile is used."""
        profile = find_matching_profile(
            profiled_rules.staffing, EventCategory.PRIVATE_DINNER.value, 12
        )
        assert profile.id == "small-private"

    def test_any_category_wildcard(self, profiled_rules):
        plan = _plan(20, EventCategory.BUFFET, profiled_rules)
        assert plan.matched_profile_id == "any-mid"

    def test_unbounded_max_guests(self, profiled_rules):
        plan = _plan(500, EventCategory.PRIVATE_DINNER, profiled_rules)
        assert plan.matched_profile_id == "large-private"

    def test_no_match_falls_back_to_default(self, profiled_rules):
        plan = _plan(60, EventCategory.BUFFET, profiled_rules)

        assert plan.matched_profile_id is None
        assert plan.roles == ("buffet", "buffet", "buffet")

    def test_explicit_profile_id_wins(self, profiled_rules):
        plan = _plan(3, EventCategory.BUFFET, profiled_rules, profile_id="large-private")
        assert plan.matched_profile_id == "large-private"

    def test_unknown_profile_id_falls_through(self, profiled_rules):
        plan = _plan(12, EventCategory.PRIVATE_DINNER, profiled_rules, profile_id="nope")
        assert plan.matched_profile_id == "small-private"

    def test_inclusive_range_bounds(self):
        profile = StaffingProfile("p", "P", "buffet", 10, 20, ("buffet",))
        assert profile.matches("buffet", 10)
        assert profile.matches("buffet", 20)
        assert not profile.matches("buffet", 21)
        assert not profile.matches("private-dinner", 15)

    def test_legacy_overflow_role_reads_as_full(self, default_rules):
        rules = StaffingRules(
            primary=default_rules.staffing.primary,
            secondary=default_rules.staffing.secondary,
            profiles=(StaffingProfile("old", "Old", "any", 0, 9999, ("lead", "overflow")),),
        )
        config = dataclasses.replace(default_rules, staffing=rules)
        plan = _plan(5, EventCategory.BUFFET, config)
        assert plan.roles == ("lead", "full")


# ============================================================================
# Slots
# ============================================================================


class TestSlots:
    """Tests for slot index and gratuity group assignment."""

    def test_slot_indexes_are_positions(self, profiled_rules):
        plan = _plan(40, EventCategory.PRIVATE_DINNER, profiled_rules)
        assert [slot.slot_index for slot in plan.slots] == [0, 1, 2, 3]

    def test_gratuity_groups_follow_labor_rules(self, default_rules):
        plan = _plan(20, EventCategory.PRIVATE_DINNER, default_rules)

        assert [slot.gratuity_group for slot in plan.slots] == ["chef", "chef", "assistant"]
        assert plan.gratuity_groups == ("chef", "assistant")
        assert plan.group_size("chef") == 2
        assert plan.group_size("buffet") == 0

    def test_plan_properties(self):
        plan = StaffingPlan(
            slots=(
                StaffSlot(0, "lead", "chef"),
                StaffSlot(1, "assistant", "assistant"),
            )
        )
        assert plan.chef_roles == ("lead",)
        assert plan.assistant_needed
        assert plan.total_staff_count == 2

    def test_custom_slot_rule(self, default_rules):
        staffing = StaffingRules(
            primary=SlotStaffing(10, False, "lead", "lead"),
            secondary=default_rules.staffing.secondary,
        )
        rules = dataclasses.replace(default_rules, staffing=staffing)
        plan = _plan(25, EventCategory.PRIVATE_DINNER, rules)
        assert plan.roles == ("lead", "lead", "lead")
