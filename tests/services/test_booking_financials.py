"""
Tests for booking-level financials and menu snapshots.
"""

import logging
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from catering_config import merge_rule_overrides
from catering_engines.menu_pricing import GuestMenuSelection, MenuPricingSnapshot
from catering_kernel.domain.rules import EventCategory, PricingSlot
from catering_kernel.exceptions import UnknownEventCategoryError
from catering_services import (
    BookingRecord,
    PricingSource,
    apply_menu_pricing,
    calculate_booking_financials,
)

FIXED_NOW = datetime(2026, 5, 4, 18, 30, tzinfo=UTC)


@pytest.fixture
def booking():
    return BookingRecord(
        booking_id="bk-100",
        adults=1,
        children=1,
        event_category=EventCategory.PRIVATE_DINNER,
    )


@pytest.fixture
def selections():
    return [
        GuestMenuSelection("g1", True, "chicken", "steak", wants_fried_rice=True),
        GuestMenuSelection("g2", False, "chicken", "shrimp", wants_salad=True),
    ]


# ============================================================================
# Record normalization
# ============================================================================


class TestBookingRecord:
    """Tests for BookingRecord.from_mapping and to_event_input."""

    def test_from_camel_case_mapping(self):
        record = BookingRecord.from_mapping({
            "id": "bk-7",
            "adults": 12,
            "children": "3",
            "eventType": "private_dinner",
            "eventDate": "2026-07-04T00:00:00Z",
            "distanceMiles": 31.5,
            "premiumAddOn": None,
            "pricingSlot": "secondary",
            "staffPayOverrides": [{"slotIndex": 0, "capAmount": 250}],
        })

        assert record.booking_id == "bk-7"
        assert record.children == 3
        assert record.event_category is EventCategory.PRIVATE_DINNER
        assert record.event_date == date(2026, 7, 4)
        assert record.distance_miles == Decimal("31.5")
        assert record.premium_add_on == Decimal("0")
        assert record.pricing_slot is PricingSlot.SECONDARY
        assert record.staff_pay_overrides[0].cap_amount == Decimal("250")
        assert record.pricing_source is PricingSource.RULES

    def test_snapshot_from_mapping(self):
        record = BookingRecord.from_mapping({
            "booking_id": "bk-8",
            "adults": 2,
            "children": 0,
            "event_category": "buffet",
            "menu_pricing_snapshot": {
                "menuId": "m-1",
                "subtotalOverride": "88.50",
                "foodCostOverride": 20,
                "calculatedAt": "2026-05-04T18:30:00Z",
            },
        })
        snapshot = record.menu_pricing_snapshot

        assert record.pricing_source is PricingSource.MENU
        assert snapshot.subtotal_override == Decimal("88.50")
        assert snapshot.calculated_at == FIXED_NOW

    def test_unknown_category(self):
        with pytest.raises(UnknownEventCategoryError):
            BookingRecord.from_mapping({"adults": 1, "event_category": "picnic"})

    def test_event_input_carries_snapshot_overrides(self, booking):
        snapshot = MenuPricingSnapshot("m", Decimal("51.00"), Decimal("22.50"), FIXED_NOW)
        record = BookingRecord(
            booking_id="bk",
            adults=1,
            children=1,
            event_category=EventCategory.PRIVATE_DINNER,
            menu_pricing_snapshot=snapshot,
        )
        event = record.to_event_input()

        assert event.subtotal_override == Decimal("51.00")
        assert event.food_cost_override == Decimal("22.50")
        assert booking.to_event_input().subtotal_override is None


# ============================================================================
# Pricing source
# ============================================================================


class TestBookingFinancials:
    """Tests for calculate_booking_financials."""

    def test_rules_source(self, booking, default_rules):
        result = calculate_booking_financials(booking, default_rules)

        assert result.pricing_source is PricingSource.RULES
        # 60 + 30 for the child
        assert result.financials.subtotal == Decimal("90")

    def test_menu_source(self, booking, selections, menu_catalog, default_rules):
        priced = apply_menu_pricing(
            booking, "menu-1", selections, menu_catalog, default_rules, clock=lambda: FIXED_NOW
        )
        result = calculate_booking_financials(priced, default_rules)

        assert result.pricing_source is PricingSource.MENU
        assert result.financials.subtotal == Decimal("51.00")
        assert result.financials.food_cost == Decimal("22.50")

    def test_logs_calculation(self, booking, default_rules, caplog):
        caplog.set_level(logging.INFO, logger="catering_kernel")
        calculate_booking_financials(booking, default_rules)

        (record,) = [
            r for r in caplog.records if r.getMessage() == "booking_financials_calculated"
        ]
        assert record.pricing_source == "rules"


# ============================================================================
# Menu snapshots
# ============================================================================


class TestApplyMenuPricing:
    """Tests for apply_menu_pricing."""

    def test_returns_new_record(self, booking, selections, menu_catalog, default_rules):
        priced = apply_menu_pricing(
            booking, "menu-1", selections, menu_catalog, default_rules, clock=lambda: FIXED_NOW
        )

        assert booking.menu_pricing_snapshot is None
        assert priced.booking_id == booking.booking_id
        assert priced.menu_pricing_snapshot == MenuPricingSnapshot(
            "menu-1", Decimal("51.00"), Decimal("22.50"), FIXED_NOW
        )

    def test_uses_rule_child_discount(self, booking, selections, menu_catalog, default_rules):
        rules = merge_rule_overrides(default_rules, {"pricing": {"child_discount_percent": 0}})
        priced = apply_menu_pricing(
            booking, "menu-1", selections, menu_catalog, rules, clock=lambda: FIXED_NOW
        )
        # 35 adult + 32 undiscounted child
        assert priced.menu_pricing_snapshot.subtotal_override == Decimal("67.00")

    def test_premium_add_on_charged_per_guest(self, selections, menu_catalog, default_rules):
        booking = BookingRecord(
            booking_id="bk",
            adults=1,
            children=1,
            event_category=EventCategory.PRIVATE_DINNER,
            premium_add_on=Decimal("5"),
        )
        priced = apply_menu_pricing(
            booking, "menu-1", selections, menu_catalog, default_rules, clock=lambda: FIXED_NOW
        )
        assert priced.menu_pricing_snapshot.subtotal_override == Decimal("61.00")

    def test_default_clock_is_utc(self, booking, selections, menu_catalog, default_rules):
        priced = apply_menu_pricing(booking, "menu-1", selections, menu_catalog, default_rules)
        assert priced.menu_pricing_snapshot.calculated_at.tzinfo is UTC
