"""
catering_services.booking_financials -- Financials for stored booking records.

Responsibility:
    Turns a booking record into an ``EventInput``, picks the pricing source
    (the booking's frozen menu snapshot when it has one, the rule formula
    otherwise) and runs the financial facade. Also freezes a guest menu into
    a ``MenuPricingSnapshot`` for a booking.

Architecture position:
    Services -- orchestration over engines + kernel. This is the layer
    that may read the wall clock; engines receive timestamps as arguments.

Invariants enforced:
    - A booking with a menu snapshot is always priced from the snapshot:
      its subtotal and food cost replace the formula figures.
    - Applying a snapshot never mutates the booking; a new record is
      returned.

Failure modes:
    - ``UnknownEventCategoryError`` / ``UnknownPricingSlotError`` from
      ``BookingRecord.from_mapping`` when the stored category or slot
      cannot be interpreted.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from catering_engines.financials import EventFinancials, calculate_event_financials
from catering_engines.menu_pricing import (
    GuestMenuSelection,
    MenuCatalogItem,
    MenuPricingSnapshot,
    build_menu_pricing_snapshot,
)
from catering_kernel.domain.event import (
    EventInput,
    StaffPayOverride,
    parse_event_category,
    parse_pricing_slot,
)
from catering_kernel.domain.rules import EventCategory, PricingSlot, RuleConfiguration
from catering_kernel.domain.values import ZERO, to_amount, to_non_negative
from catering_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.booking_financials")


class PricingSource(str, Enum):
    """Where a booking's subtotal and food cost come from."""

    RULES = "rules"
    MENU = "menu"


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _snapshot_from_mapping(data: Mapping[str, Any] | None) -> MenuPricingSnapshot | None:
    if not data:
        return None
    calculated_at = _pick(data, "calculated_at", "calculatedAt")
    if isinstance(calculated_at, str):
        calculated_at = datetime.fromisoformat(calculated_at.replace("Z", "+00:00"))
    return MenuPricingSnapshot(
        menu_id=str(_pick(data, "menu_id", "menuId") or ""),
        subtotal_override=to_non_negative(_pick(data, "subtotal_override", "subtotalOverride")),
        food_cost_override=to_non_negative(
            _pick(data, "food_cost_override", "foodCostOverride")
        ),
        calculated_at=calculated_at,
    )


@dataclass(frozen=True)
class BookingRecord:
    """The slice of a stored booking the financial engine needs."""

    booking_id: str
    adults: int
    children: int
    event_category: EventCategory
    event_date: date | None = None
    distance_miles: Decimal = ZERO
    premium_add_on: Decimal = ZERO
    pricing_slot: PricingSlot | None = None
    staffing_profile_id: str | None = None
    staff_pay_overrides: tuple[StaffPayOverride, ...] = ()
    menu_pricing_snapshot: MenuPricingSnapshot | None = None

    @property
    def pricing_source(self) -> PricingSource:
        if self.menu_pricing_snapshot is not None:
            return PricingSource.MENU
        return PricingSource.RULES

    def to_event_input(self) -> EventInput:
        snapshot = self.menu_pricing_snapshot
        return EventInput(
            adults=self.adults,
            children=self.children,
            event_category=self.event_category,
            distance_miles=self.distance_miles,
            premium_add_on=self.premium_add_on,
            event_date=self.event_date,
            pricing_slot=self.pricing_slot,
            staffing_profile_id=self.staffing_profile_id,
            staff_pay_overrides=self.staff_pay_overrides,
            subtotal_override=snapshot.subtotal_override if snapshot else None,
            food_cost_override=snapshot.food_cost_override if snapshot else None,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> BookingRecord:
        """Normalize a stored booking (snake_case or camelCase keys).

        ``event_date`` is an ISO date string (``YYYY-MM-DD``), read as a
        calendar date with no timezone shift.
        """
        raw_date = _pick(data, "event_date", "eventDate")
        if isinstance(raw_date, date):
            event_date = raw_date
        elif raw_date:
            event_date = date.fromisoformat(str(raw_date)[:10])
        else:
            event_date = None

        overrides: Iterable[Mapping[str, Any]] = (
            _pick(data, "staff_pay_overrides", "staffPayOverrides") or ()
        )
        return cls(
            booking_id=str(_pick(data, "booking_id", "bookingId", "id") or ""),
            adults=int(to_amount(_pick(data, "adults"))),
            children=int(to_amount(_pick(data, "children"))),
            event_category=parse_event_category(
                _pick(data, "event_category", "eventCategory", "event_type", "eventType")
            ),
            event_date=event_date,
            distance_miles=to_non_negative(_pick(data, "distance_miles", "distanceMiles")),
            premium_add_on=to_non_negative(_pick(data, "premium_add_on", "premiumAddOn")),
            pricing_slot=parse_pricing_slot(_pick(data, "pricing_slot", "pricingSlot")),
            staffing_profile_id=_pick(data, "staffing_profile_id", "staffingProfileId"),
            staff_pay_overrides=tuple(StaffPayOverride.from_mapping(o) for o in overrides),
            menu_pricing_snapshot=_snapshot_from_mapping(
                _pick(data, "menu_pricing_snapshot", "menuPricingSnapshot")
            ),
        )


@dataclass(frozen=True)
class BookingFinancials:
    financials: EventFinancials
    pricing_source: PricingSource


def calculate_booking_financials(
    booking: BookingRecord,
    rules: RuleConfiguration,
) -> BookingFinancials:
    """
    Price a booking.

    Postconditions:
        - ``pricing_source`` is ``MENU`` iff the booking carries a snapshot,
          in which case ``financials.subtotal`` equals the snapshot's
          subtotal and ``financials.food_cost`` its food cost.
    """
    with LogContext.bind(booking_id=booking.booking_id or None):
        financials = calculate_event_financials(booking.to_event_input(), rules)
        logger.info(
            "booking_financials_calculated",
            extra={
                "pricing_source": booking.pricing_source.value,
                "gross_profit": financials.gross_profit,
            },
        )
    return BookingFinancials(financials=financials, pricing_source=booking.pricing_source)


def apply_menu_pricing(
    booking: BookingRecord,
    menu_id: str,
    selections: Sequence[GuestMenuSelection],
    catalog: Iterable[MenuCatalogItem],
    rules: RuleConfiguration,
    clock: Callable[[], datetime] | None = None,
) -> BookingRecord:
    """
    Freeze a guest menu onto a booking.

    The child discount comes from the rules; the booking's premium add-on
    is charged per guest. ``clock`` defaults to the current UTC time.
    """
    now = (clock or (lambda: datetime.now(UTC)))()
    with LogContext.bind(booking_id=booking.booking_id or None, menu_id=menu_id):
        snapshot = build_menu_pricing_snapshot(
            menu_id,
            selections,
            catalog,
            calculated_at=now,
            child_discount_percent=rules.pricing.child_discount_percent,
            premium_add_on_per_guest=booking.premium_add_on,
        )
        logger.info(
            "menu_pricing_snapshot_applied",
            extra={
                "subtotal_override": snapshot.subtotal_override,
                "food_cost_override": snapshot.food_cost_override,
            },
        )
    return dataclasses.replace(booking, menu_pricing_snapshot=snapshot)
