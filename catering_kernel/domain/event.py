"""
Event input types -- what a single financial calculation is asked about.

Responsibility:
    ``EventInput`` carries guest counts, category, distance, add-ons and the
    optional per-event overrides (staffing profile, per-slot pay, subtotal /
    food cost / gratuity percent). ``from_mapping`` is the boundary where raw
    booking data (strings, floats, NaN from an upstream parse failure) is
    normalized into finite Decimals before any engine sees it.

Architecture position:
    Kernel > Domain -- pure data, zero I/O.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from catering_kernel.domain.rules import EventCategory, PricingSlot
from catering_kernel.domain.values import (
    ZERO,
    to_amount,
    to_non_negative,
    to_optional_amount,
)
from catering_kernel.exceptions import (
    UnknownEventCategoryError,
    UnknownPricingSlotError,
)

_CATEGORY_ALIASES = {
    "private-dinner": EventCategory.PRIVATE_DINNER,
    "private": EventCategory.PRIVATE_DINNER,
    "primary": EventCategory.PRIVATE_DINNER,
    "buffet": EventCategory.BUFFET,
    "secondary": EventCategory.BUFFET,
}


def parse_event_category(value: Any) -> EventCategory:
    """Interpret a raw category string (``private_dinner`` -> PRIVATE_DINNER).

    Raises:
        UnknownEventCategoryError: if the value names no known category.
    """
    if isinstance(value, EventCategory):
        return value
    key = str(value or "").strip().lower().replace("_", "-").replace(" ", "-")
    try:
        return _CATEGORY_ALIASES[key]
    except KeyError:
        raise UnknownEventCategoryError(str(value)) from None


def parse_pricing_slot(value: Any) -> PricingSlot | None:
    """Interpret an optional pricing slot; ``None``/empty means "derive"."""
    if value is None or value == "":
        return None
    if isinstance(value, PricingSlot):
        return value
    try:
        return PricingSlot(str(value).strip().lower())
    except ValueError:
        raise UnknownPricingSlotError(str(value)) from None


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _to_count(value: Any) -> int:
    return int(to_amount(value))


def _to_slot_index(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return _to_count(value)


def _parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class StaffPayOverride:
    """Per-event pay override for one staffing slot.

    Addressed by ``slot_index`` -- the position the staffing resolver
    assigned to the slot -- when one is given; ``role`` must then equal the
    slot's role or the override is ignored. Without a ``slot_index`` the
    Nth override naming a role applies to the Nth slot of that role, which
    is how stored bookings record them. Every field left as ``None`` falls
    back to the rule document.

    Attributes:
        slot_index: 0-based position in the resolved staffing plan, or
            ``None`` to match by role occurrence.
        role: Role tag the override was written for.
        base_pay_percent: Base pay as a percentage of subtotal.
        gratuity_split_percent: This slot's share of the gratuity pool.
        cap_percent: Payout ceiling, percentage of subtotal + gratuity.
        cap_amount: Payout ceiling as an absolute amount; wins over
            ``cap_percent``.
    """

    slot_index: int | None = None
    role: str | None = None
    base_pay_percent: Decimal | None = None
    gratuity_split_percent: Decimal | None = None
    cap_percent: Decimal | None = None
    cap_amount: Decimal | None = None

    @property
    def sets_cap(self) -> bool:
        return self.cap_percent is not None or self.cap_amount is not None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StaffPayOverride:
        return cls(
            slot_index=_to_slot_index(_pick(data, "slot_index", "slotIndex")),
            role=_pick(data, "role"),
            base_pay_percent=to_optional_amount(
                _pick(data, "base_pay_percent", "basePayPercent")
            ),
            gratuity_split_percent=to_optional_amount(
                _pick(data, "gratuity_split_percent", "gratuitySplitPercent")
            ),
            cap_percent=to_optional_amount(_pick(data, "cap_percent", "capPercent")),
            cap_amount=to_optional_amount(_pick(data, "cap_amount", "capAmount")),
        )


def _valid_override(value: Any) -> Decimal | None:
    """Subtotal/food-cost overrides count only when finite and non-negative."""
    amount = to_optional_amount(value)
    if amount is None or amount < ZERO:
        return None
    return amount


@dataclass(frozen=True)
class EventInput:
    """Everything the engine needs to know about one event."""

    adults: int
    children: int
    event_category: EventCategory
    distance_miles: Decimal = ZERO
    premium_add_on: Decimal = ZERO
    event_date: date | None = None
    pricing_slot: PricingSlot | None = None
    staffing_profile_id: str | None = None
    staff_pay_overrides: tuple[StaffPayOverride, ...] = ()
    subtotal_override: Decimal | None = None
    food_cost_override: Decimal | None = None
    gratuity_percent_override: Decimal | None = None

    @property
    def guest_count(self) -> int:
        return self.adults + self.children

    @property
    def resolved_slot(self) -> PricingSlot:
        """Explicit slot if set, else private dinners price as PRIMARY."""
        if self.pricing_slot is not None:
            return self.pricing_slot
        if self.event_category == EventCategory.PRIVATE_DINNER:
            return PricingSlot.PRIMARY
        return PricingSlot.SECONDARY

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> EventInput:
        """Build an input from a raw record, normalizing numbers to finite Decimals.

        Accepts snake_case or camelCase keys. Raises
        ``UnknownEventCategoryError`` / ``UnknownPricingSlotError`` for
        category or slot strings it cannot interpret.
        """
        overrides_raw: Iterable[Mapping[str, Any]] = _pick(
            data, "staff_pay_overrides", "staffPayOverrides", default=()
        )
        return cls(
            adults=_to_count(_pick(data, "adults")),
            children=_to_count(_pick(data, "children")),
            event_category=parse_event_category(
                _pick(data, "event_category", "eventCategory", "event_type", "eventType")
            ),
            distance_miles=to_non_negative(_pick(data, "distance_miles", "distanceMiles")),
            premium_add_on=to_non_negative(_pick(data, "premium_add_on", "premiumAddOn")),
            event_date=_parse_date(_pick(data, "event_date", "eventDate")),
            pricing_slot=parse_pricing_slot(_pick(data, "pricing_slot", "pricingSlot")),
            staffing_profile_id=_pick(data, "staffing_profile_id", "staffingProfileId"),
            staff_pay_overrides=tuple(
                StaffPayOverride.from_mapping(item) for item in overrides_raw
            ),
            subtotal_override=_valid_override(
                _pick(data, "subtotal_override", "subtotalOverride")
            ),
            food_cost_override=_valid_override(
                _pick(data, "food_cost_override", "foodCostOverride")
            ),
            gratuity_percent_override=_valid_override(
                _pick(data, "gratuity_percent_override", "gratuityPercentOverride")
            ),
        )
