"""
Rule document types -- the business rules every calculation reads.

Responsibility:
    Defines the frozen sub-configurations that together make up a
    ``RuleConfiguration``: pricing, staffing, labor, costs, distance,
    profit distribution and safety limits. Pure data; no behavior beyond
    small lookups.

Architecture position:
    Kernel > Domain -- pure data, zero I/O. Built by ``catering_config``
    and read by every engine in ``catering_engines``.

Invariants enforced:
    - Immutability: every type is a frozen dataclass and collections are
      tuples or read-only mappings, so one document can be shared by
      concurrent calculations.
    - No eager validation: percentages that do not sum to 100 are kept
      exactly as configured. ``catering_config.validator`` reports them
      as warnings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType

#: Upper guest bound that staffing profiles use to mean "no upper bound".
UNBOUNDED_GUESTS = 9999

#: Event-category wildcard accepted by staffing profiles.
ANY_CATEGORY = "any"


class EventCategory(str, Enum):
    """Type of catered event."""

    PRIVATE_DINNER = "private-dinner"
    BUFFET = "buffet"


class PricingSlot(str, Enum):
    """Which of the two configured price/cost/staffing columns applies."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


class RoleTag(str, Enum):
    """Role tags shipped with the default document.

    Role tags are open strings; custom documents may add their own.
    """

    LEAD = "lead"
    FULL = "full"
    BUFFET = "buffet"
    ASSISTANT = "assistant"


def _frozen_mapping(data: Mapping | None) -> Mapping:
    return MappingProxyType(dict(data or {}))


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PricingRules:
    """Per-guest prices and default percentages.

    ``premium_add_on_min`` / ``premium_add_on_max`` are advisory bounds for
    the booking form; the engine charges whatever add-on the event carries.
    """

    primary_base_price: Decimal = Decimal("60")
    secondary_base_price: Decimal = Decimal("32")
    premium_add_on_min: Decimal = Decimal("5")
    premium_add_on_max: Decimal = Decimal("20")
    default_gratuity_percent: Decimal = Decimal("20")
    child_discount_percent: Decimal = Decimal("50")
    default_deposit_percent: Decimal = Decimal("30")

    def base_price_for(self, slot: PricingSlot) -> Decimal:
        if slot is PricingSlot.PRIMARY:
            return self.primary_base_price
        return self.secondary_base_price


# ---------------------------------------------------------------------------
# Staffing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SlotStaffing:
    """Default staffing rule for one pricing slot.

    Used when no staffing profile matches: ``ceil(guests / max_guests_per_chef)``
    chefs, the first tagged ``lead_role`` and the rest ``overflow_role``.
    """

    max_guests_per_chef: int
    assistant_required: bool
    lead_role: str
    overflow_role: str


@dataclass(frozen=True)
class StaffingProfile:
    """Named rule mapping an event category and guest range to a role list."""

    id: str
    name: str
    event_category: str
    min_guests: int
    max_guests: int
    roles: tuple[str, ...]

    def matches(self, event_category: str, guest_count: int) -> bool:
        category_match = self.event_category in (event_category, ANY_CATEGORY)
        if not category_match or guest_count < self.min_guests:
            return False
        if self.max_guests >= UNBOUNDED_GUESTS:
            return True
        return guest_count <= self.max_guests


@dataclass(frozen=True)
class StaffingRules:
    """Default per-slot staffing rules plus ordered staffing profiles."""

    primary: SlotStaffing = field(
        default_factory=lambda: SlotStaffing(
            max_guests_per_chef=15,
            assistant_required=True,
            lead_role=RoleTag.LEAD.value,
            overflow_role=RoleTag.FULL.value,
        )
    )
    secondary: SlotStaffing = field(
        default_factory=lambda: SlotStaffing(
            max_guests_per_chef=25,
            assistant_required=False,
            lead_role=RoleTag.BUFFET.value,
            overflow_role=RoleTag.BUFFET.value,
        )
    )
    profiles: tuple[StaffingProfile, ...] = ()

    def for_slot(self, slot: PricingSlot) -> SlotStaffing:
        if slot is PricingSlot.PRIMARY:
            return self.primary
        return self.secondary

    def profile_by_id(self, profile_id: str) -> StaffingProfile | None:
        for profile in self.profiles:
            if profile.id == profile_id:
                return profile
        return None


# ---------------------------------------------------------------------------
# Labor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RoleLaborRule:
    """Pay rule for one role tag.

    Attributes:
        base_percent: Base pay as a percentage of the subtotal.
        cap_percent: Payout ceiling as a percentage of subtotal + gratuity.
            ``None`` or ``0`` means uncapped.
        gratuity_group: Gratuity pool group this role draws from.
        cap_amount: Payout ceiling as a flat amount per event; wins over
            ``cap_percent`` when set.
    """

    base_percent: Decimal
    cap_percent: Decimal | None = None
    gratuity_group: str = "chef"
    cap_amount: Decimal | None = None


_DEFAULT_ROLE_RULES = {
    RoleTag.LEAD.value: RoleLaborRule(Decimal("15"), None, "chef"),
    RoleTag.FULL.value: RoleLaborRule(Decimal("10"), None, "chef"),
    RoleTag.ASSISTANT.value: RoleLaborRule(Decimal("8"), None, "assistant"),
    RoleTag.BUFFET.value: RoleLaborRule(Decimal("12"), None, "buffet"),
}

_DEFAULT_GRATUITY_SPLITS = {
    "chef": Decimal("55"),
    "assistant": Decimal("45"),
    "buffet": Decimal("100"),
}


@dataclass(frozen=True)
class LaborRules:
    """Per-role pay rules and the gratuity split per role group."""

    roles: Mapping[str, RoleLaborRule] = field(
        default_factory=lambda: _frozen_mapping(_DEFAULT_ROLE_RULES)
    )
    gratuity_splits: Mapping[str, Decimal] = field(
        default_factory=lambda: _frozen_mapping(_DEFAULT_GRATUITY_SPLITS)
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "roles", _frozen_mapping(self.roles))
        object.__setattr__(self, "gratuity_splits", _frozen_mapping(self.gratuity_splits))

    def rule_for(self, role: str) -> RoleLaborRule:
        """Rule for ``role``; unknown roles earn nothing and are uncapped."""
        return self.roles.get(role, RoleLaborRule(Decimal("0"), None, role))

    def split_for(self, group: str) -> Decimal:
        return self.gratuity_splits.get(group, Decimal("0"))


# ---------------------------------------------------------------------------
# Costs and distance
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CostRules:
    """Operating cost percentages (of subtotal) and the flat stipend."""

    primary_food_cost_percent: Decimal = Decimal("18")
    secondary_food_cost_percent: Decimal = Decimal("20")
    supplies_cost_percent: Decimal = Decimal("7")
    transportation_stipend: Decimal = Decimal("50")

    def food_cost_percent_for(self, slot: PricingSlot) -> Decimal:
        if slot is PricingSlot.PRIMARY:
            return self.primary_food_cost_percent
        return self.secondary_food_cost_percent


@dataclass(frozen=True)
class DistanceRules:
    """Travel fee schedule."""

    free_distance_miles: Decimal = Decimal("20")
    base_distance_fee: Decimal = Decimal("50")
    additional_fee_per_increment: Decimal = Decimal("25")
    increment_miles: Decimal = Decimal("5")


# ---------------------------------------------------------------------------
# Profit distribution and safety
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Owner:
    id: str
    name: str
    equity_percent: Decimal


@dataclass(frozen=True)
class ProfitDistributionRules:
    """How gross profit is split between the business and its owners."""

    business_retained_percent: Decimal = Decimal("30")
    owner_distribution_percent: Decimal = Decimal("70")
    owners: tuple[Owner, ...] = (
        Owner("owner-a", "Owner A", Decimal("40")),
        Owner("owner-b", "Owner B", Decimal("60")),
    )
    distribution_frequency: str = "monthly"


@dataclass(frozen=True)
class SafetyLimits:
    """Advisory ceilings; breaching them only produces warnings."""

    max_total_labor_percent: Decimal = Decimal("30")
    max_food_cost_percent: Decimal = Decimal("30")
    warn_when_exceeded: bool = True


# ---------------------------------------------------------------------------
# Document
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleConfiguration:
    """The complete business-rules document, one sub-config per concern."""

    pricing: PricingRules = field(default_factory=PricingRules)
    staffing: StaffingRules = field(default_factory=StaffingRules)
    labor: LaborRules = field(default_factory=LaborRules)
    costs: CostRules = field(default_factory=CostRules)
    distance: DistanceRules = field(default_factory=DistanceRules)
    profit_distribution: ProfitDistributionRules = field(
        default_factory=ProfitDistributionRules
    )
    safety_limits: SafetyLimits = field(default_factory=SafetyLimits)
