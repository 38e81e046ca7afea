"""
Module: catering_engines.staffing
Responsibility:
    Resolve the staffing plan for an event: which roles must be filled,
    whether an assistant is needed, and the total head count. Each slot
    receives a stable ``slot_index`` so per-slot pay overrides can be
    matched without counting same-role occurrences.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Algorithm:
    1. An explicit staffing-profile id wins when the profile exists; an
       unknown id falls through to matching.
    2. Otherwise the first configured profile whose category matches
       (exact or ``any``) and whose inclusive guest range contains the
       guest count is used. Configuration order is authoritative.
    3. Otherwise the slot's default rule applies:
       ``ceil(guests / max_guests_per_chef)`` chefs, the first tagged with
       the lead role and the rest with the overflow role, plus an assistant
       slot when the slot requires one. A distinct lead role is always
       staffed; otherwise an empty event gets no chefs.

Failure modes:
    - None. ``max_guests_per_chef <= 0`` is treated as 1.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal

from catering_engines.tracer import traced_engine
from catering_kernel.domain.rules import (
    LaborRules,
    PricingSlot,
    RoleTag,
    RuleConfiguration,
    SlotStaffing,
    StaffingProfile,
    StaffingRules,
)
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.staffing")

_LEGACY_ROLE_ALIASES = {"overflow": RoleTag.FULL.value}


@dataclass(frozen=True)
class StaffSlot:
    """One position to fill, identified by its place in the plan."""

    slot_index: int
    role: str
    gratuity_group: str

    @property
    def is_assistant(self) -> bool:
        return self.role == RoleTag.ASSISTANT.value


@dataclass(frozen=True)
class StaffingPlan:
    """Resolved staffing for one event. Derived fresh on every call."""

    slots: tuple[StaffSlot, ...]
    matched_profile_id: str | None = None
    matched_profile_name: str | None = None

    @property
    def roles(self) -> tuple[str, ...]:
        return tuple(slot.role for slot in self.slots)

    @property
    def chef_roles(self) -> tuple[str, ...]:
        return tuple(slot.role for slot in self.slots if not slot.is_assistant)

    @property
    def assistant_needed(self) -> bool:
        return any(slot.is_assistant for slot in self.slots)

    @property
    def total_staff_count(self) -> int:
        return len(self.slots)

    def slots_for_role(self, role: str | None) -> tuple[StaffSlot, ...]:
        """Slots tagged ``role``, in plan order."""
        return tuple(slot for slot in self.slots if slot.role == role)

    def group_size(self, group: str) -> int:
        """Number of slots drawing from gratuity group ``group``."""
        return sum(1 for slot in self.slots if slot.gratuity_group == group)

    @property
    def gratuity_groups(self) -> tuple[str, ...]:
        """Groups present in the plan, in first-appearance order."""
        seen: dict[str, None] = {}
        for slot in self.slots:
            seen.setdefault(slot.gratuity_group, None)
        return tuple(seen)


def find_matching_profile(
    staffing: StaffingRules,
    event_category: str,
    guest_count: int,
    staffing_profile_id: str | None = None,
) -> StaffingProfile | None:
    """
    Profile for an event, or ``None`` when the default rule should apply.

    First match wins: when several profiles cover the same guest count,
    the one listed first in the configuration is returned.
    """
    if staffing_profile_id:
        explicit = staffing.profile_by_id(staffing_profile_id)
        if explicit is not None:
            return explicit
        logger.debug(
            "staffing_profile_not_found",
            extra={"staffing_profile_id": staffing_profile_id},
        )

    for profile in staffing.profiles:
        if profile.matches(event_category, guest_count):
            return profile
    return None


def _build_slots(roles: list[str], labor: LaborRules) -> tuple[StaffSlot, ...]:
    return tuple(
        StaffSlot(
            slot_index=index,
            role=role,
            gratuity_group=labor.rule_for(role).gratuity_group,
        )
        for index, role in enumerate(roles)
    )


def chefs_needed(guest_count: int, max_guests_per_chef: int) -> int:
    """``ceil(guests / max_per_chef)``; zero guests need zero chefs."""
    per_chef = max(max_guests_per_chef, 1)
    needed = (Decimal(guest_count) / Decimal(per_chef)).to_integral_value(
        rounding=ROUND_CEILING
    )
    return max(int(needed), 0)


def default_roles(guest_count: int, rule: SlotStaffing) -> list[str]:
    """Role list from the per-chef capacity rule.

    A rule with a distinct lead role always staffs its lead, even for an
    empty event. A rule whose lead and overflow roles coincide staffs
    exactly ``chefs_needed`` chefs.
    """
    count = chefs_needed(guest_count, rule.max_guests_per_chef)
    if rule.lead_role != rule.overflow_role:
        count = max(count, 1)
    roles = [rule.lead_role] * min(count, 1) + [rule.overflow_role] * max(count - 1, 0)
    if rule.assistant_required:
        roles.append(RoleTag.ASSISTANT.value)
    return roles


@traced_engine(
    "staffing", "1.0",
    fingerprint_fields=("guest_count", "event_category", "slot", "staffing_profile_id"),
)
def resolve_staffing_plan(
    guest_count: int,
    event_category: str,
    slot: PricingSlot,
    rules: RuleConfiguration,
    staffing_profile_id: str | None = None,
) -> StaffingPlan:
    """
    Staffing plan for ``guest_count`` guests of ``event_category``.

    Postconditions:
        - ``slot_index`` values are 0..n-1 in plan order.
        - A matched profile's role list is used verbatim (legacy
          ``overflow`` tags read as ``full``).
    """
    profile = find_matching_profile(
        rules.staffing, event_category, guest_count, staffing_profile_id
    )

    if profile is not None:
        roles = [_LEGACY_ROLE_ALIASES.get(role, role) for role in profile.roles]
        logger.debug(
            "staffing_profile_matched",
            extra={"profile_id": profile.id, "roles": roles},
        )
        return StaffingPlan(
            slots=_build_slots(roles, rules.labor),
            matched_profile_id=profile.id,
            matched_profile_name=profile.name,
        )

    roles = default_roles(guest_count, rules.staffing.for_slot(slot))
    logger.debug(
        "staffing_default_rule",
        extra={"pricing_slot": slot.value, "guest_count": guest_count, "roles": roles},
    )
    return StaffingPlan(slots=_build_slots(roles, rules.labor))
