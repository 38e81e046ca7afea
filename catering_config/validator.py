"""
Rules Validator (``catering_config.validator``).

Responsibility
--------------
Reviews a ``RuleConfiguration`` for inconsistencies a human should look at:
percentages that should sum to 100 but do not, unusable staffing ranges,
duplicate identifiers.

Architecture position
---------------------
**Config layer** -- load-time review. Called by
``catering_config.get_active_rules()`` after loading. Has no dependency on
engines or services.

Invariants enforced
-------------------
* Review, not rejection: every finding is a warning. Engines compute
  exactly what the document says even when it is inconsistent, and the
  loader never refuses a structurally sound document.
* ``errors`` exists for parity with ``warnings`` and stays empty for any
  document the loader can produce.

Failure modes
-------------
* None. The validator reports; it never raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from catering_kernel.domain.policy import (
    gratuity_split_message,
    owner_equity_message,
    retained_split_message,
)
from catering_kernel.domain.rules import (
    PricingSlot,
    RoleTag,
    RuleConfiguration,
    SlotStaffing,
)
from catering_kernel.domain.values import ZERO, format_plain


@dataclass
class RuleValidationResult:
    """
    Result of rule document review.

    Contract
    --------
    * ``is_valid`` returns ``True`` only when ``errors`` is empty.
    * Warnings never block use of the document.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str | None) -> None:
        if msg:
            self.warnings.append(msg)


def validate_rules(rules: RuleConfiguration) -> RuleValidationResult:
    """
    Review a rule document.

    Postconditions:
        - Returns a ``RuleValidationResult``; findings are warnings.
    """
    result = RuleValidationResult()

    _validate_profit_distribution(rules, result)
    _validate_default_staffing(rules, result)
    _validate_profiles(rules, result)
    _validate_pricing(rules, result)
    _validate_distance(rules, result)

    return result


def _validate_profit_distribution(
    rules: RuleConfiguration, result: RuleValidationResult
) -> None:
    """Equity and retained/distribution sums; owner id uniqueness."""
    pd = rules.profit_distribution
    result.add_warning(owner_equity_message(pd))
    result.add_warning(retained_split_message(pd))

    seen: set[str] = set()
    for owner in pd.owners:
        if owner.id in seen:
            result.add_warning(f"Duplicate owner id: {owner.id!r}")
        seen.add(owner.id)


def _slot_groups(rules: RuleConfiguration, slot_rule: SlotStaffing) -> list[str]:
    roles = [slot_rule.lead_role, slot_rule.overflow_role]
    if slot_rule.assistant_required:
        roles.append(RoleTag.ASSISTANT.value)
    groups: dict[str, None] = {}
    for role in roles:
        groups.setdefault(rules.labor.rule_for(role).gratuity_group, None)
    return list(groups)


def _validate_default_staffing(
    rules: RuleConfiguration, result: RuleValidationResult
) -> None:
    """Per-slot capacity and the gratuity groups the default rule staffs."""
    for slot in PricingSlot:
        slot_rule = rules.staffing.for_slot(slot)
        if slot_rule.max_guests_per_chef <= 0:
            result.add_warning(
                f"{slot.value} staffing: max guests per chef is "
                f"{slot_rule.max_guests_per_chef}; one chef per guest will be assumed"
            )
        result.add_warning(
            gratuity_split_message(
                _slot_groups(rules, slot_rule),
                rules.labor,
                f"{slot.value} default staffing",
            )
        )


def _validate_profiles(rules: RuleConfiguration, result: RuleValidationResult) -> None:
    """Profile ranges, ids, role tags and gratuity coverage."""
    seen: set[str] = set()
    for profile in rules.staffing.profiles:
        if profile.id in seen:
            result.add_warning(
                f"Duplicate staffing profile id: {profile.id!r}; "
                "only the first can be selected explicitly"
            )
        seen.add(profile.id)

        if profile.min_guests > profile.max_guests:
            result.add_warning(
                f"Staffing profile {profile.id!r}: min guests ({profile.min_guests}) "
                f"exceeds max guests ({profile.max_guests}); it can never match"
            )
        if not profile.roles:
            result.add_warning(f"Staffing profile {profile.id!r} has no roles")

        groups: dict[str, None] = {}
        for role in profile.roles:
            if role not in rules.labor.roles:
                result.add_warning(
                    f"Staffing profile {profile.id!r} uses role {role!r} "
                    "with no labor rule; it will be paid nothing"
                )
            groups.setdefault(rules.labor.rule_for(role).gratuity_group, None)
        result.add_warning(
            gratuity_split_message(groups, rules.labor, f"staffing profile '{profile.id}'")
        )


def _validate_pricing(rules: RuleConfiguration, result: RuleValidationResult) -> None:
    pricing = rules.pricing
    if pricing.premium_add_on_min > pricing.premium_add_on_max:
        result.add_warning(
            f"Premium add-on minimum ({format_plain(pricing.premium_add_on_min)}) "
            f"exceeds maximum ({format_plain(pricing.premium_add_on_max)})"
        )
    for label, price in (
        ("primary", pricing.primary_base_price),
        ("secondary", pricing.secondary_base_price),
    ):
        if price < ZERO:
            result.add_warning(f"{label} base price is negative ({format_plain(price)})")


def _validate_distance(rules: RuleConfiguration, result: RuleValidationResult) -> None:
    if rules.distance.increment_miles <= ZERO:
        result.add_warning(
            f"Distance increment is {format_plain(rules.distance.increment_miles)} miles; "
            "every trip beyond the free distance counts as one increment"
        )
