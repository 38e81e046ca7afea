"""
Catering kernel domain: rule document types, event inputs and Decimal helpers.

Pure data and pure functions; nothing in this package performs I/O.
"""

from catering_kernel.domain.event import (
    EventInput,
    StaffPayOverride,
    parse_event_category,
    parse_pricing_slot,
)
from catering_kernel.domain.rules import (
    ANY_CATEGORY,
    UNBOUNDED_GUESTS,
    CostRules,
    DistanceRules,
    EventCategory,
    LaborRules,
    Owner,
    PricingRules,
    PricingSlot,
    ProfitDistributionRules,
    RoleLaborRule,
    RoleTag,
    RuleConfiguration,
    SafetyLimits,
    SlotStaffing,
    StaffingProfile,
    StaffingRules,
)
from catering_kernel.domain.values import (
    HUNDRED,
    ZERO,
    percent_of,
    round_money,
    safe_ratio_percent,
    to_amount,
    to_non_negative,
    to_optional_amount,
)

__all__ = [
    # Event input
    "EventInput",
    "StaffPayOverride",
    "parse_event_category",
    "parse_pricing_slot",
    # Rule document
    "ANY_CATEGORY",
    "UNBOUNDED_GUESTS",
    "CostRules",
    "DistanceRules",
    "EventCategory",
    "LaborRules",
    "Owner",
    "PricingRules",
    "PricingSlot",
    "ProfitDistributionRules",
    "RoleLaborRule",
    "RoleTag",
    "RuleConfiguration",
    "SafetyLimits",
    "SlotStaffing",
    "StaffingProfile",
    "StaffingRules",
    # Values
    "HUNDRED",
    "ZERO",
    "percent_of",
    "round_money",
    "safe_ratio_percent",
    "to_amount",
    "to_non_negative",
    "to_optional_amount",
]
