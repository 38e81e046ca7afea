"""
Module: catering_engines
Responsibility:
    Package entrypoint that re-exports all public symbols from the pure
    calculation engine sub-modules. This is the canonical import surface
    for higher layers (catering_services, scripts).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import catering_kernel (and sibling engine modules).
    MUST NOT import catering_config or catering_services.

Invariants enforced:
    - Purity: engines never read the clock, the environment or files.
      Timestamps (menu snapshots) are passed in by the caller.
    - Decimal-only arithmetic for every amount and percentage.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Every public engine invocation is traced via ``@traced_engine`` (see
    ``catering_engines.tracer``), emitting CATERING_ENGINE_TRACE log
    records with engine name, version, input fingerprint and duration.
"""

from catering_kernel.logging_config import get_logger

logger = get_logger("engines")

from catering_engines.distribution import (
    ProfitDistribution,
    calculate_gross_profit,
    distribute_profit,
)
from catering_engines.financials import (
    EventFinancials,
    calculate_event_financials,
)
from catering_engines.labor import (
    LaborCompensationEntry,
    LaborSummary,
    apply_cap,
    calculate_labor,
    resolve_cap,
)
from catering_engines.menu_pricing import (
    GuestMenuSelection,
    GuestPricingLine,
    MenuCatalogItem,
    MenuPricingBreakdown,
    MenuPricingSnapshot,
    build_menu_pricing_snapshot,
    calculate_menu_pricing,
)
from catering_engines.revenue import (
    OperatingCosts,
    RevenueResult,
    calculate_distance_fee,
    calculate_operating_costs,
    calculate_revenue,
    calculate_subtotal,
)
from catering_engines.safety import (
    SafetyRatios,
    calculate_ratios,
    collect_warnings,
)
from catering_engines.staffing import (
    StaffingPlan,
    StaffSlot,
    find_matching_profile,
    resolve_staffing_plan,
)

__all__ = [
    # Facade
    "EventFinancials",
    "calculate_event_financials",
    # Revenue & costs
    "RevenueResult",
    "OperatingCosts",
    "calculate_subtotal",
    "calculate_distance_fee",
    "calculate_revenue",
    "calculate_operating_costs",
    # Staffing
    "StaffSlot",
    "StaffingPlan",
    "find_matching_profile",
    "resolve_staffing_plan",
    # Labor
    "LaborCompensationEntry",
    "LaborSummary",
    "calculate_labor",
    "resolve_cap",
    "apply_cap",
    # Profit
    "ProfitDistribution",
    "calculate_gross_profit",
    "distribute_profit",
    # Safety
    "SafetyRatios",
    "calculate_ratios",
    "collect_warnings",
    # Menu pricing
    "MenuCatalogItem",
    "GuestMenuSelection",
    "GuestPricingLine",
    "MenuPricingBreakdown",
    "MenuPricingSnapshot",
    "calculate_menu_pricing",
    "build_menu_pricing_snapshot",
]

logger.debug("engines_package_loaded", extra={
    "module_count": 7,
    "modules": [
        "revenue", "staffing", "labor", "distribution",
        "safety", "menu_pricing", "financials",
    ],
})
