"""
Module: catering_engines.distribution
Responsibility:
    Gross profit and its split into retained earnings and owner
    distributions.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - ``gross_profit == total_charged - total_costs - total_labor_paid``
      exactly. Because labor is taken at its capped value, capped excess
      remains in gross profit with no separate bookkeeping step.
    - No normalization: retained + distribution percentages, and owner
      equity percentages, are applied exactly as configured even when they
      do not sum to 100.
    - Gross profit may be negative; the split is applied to it unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType

from catering_engines.tracer import traced_engine
from catering_kernel.domain.rules import ProfitDistributionRules
from catering_kernel.domain.values import percent_of
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.distribution")


@dataclass(frozen=True)
class ProfitDistribution:
    gross_profit: Decimal
    retained_percent: Decimal
    retained_amount: Decimal
    distribution_percent: Decimal
    distribution_amount: Decimal
    owner_distributions: Mapping[str, Decimal]


def calculate_gross_profit(
    total_charged: Decimal,
    total_costs: Decimal,
    total_labor_paid: Decimal,
) -> Decimal:
    return total_charged - total_costs - total_labor_paid


@traced_engine(
    "profit_distribution", "1.0",
    fingerprint_fields=("gross_profit",),
)
def distribute_profit(
    gross_profit: Decimal,
    rules: ProfitDistributionRules,
) -> ProfitDistribution:
    """
    Split ``gross_profit`` per the configured percentages.

    Owner amounts are ``distributable * equity% / 100`` in configured
    owner order, keyed by owner id.
    """
    retained = percent_of(gross_profit, rules.business_retained_percent)
    distributable = percent_of(gross_profit, rules.owner_distribution_percent)

    owners: dict[str, Decimal] = {}
    for owner in rules.owners:
        owners[owner.id] = percent_of(distributable, owner.equity_percent)

    logger.debug(
        "profit_distributed",
        extra={
            "gross_profit": gross_profit,
            "retained_amount": retained,
            "distribution_amount": distributable,
            "owner_count": len(owners),
        },
    )

    return ProfitDistribution(
        gross_profit=gross_profit,
        retained_percent=rules.business_retained_percent,
        retained_amount=retained,
        distribution_percent=rules.owner_distribution_percent,
        distribution_amount=distributable,
        owner_distributions=MappingProxyType(owners),
    )
