"""
Policy consistency checks over a rule document.

The rule document carries percentages that are expected, but not required,
to sum to 100. These checks report the mismatch as a human-readable message
and never correct it; the engines compute exactly what the document says.

Shared by ``catering_config.validator`` (whole-document review) and
``catering_engines.safety`` (checks relevant to one computed event).
"""

from __future__ import annotations

from collections.abc import Iterable

from catering_kernel.domain.rules import LaborRules, ProfitDistributionRules
from catering_kernel.domain.values import HUNDRED, ZERO, format_plain


def owner_equity_message(rules: ProfitDistributionRules) -> str | None:
    """Message when owner equity percentages do not sum to 100."""
    if not rules.owners:
        return None
    total = sum((owner.equity_percent for owner in rules.owners), start=ZERO)
    if total == HUNDRED:
        return None
    return f"Owner equity percentages sum to {format_plain(total)}%, not 100%"


def retained_split_message(rules: ProfitDistributionRules) -> str | None:
    """Message when retained + owner distribution does not sum to 100."""
    total = rules.business_retained_percent + rules.owner_distribution_percent
    if total == HUNDRED:
        return None
    return (
        f"Retained ({format_plain(rules.business_retained_percent)}%) plus owner "
        f"distribution ({format_plain(rules.owner_distribution_percent)}%) "
        f"sum to {format_plain(total)}%, not 100%"
    )


def gratuity_split_message(
    groups: Iterable[str],
    labor: LaborRules,
    context: str,
) -> str | None:
    """Message when the gratuity splits of ``groups`` do not sum to 100.

    Args:
        groups: Gratuity groups staffed together (deduplicated by caller).
        labor: Labor rules holding the split percentages.
        context: What the groups belong to, e.g. "primary default staffing".
    """
    groups = tuple(groups)
    if not groups:
        return None
    total = sum((labor.split_for(group) for group in groups), start=ZERO)
    if total == HUNDRED:
        return None
    return (
        f"Gratuity splits for {context} ({', '.join(groups)}) sum to "
        f"{format_plain(total)}%, not 100%"
    )
