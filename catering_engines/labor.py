"""
Module: catering_engines.labor
Responsibility:
    Compute each staff slot's pay from the staffing plan: base pay as a
    percentage of the subtotal, a share of the gratuity pool, and an
    optional cap. Capped excess is reported but never paid.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - For every entry: ``raw_pay == base_pay + gratuity_share``.
    - When ``was_capped``: ``final_pay == cap_amount`` and
      ``excess_to_profit == raw_pay - cap_amount > 0``; otherwise
      ``final_pay == raw_pay`` and ``excess_to_profit == 0``.
    - Excess is never added anywhere. It stays inside gross profit simply
      because only ``final_pay`` is subtracted.

Resolution order per slot:
    base / gratuity split: override field > rule default.
    cap: override ``cap_amount`` > override ``cap_percent`` > role's rule
    ``cap_amount`` > role's rule ``cap_percent``. A cap of ``0`` or
    ``None`` means uncapped.
    default gratuity share: the role group's split percent divided equally
    among the plan's slots in that group.

Failure modes:
    - None. Overrides for a slot index outside the plan, whose role does
      not match the slot, or naming more slots of a role than the plan has,
      are ignored and logged.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from catering_engines.staffing import StaffingPlan, StaffSlot
from catering_engines.tracer import traced_engine
from catering_kernel.domain.event import StaffPayOverride
from catering_kernel.domain.rules import LaborRules
from catering_kernel.domain.values import ZERO, percent_of
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.labor")


@dataclass(frozen=True)
class LaborCompensationEntry:
    """Pay for one staffing slot."""

    slot_index: int
    role: str
    base_pay_percent: Decimal
    base_pay: Decimal
    gratuity_share: Decimal
    raw_pay: Decimal
    cap_amount: Decimal | None
    was_capped: bool
    excess_to_profit: Decimal
    final_pay: Decimal
    overridden: bool = False


@dataclass(frozen=True)
class LaborSummary:
    """Entries plus totals across the plan."""

    entries: tuple[LaborCompensationEntry, ...]

    @property
    def total_labor_base(self) -> Decimal:
        return sum((e.base_pay for e in self.entries), ZERO)

    @property
    def total_labor_raw(self) -> Decimal:
        return sum((e.raw_pay for e in self.entries), ZERO)

    @property
    def total_labor_paid(self) -> Decimal:
        return sum((e.final_pay for e in self.entries), ZERO)

    @property
    def total_excess_to_profit(self) -> Decimal:
        return sum((e.excess_to_profit for e in self.entries), ZERO)


def resolve_cap(
    cap_percent: Decimal | None,
    cap_amount: Decimal | None,
    cap_base: Decimal,
) -> Decimal | None:
    """Effective cap amount, or ``None`` when uncapped.

    ``cap_amount`` wins over ``cap_percent``; the percentage applies to
    ``cap_base`` (subtotal + gratuity). Zero or negative means no cap.
    """
    if cap_amount is not None:
        return cap_amount if cap_amount > ZERO else None
    if cap_percent is not None and cap_percent > ZERO:
        return percent_of(cap_base, cap_percent)
    return None


def apply_cap(raw_pay: Decimal, cap: Decimal | None) -> tuple[Decimal, bool, Decimal]:
    """Return ``(final_pay, was_capped, excess_to_profit)``."""
    if cap is not None and raw_pay > cap:
        return cap, True, raw_pay - cap
    return raw_pay, False, ZERO


def _index_overrides(
    plan: StaffingPlan,
    overrides: Sequence[StaffPayOverride],
) -> dict[int, StaffPayOverride]:
    by_slot: dict[int, StaffPayOverride] = {}
    seen_per_role: dict[str, int] = {}
    for override in overrides:
        if override.slot_index is None:
            slot = _nth_slot_for_role(plan, override.role, seen_per_role)
            if slot is None:
                logger.warning(
                    "staff_override_role_unmatched",
                    extra={
                        "override_role": override.role,
                        "role_slot_count": len(plan.slots_for_role(override.role)),
                    },
                )
                continue
            by_slot[slot.slot_index] = override
            continue

        if not 0 <= override.slot_index < plan.total_staff_count:
            logger.warning(
                "staff_override_slot_out_of_range",
                extra={
                    "slot_index": override.slot_index,
                    "staff_count": plan.total_staff_count,
                },
            )
            continue
        slot = plan.slots[override.slot_index]
        if override.role is not None and override.role != slot.role:
            logger.warning(
                "staff_override_role_mismatch",
                extra={
                    "slot_index": override.slot_index,
                    "override_role": override.role,
                    "slot_role": slot.role,
                },
            )
            continue
        by_slot[override.slot_index] = override
    return by_slot


def _nth_slot_for_role(
    plan: StaffingPlan,
    role: str | None,
    seen_per_role: dict[str, int],
) -> StaffSlot | None:
    """Next unclaimed slot of ``role``; counts are kept per role."""
    if role is None:
        return None
    occurrence = seen_per_role.get(role, 0)
    seen_per_role[role] = occurrence + 1
    candidates = plan.slots_for_role(role)
    if occurrence >= len(candidates):
        return None
    return candidates[occurrence]


def _compensate_slot(
    slot: StaffSlot,
    plan: StaffingPlan,
    subtotal: Decimal,
    gratuity: Decimal,
    labor: LaborRules,
    override: StaffPayOverride | None,
) -> LaborCompensationEntry:
    rule = labor.rule_for(slot.role)

    base_percent = rule.base_percent
    if override is not None and override.base_pay_percent is not None:
        base_percent = override.base_pay_percent

    if override is not None and override.gratuity_split_percent is not None:
        gratuity_share = percent_of(gratuity, override.gratuity_split_percent)
    else:
        group_share = percent_of(gratuity, labor.split_for(slot.gratuity_group))
        gratuity_share = group_share / plan.group_size(slot.gratuity_group)

    if override is not None and override.sets_cap:
        cap = resolve_cap(override.cap_percent, override.cap_amount, subtotal + gratuity)
    else:
        cap = resolve_cap(rule.cap_percent, rule.cap_amount, subtotal + gratuity)

    base_pay = percent_of(subtotal, base_percent)
    raw_pay = base_pay + gratuity_share
    final_pay, was_capped, excess = apply_cap(raw_pay, cap)

    if was_capped:
        logger.debug(
            "labor_cap_applied",
            extra={
                "slot_index": slot.slot_index,
                "role": slot.role,
                "raw_pay": raw_pay,
                "cap_amount": cap,
                "excess_to_profit": excess,
            },
        )

    return LaborCompensationEntry(
        slot_index=slot.slot_index,
        role=slot.role,
        base_pay_percent=base_percent,
        base_pay=base_pay,
        gratuity_share=gratuity_share,
        raw_pay=raw_pay,
        cap_amount=cap,
        was_capped=was_capped,
        excess_to_profit=excess,
        final_pay=final_pay,
        overridden=override is not None,
    )


@traced_engine(
    "labor", "1.0",
    fingerprint_fields=("plan", "subtotal", "gratuity", "overrides"),
)
def calculate_labor(
    plan: StaffingPlan,
    subtotal: Decimal,
    gratuity: Decimal,
    labor: LaborRules,
    overrides: Sequence[StaffPayOverride] = (),
) -> LaborSummary:
    """
    Pay every slot of ``plan`` in plan order.

    Args:
        plan: Resolved staffing plan.
        subtotal: Event subtotal (base for base-pay percentages).
        gratuity: Gratuity pool.
        labor: Role pay rules and gratuity splits.
        overrides: Per-slot overrides, matched by ``slot_index`` or, when
            that is absent, by role occurrence.
    """
    by_slot = _index_overrides(plan, overrides)
    entries = tuple(
        _compensate_slot(
            slot, plan, subtotal, gratuity, labor, by_slot.get(slot.slot_index)
        )
        for slot in plan.slots
    )
    return LaborSummary(entries=entries)
