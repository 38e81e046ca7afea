"""
Rule Document Loader (``catering_config.loader``).

Responsibility
--------------
Turns YAML files and raw mappings (e.g. a JSON blob saved by the settings
screen) into a typed ``RuleConfiguration``. Raw documents are partial: they
are merged over a base document (``DEFAULT_RULES`` unless told otherwise),
so a file only states what it changes.

Architecture position
---------------------
**Config layer** -- build/load tooling. Consumed by
``catering_config.get_active_rules()`` and by tests. Produces kernel
domain types; has no dependency on engines or services.

Invariants enforced
-------------------
* Bad values never override good defaults: ``null``, NaN and Infinity are
  stripped before merging, and numbers that still fail to parse fall back
  to the base value.
* Legacy field names are migrated before merging (``privateDinnerBasePrice``
  -> ``primary_base_price``, ``privateLabor`` / ``buffetLabor`` ->
  ``labor.roles``, Owner A/B equity -> ``owners``, ``overflow`` role ->
  ``full``). camelCase and snake_case keys are both accepted.
* Every parsed object is a frozen dataclass from ``catering_kernel.domain.rules``.
* ``compute_checksum`` over ``rules_to_dict`` output is
  deterministic, giving each document a stable identity.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Document root or a section that is not a mapping ->
  ``RuleConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
import math
import re
from collections.abc import Mapping
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from catering_config.defaults import DEFAULT_RULES
from catering_kernel.domain.rules import (
    UNBOUNDED_GUESTS,
    CostRules,
    DistanceRules,
    LaborRules,
    Owner,
    PricingRules,
    ProfitDistributionRules,
    RoleLaborRule,
    RoleTag,
    RuleConfiguration,
    SafetyLimits,
    SlotStaffing,
    StaffingProfile,
    StaffingRules,
)
from catering_kernel.domain.values import to_amount, to_optional_amount
from catering_kernel.exceptions import RuleConfigurationError
from catering_kernel.logging_config import get_logger

logger = get_logger("config.loader")

SECTIONS = (
    "pricing",
    "staffing",
    "labor",
    "costs",
    "distance",
    "profit_distribution",
    "safety_limits",
)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


# ---------------------------------------------------------------------------
# Raw-document helpers
# ---------------------------------------------------------------------------


def snake_case(key: str) -> str:
    """``maxGuestsPerChefPrimary`` -> ``max_guests_per_chef_primary``."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def normalize_keys(value: Any) -> Any:
    """Recursively snake_case mapping keys.

    Keys of ``labor.roles`` and ``labor.gratuity_splits`` are role/group
    tags, not field names, and are kept verbatim.
    """
    if isinstance(value, Mapping):
        result: dict[str, Any] = {}
        for key, item in value.items():
            new_key = snake_case(str(key))
            preserve_children = new_key in ("roles", "gratuity_splits") and isinstance(
                item, Mapping
            )
            if preserve_children:
                result[new_key] = {
                    str(tag): normalize_keys(entry) for tag, entry in item.items()
                }
            else:
                result[new_key] = normalize_keys(item)
        return result
    if isinstance(value, list):
        return [normalize_keys(item) for item in value]
    return value


def _is_invalid(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, Decimal):
        return not value.is_finite()
    return False


def strip_invalid(value: Any) -> Any:
    """Drop ``None`` and non-finite numbers so the base value is kept."""
    if isinstance(value, Mapping):
        return {
            key: strip_invalid(item)
            for key, item in value.items()
            if not _is_invalid(item)
        }
    if isinstance(value, list):
        return [strip_invalid(item) for item in value if not _is_invalid(item)]
    return value


def deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``overrides`` into ``base``; mappings merge, everything else replaces."""
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _rename(section: dict[str, Any], old: str, new: str) -> None:
    if old in section and new not in section:
        section[new] = section.pop(old)
    else:
        section.pop(old, None)


def _section(data: Mapping[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise RuleConfigurationError(name, f"expected a mapping, got {type(value).__name__}")
    return dict(value)


# ---------------------------------------------------------------------------
# Legacy migration
# ---------------------------------------------------------------------------


def _migrate_pricing(pricing: dict[str, Any]) -> None:
    _rename(pricing, "private_dinner_base_price", "primary_base_price")
    _rename(pricing, "base_private_per_guest", "primary_base_price")
    _rename(pricing, "buffet_base_price", "secondary_base_price")
    _rename(pricing, "premium_add_on_min_per_guest", "premium_add_on_min")
    _rename(pricing, "premium_add_on_max_per_guest", "premium_add_on_max")


def _migrate_staffing(staffing: dict[str, Any]) -> None:
    flat_to_nested = {
        "max_guests_per_chef_private": ("primary", "max_guests_per_chef"),
        "max_guests_per_chef_primary": ("primary", "max_guests_per_chef"),
        "max_guests_per_chef_buffet": ("secondary", "max_guests_per_chef"),
        "max_guests_per_chef_secondary": ("secondary", "max_guests_per_chef"),
        "assistant_required": ("primary", "assistant_required"),
        "secondary_assistant_required": ("secondary", "assistant_required"),
    }
    for flat_key, (slot, field_name) in flat_to_nested.items():
        if flat_key not in staffing:
            continue
        value = staffing.pop(flat_key)
        nested = staffing.setdefault(slot, {})
        if isinstance(nested, dict):
            nested.setdefault(field_name, value)

    profiles = staffing.get("profiles")
    if isinstance(profiles, list):
        for profile in profiles:
            if not isinstance(profile, dict):
                continue
            _rename(profile, "event_type", "event_category")
            roles = profile.get("roles")
            if isinstance(roles, list):
                profile["roles"] = [
                    RoleTag.FULL.value if role == "overflow" else role for role in roles
                ]


def _migrate_costs(costs: dict[str, Any]) -> None:
    _rename(costs, "food_cost_percent_private", "primary_food_cost_percent")
    _rename(costs, "food_cost_percent_buffet", "secondary_food_cost_percent")


def _legacy_role(
    section: Mapping[str, Any], prefix: str
) -> dict[str, Any]:
    role: dict[str, Any] = {}
    if f"{prefix}_base_percent" in section:
        role["base_percent"] = section[f"{prefix}_base_percent"]
    if f"{prefix}_cap_percent" in section:
        role["cap_percent"] = section[f"{prefix}_cap_percent"]
    if f"{prefix}_cap" in section:
        role["cap_amount"] = section[f"{prefix}_cap"]
    return role


def _migrate_labor(document: dict[str, Any]) -> None:
    """Fold ``private_labor`` / ``buffet_labor`` into ``labor``."""
    private = document.pop("private_labor", None)
    buffet = document.pop("buffet_labor", None)
    if not isinstance(private, Mapping) and not isinstance(buffet, Mapping):
        return

    legacy_roles: dict[str, Any] = {}
    legacy_splits: dict[str, Any] = {}
    if isinstance(private, Mapping):
        for tag, prefix in (
            (RoleTag.LEAD.value, "lead_chef"),
            (RoleTag.FULL.value, "full_chef"),
            (RoleTag.ASSISTANT.value, "assistant"),
        ):
            role = _legacy_role(private, prefix)
            if role:
                legacy_roles[tag] = role
        if "chef_gratuity_split_percent" in private:
            legacy_splits["chef"] = private["chef_gratuity_split_percent"]
        if "assistant_gratuity_split_percent" in private:
            legacy_splits["assistant"] = private["assistant_gratuity_split_percent"]
    if isinstance(buffet, Mapping):
        role = _legacy_role(buffet, "chef")
        if role:
            legacy_roles[RoleTag.BUFFET.value] = role

    labor = document.setdefault("labor", {})
    # Explicit new-style values win over migrated legacy ones.
    labor["roles"] = deep_merge(legacy_roles, labor.get("roles") or {})
    labor["gratuity_splits"] = deep_merge(legacy_splits, labor.get("gratuity_splits") or {})


def _migrate_profit_distribution(pd: dict[str, Any]) -> None:
    owner_a = pd.pop("owner_a_equity_percent", None)
    owner_b = pd.pop("owner_b_equity_percent", None)
    owners = pd.get("owners")
    if (owner_a is not None or owner_b is not None) and not owners:
        pd["owners"] = [
            {"id": "owner-a", "name": "Owner A", "equity_percent": owner_a if owner_a is not None else 40},
            {"id": "owner-b", "name": "Owner B", "equity_percent": owner_b if owner_b is not None else 60},
        ]


def _migrate_safety(safety: dict[str, Any]) -> None:
    _rename(safety, "private_total_labor_max_percent_of_subtotal", "max_total_labor_percent")
    _rename(safety, "food_cost_max_percent", "max_food_cost_percent")
    _rename(safety, "warn_on_breach", "warn_when_exceeded")


def migrate_legacy_fields(document: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of a snake_cased raw document with legacy names migrated."""
    migrated: dict[str, Any] = {}
    for name in SECTIONS + ("private_labor", "buffet_labor"):
        if name in document:
            migrated[name] = _section(document, name)

    if "pricing" in migrated:
        _migrate_pricing(migrated["pricing"])
    if "staffing" in migrated:
        _migrate_staffing(migrated["staffing"])
    if "costs" in migrated:
        _migrate_costs(migrated["costs"])
    _migrate_labor(migrated)
    if "profit_distribution" in migrated:
        _migrate_profit_distribution(migrated["profit_distribution"])
    if "safety_limits" in migrated:
        _migrate_safety(migrated["safety_limits"])
    return migrated


# ---------------------------------------------------------------------------
# Typed parsing (over a fully merged document)
# ---------------------------------------------------------------------------


def _dec(data: Mapping[str, Any], key: str, fallback: Decimal) -> Decimal:
    return to_amount(data.get(key), default=fallback)


def _opt_dec(data: Mapping[str, Any], key: str) -> Decimal | None:
    return to_optional_amount(data.get(key))


def _int(data: Mapping[str, Any], key: str, fallback: int) -> int:
    return int(to_amount(data.get(key), default=Decimal(fallback)))


def _bool(data: Mapping[str, Any], key: str, fallback: bool) -> bool:
    value = data.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(value, (int, float)):
        return bool(value)
    return fallback


def parse_pricing(data: Mapping[str, Any]) -> PricingRules:
    d = PricingRules()
    return PricingRules(
        primary_base_price=_dec(data, "primary_base_price", d.primary_base_price),
        secondary_base_price=_dec(data, "secondary_base_price", d.secondary_base_price),
        premium_add_on_min=_dec(data, "premium_add_on_min", d.premium_add_on_min),
        premium_add_on_max=_dec(data, "premium_add_on_max", d.premium_add_on_max),
        default_gratuity_percent=_dec(
            data, "default_gratuity_percent", d.default_gratuity_percent
        ),
        child_discount_percent=_dec(data, "child_discount_percent", d.child_discount_percent),
        default_deposit_percent=_dec(
            data, "default_deposit_percent", d.default_deposit_percent
        ),
    )


def parse_slot_staffing(data: Mapping[str, Any], fallback: SlotStaffing) -> SlotStaffing:
    return SlotStaffing(
        max_guests_per_chef=_int(data, "max_guests_per_chef", fallback.max_guests_per_chef),
        assistant_required=_bool(data, "assistant_required", fallback.assistant_required),
        lead_role=str(data.get("lead_role") or fallback.lead_role),
        overflow_role=str(data.get("overflow_role") or fallback.overflow_role),
    )


def parse_profile(data: Mapping[str, Any], index: int) -> StaffingProfile:
    """
    Parse one staffing profile.

    Role entries may be plain tags or ``{role: tag}`` mappings. A missing
    ``max_guests`` means unbounded.
    """
    roles: list[str] = []
    for entry in data.get("roles") or []:
        if isinstance(entry, Mapping):
            entry = entry.get("role")
        if entry:
            roles.append(str(entry))
    profile_id = str(data.get("id") or f"profile-{index + 1}")
    return StaffingProfile(
        id=profile_id,
        name=str(data.get("name") or profile_id),
        event_category=str(data.get("event_category") or "any"),
        min_guests=_int(data, "min_guests", 0),
        max_guests=_int(data, "max_guests", UNBOUNDED_GUESTS),
        roles=tuple(roles),
    )


def parse_staffing(data: Mapping[str, Any]) -> StaffingRules:
    d = StaffingRules()
    profiles_raw = data.get("profiles")
    if not isinstance(profiles_raw, list):
        profiles_raw = []
    return StaffingRules(
        primary=parse_slot_staffing(_section(data, "primary"), d.primary),
        secondary=parse_slot_staffing(_section(data, "secondary"), d.secondary),
        profiles=tuple(
            parse_profile(entry, index)
            for index, entry in enumerate(profiles_raw)
            if isinstance(entry, Mapping)
        ),
    )


def parse_role_rule(data: Mapping[str, Any], fallback: RoleLaborRule | None, tag: str) -> RoleLaborRule:
    base = fallback or RoleLaborRule(Decimal("0"), None, tag)
    return RoleLaborRule(
        base_percent=_dec(data, "base_percent", base.base_percent),
        cap_percent=_opt_dec(data, "cap_percent") if "cap_percent" in data else base.cap_percent,
        gratuity_group=str(data.get("gratuity_group") or base.gratuity_group),
        cap_amount=_opt_dec(data, "cap_amount") if "cap_amount" in data else base.cap_amount,
    )


def parse_labor(data: Mapping[str, Any]) -> LaborRules:
    d = LaborRules()
    roles = {
        tag: parse_role_rule(entry if isinstance(entry, Mapping) else {}, d.roles.get(tag), tag)
        for tag, entry in _section(data, "roles").items()
    }
    splits = {
        group: to_amount(value) for group, value in _section(data, "gratuity_splits").items()
    }
    return LaborRules(roles=roles, gratuity_splits=splits)


def parse_costs(data: Mapping[str, Any]) -> CostRules:
    d = CostRules()
    return CostRules(
        primary_food_cost_percent=_dec(
            data, "primary_food_cost_percent", d.primary_food_cost_percent
        ),
        secondary_food_cost_percent=_dec(
            data, "secondary_food_cost_percent", d.secondary_food_cost_percent
        ),
        supplies_cost_percent=_dec(data, "supplies_cost_percent", d.supplies_cost_percent),
        transportation_stipend=_dec(data, "transportation_stipend", d.transportation_stipend),
    )


def parse_distance(data: Mapping[str, Any]) -> DistanceRules:
    d = DistanceRules()
    return DistanceRules(
        free_distance_miles=_dec(data, "free_distance_miles", d.free_distance_miles),
        base_distance_fee=_dec(data, "base_distance_fee", d.base_distance_fee),
        additional_fee_per_increment=_dec(
            data, "additional_fee_per_increment", d.additional_fee_per_increment
        ),
        increment_miles=_dec(data, "increment_miles", d.increment_miles),
    )


def parse_owner(data: Mapping[str, Any], index: int) -> Owner:
    owner_id = str(data.get("id") or f"owner-{index + 1}")
    return Owner(
        id=owner_id,
        name=str(data.get("name") or owner_id),
        equity_percent=_dec(data, "equity_percent", Decimal("0")),
    )


def parse_profit_distribution(data: Mapping[str, Any]) -> ProfitDistributionRules:
    d = ProfitDistributionRules()
    owners_raw = data.get("owners")
    if isinstance(owners_raw, list):
        owners = tuple(
            parse_owner(entry, index)
            for index, entry in enumerate(owners_raw)
            if isinstance(entry, Mapping)
        )
    else:
        owners = d.owners
    return ProfitDistributionRules(
        business_retained_percent=_dec(
            data, "business_retained_percent", d.business_retained_percent
        ),
        owner_distribution_percent=_dec(
            data, "owner_distribution_percent", d.owner_distribution_percent
        ),
        owners=owners,
        distribution_frequency=str(
            data.get("distribution_frequency") or d.distribution_frequency
        ),
    )


def parse_safety_limits(data: Mapping[str, Any]) -> SafetyLimits:
    d = SafetyLimits()
    return SafetyLimits(
        max_total_labor_percent=_dec(
            data, "max_total_labor_percent", d.max_total_labor_percent
        ),
        max_food_cost_percent=_dec(data, "max_food_cost_percent", d.max_food_cost_percent),
        warn_when_exceeded=_bool(data, "warn_when_exceeded", d.warn_when_exceeded),
    )


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _plain(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def _slot_to_dict(slot: SlotStaffing) -> dict[str, Any]:
    return {
        "max_guests_per_chef": slot.max_guests_per_chef,
        "assistant_required": slot.assistant_required,
        "lead_role": slot.lead_role,
        "overflow_role": slot.overflow_role,
    }


def rules_to_dict(rules: RuleConfiguration) -> dict[str, Any]:
    """
    Plain snake_case rendition of a document (Decimals as strings).

    ``rules_from_dict(rules_to_dict(r)) == r`` for any document ``r``.
    """
    staffing = rules.staffing
    return {
        "pricing": {
            "primary_base_price": _plain(rules.pricing.primary_base_price),
            "secondary_base_price": _plain(rules.pricing.secondary_base_price),
            "premium_add_on_min": _plain(rules.pricing.premium_add_on_min),
            "premium_add_on_max": _plain(rules.pricing.premium_add_on_max),
            "default_gratuity_percent": _plain(rules.pricing.default_gratuity_percent),
            "child_discount_percent": _plain(rules.pricing.child_discount_percent),
            "default_deposit_percent": _plain(rules.pricing.default_deposit_percent),
        },
        "staffing": {
            "primary": _slot_to_dict(staffing.primary),
            "secondary": _slot_to_dict(staffing.secondary),
            "profiles": [
                {
                    "id": p.id,
                    "name": p.name,
                    "event_category": p.event_category,
                    "min_guests": p.min_guests,
                    "max_guests": p.max_guests,
                    "roles": list(p.roles),
                }
                for p in staffing.profiles
            ],
        },
        "labor": {
            "roles": {
                tag: {
                    "base_percent": _plain(rule.base_percent),
                    "cap_percent": _plain(rule.cap_percent),
                    "cap_amount": _plain(rule.cap_amount),
                    "gratuity_group": rule.gratuity_group,
                }
                for tag, rule in rules.labor.roles.items()
            },
            "gratuity_splits": {
                group: _plain(split) for group, split in rules.labor.gratuity_splits.items()
            },
        },
        "costs": {
            "primary_food_cost_percent": _plain(rules.costs.primary_food_cost_percent),
            "secondary_food_cost_percent": _plain(rules.costs.secondary_food_cost_percent),
            "supplies_cost_percent": _plain(rules.costs.supplies_cost_percent),
            "transportation_stipend": _plain(rules.costs.transportation_stipend),
        },
        "distance": {
            "free_distance_miles": _plain(rules.distance.free_distance_miles),
            "base_distance_fee": _plain(rules.distance.base_distance_fee),
            "additional_fee_per_increment": _plain(rules.distance.additional_fee_per_increment),
            "increment_miles": _plain(rules.distance.increment_miles),
        },
        "profit_distribution": {
            "business_retained_percent": _plain(
                rules.profit_distribution.business_retained_percent
            ),
            "owner_distribution_percent": _plain(
                rules.profit_distribution.owner_distribution_percent
            ),
            "owners": [
                {"id": o.id, "name": o.name, "equity_percent": _plain(o.equity_percent)}
                for o in rules.profit_distribution.owners
            ],
            "distribution_frequency": rules.profit_distribution.distribution_frequency,
        },
        "safety_limits": {
            "max_total_labor_percent": _plain(rules.safety_limits.max_total_labor_percent),
            "max_food_cost_percent": _plain(rules.safety_limits.max_food_cost_percent),
            "warn_when_exceeded": rules.safety_limits.warn_when_exceeded,
        },
    }


# ---------------------------------------------------------------------------
# Public loaders
# ---------------------------------------------------------------------------


def rules_from_dict(
    data: Mapping[str, Any] | None,
    base: RuleConfiguration = DEFAULT_RULES,
) -> RuleConfiguration:
    """
    Build a document from a partial raw mapping merged over ``base``.

    Preconditions:
        - ``data`` is a mapping (or ``None``, meaning "no changes").
    Postconditions:
        - Sections and keys absent from ``data`` keep ``base``'s values.
        - ``labor.roles`` merges per role; lists (profiles, owners) replace.
    Raises:
        RuleConfigurationError: if ``data`` or one of its sections is not
            a mapping.
    """
    if data is None:
        return base
    if not isinstance(data, Mapping):
        raise RuleConfigurationError("<root>", f"expected a mapping, got {type(data).__name__}")

    raw = strip_invalid(migrate_legacy_fields(normalize_keys(data)))
    merged = deep_merge(rules_to_dict(base), raw)

    return RuleConfiguration(
        pricing=parse_pricing(_section(merged, "pricing")),
        staffing=parse_staffing(_section(merged, "staffing")),
        labor=parse_labor(_section(merged, "labor")),
        costs=parse_costs(_section(merged, "costs")),
        distance=parse_distance(_section(merged, "distance")),
        profit_distribution=parse_profit_distribution(_section(merged, "profit_distribution")),
        safety_limits=parse_safety_limits(_section(merged, "safety_limits")),
    )


def merge_rule_overrides(
    rules: RuleConfiguration,
    overrides: Mapping[str, Any] | None,
) -> RuleConfiguration:
    """Apply a partial document (e.g. a template's overrides) over ``rules``."""
    if not overrides:
        return rules
    return rules_from_dict(overrides, base=rules)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        RuleConfigurationError: if the document root is not a mapping.
    """
    with open(path) as f:
        loaded = yaml.safe_load(f)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise RuleConfigurationError("<root>", f"{path} does not contain a mapping")
    return loaded


def load_rules_file(
    path: Path,
    base: RuleConfiguration = DEFAULT_RULES,
) -> RuleConfiguration:
    """Load a YAML rules file merged over ``base``."""
    data = load_yaml_file(Path(path))
    rules = rules_from_dict(data, base=base)
    logger.debug("rules_file_loaded", extra={"path": str(path), "sections": sorted(data)})
    return rules


def compute_checksum(rules: RuleConfiguration) -> str:
    """
    SHA-256 of the canonical JSON rendition of ``rules``.

    Postconditions:
        - Identical documents always produce identical checksums, however
          they were loaded (file, mapping, legacy names).
    """
    canonical = json.dumps(rules_to_dict(rules), sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
