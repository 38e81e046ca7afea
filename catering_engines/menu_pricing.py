"""
Module: catering_engines.menu_pricing
Responsibility:
    Aggregate per-guest menu selections against a menu-item catalog into
    replacement subtotal and food-cost figures for an event. The result is
    meant to be fed to the revenue engine as its subtotal / food-cost
    overrides, in place of the base-price formula.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Catalog-driven and guest-driven; the rule document is not consulted.

Invariants enforced:
    - ``subtotal_override == round_money(sum(line.price for line in guest_lines))``
      and likewise for ``food_cost_override``.
    - Every item id a guest references that is absent from the catalog
      appears exactly once in ``missing_item_ids`` (sorted), and contributes
      0 cost and 0 price.
    - Catalog values that are negative or non-finite count as 0; a missing
      or non-finite price defaults to 3x the cost.
    - No clock access: snapshots take their timestamp from the caller.

Failure modes:
    - None. Unknown ids degrade to zero instead of failing the whole menu.

Usage:
    from catering_engines.menu_pricing import calculate_menu_pricing

    breakdown = calculate_menu_pricing(selections, catalog,
                                       child_discount_percent=Decimal("50"),
                                       premium_add_on_per_guest=Decimal("5"))
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from types import MappingProxyType
from typing import Any

from catering_engines.tracer import traced_engine
from catering_kernel.domain.values import (
    HUNDRED,
    ONE,
    ZERO,
    round_money,
    to_non_negative,
    to_optional_amount,
)
from catering_kernel.logging_config import get_logger

logger = get_logger("engines.menu_pricing")

DEFAULT_PRICE_MULTIPLIER = Decimal("3")

#: Protein selection key -> catalog item id. Other values are used verbatim.
PROTEIN_ITEM_IDS: Mapping[str, str] = MappingProxyType({
    "chicken": "protein-chicken",
    "steak": "protein-steak",
    "shrimp": "protein-shrimp",
    "scallops": "protein-scallops",
    "filet-mignon": "protein-filet-mignon",
})

#: Side flag attribute -> catalog item id.
SIDE_ITEM_IDS: Mapping[str, str] = MappingProxyType({
    "wants_fried_rice": "side-rice",
    "wants_noodles": "side-noodles",
    "wants_salad": "side-salad",
    "wants_veggies": "side-veggies",
})


@dataclass(frozen=True)
class MenuCatalogItem:
    """One sellable item.

    ``price_per_serving`` left unset (or non-finite) means 3x cost.
    """

    id: str
    cost_per_serving: Decimal
    price_per_serving: Decimal | None = None
    name: str = ""
    category: str = ""

    @property
    def effective_cost(self) -> Decimal:
        return to_non_negative(self.cost_per_serving)

    @property
    def effective_price(self) -> Decimal:
        price = to_optional_amount(self.price_per_serving)
        if price is None:
            return self.effective_cost * DEFAULT_PRICE_MULTIPLIER
        return price if price > ZERO else ZERO

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> MenuCatalogItem:
        price = data.get("price_per_serving", data.get("pricePerServing"))
        return cls(
            id=str(data["id"]),
            cost_per_serving=to_non_negative(
                data.get("cost_per_serving", data.get("costPerServing"))
            ),
            price_per_serving=to_optional_amount(price),
            name=str(data.get("name", "")),
            category=str(data.get("category", "")),
        )


@dataclass(frozen=True)
class GuestMenuSelection:
    """One guest's choices. Allergy / request text is carried, not priced."""

    guest_id: str
    is_adult: bool
    protein1: str
    protein2: str
    wants_fried_rice: bool = False
    wants_noodles: bool = False
    wants_salad: bool = False
    wants_veggies: bool = False
    guest_name: str = ""
    allergies: str = ""
    special_requests: str = ""

    def item_ids(self) -> tuple[str, ...]:
        """Catalog ids this guest consumes: two proteins, then enabled sides."""
        ids = [
            PROTEIN_ITEM_IDS.get(self.protein1, self.protein1),
            PROTEIN_ITEM_IDS.get(self.protein2, self.protein2),
        ]
        for flag, item_id in SIDE_ITEM_IDS.items():
            if getattr(self, flag):
                ids.append(item_id)
        return tuple(ids)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> GuestMenuSelection:
        def flag(snake: str, camel: str) -> bool:
            return bool(data.get(snake, data.get(camel, False)))

        return cls(
            guest_id=str(data.get("guest_id", data.get("id", ""))),
            is_adult=bool(data.get("is_adult", data.get("isAdult", True))),
            protein1=str(data.get("protein1", "")),
            protein2=str(data.get("protein2", "")),
            wants_fried_rice=flag("wants_fried_rice", "wantsFriedRice"),
            wants_noodles=flag("wants_noodles", "wantsNoodles"),
            wants_salad=flag("wants_salad", "wantsSalad"),
            wants_veggies=flag("wants_veggies", "wantsVeggies"),
            guest_name=str(data.get("guest_name", data.get("guestName", ""))),
            allergies=str(data.get("allergies", "")),
            special_requests=str(
                data.get("special_requests", data.get("specialRequests", ""))
            ),
        )


@dataclass(frozen=True)
class GuestPricingLine:
    guest_id: str
    cost: Decimal
    price: Decimal


@dataclass(frozen=True)
class MenuPricingBreakdown:
    """Override pair plus what could not be priced."""

    subtotal_override: Decimal
    food_cost_override: Decimal
    missing_item_ids: tuple[str, ...]
    guest_lines: tuple[GuestPricingLine, ...] = ()


@dataclass(frozen=True)
class MenuPricingSnapshot:
    """Frozen menu figures a booking can carry as its pricing source."""

    menu_id: str
    subtotal_override: Decimal
    food_cost_override: Decimal
    calculated_at: datetime


def index_catalog(catalog: Iterable[MenuCatalogItem]) -> dict[str, MenuCatalogItem]:
    """Catalog keyed by id; the first item wins on duplicate ids."""
    indexed: dict[str, MenuCatalogItem] = {}
    for item in catalog:
        indexed.setdefault(item.id, item)
    return indexed


def price_guest(
    guest: GuestMenuSelection,
    catalog: Mapping[str, MenuCatalogItem],
    child_multiplier: Decimal,
    premium_add_on_per_guest: Decimal,
    missing_item_ids: set[str],
) -> GuestPricingLine:
    """Cost and price of one guest's plate; records unknown ids."""
    cost = ZERO
    item_price = ZERO
    for item_id in guest.item_ids():
        item = catalog.get(item_id)
        if item is None:
            missing_item_ids.add(item_id)
            continue
        cost += item.effective_cost
        item_price += item.effective_price

    if not guest.is_adult:
        item_price *= child_multiplier
    return GuestPricingLine(
        guest_id=guest.guest_id,
        cost=cost,
        price=item_price + premium_add_on_per_guest,
    )


@traced_engine(
    "menu_pricing", "1.0",
    fingerprint_fields=(
        "selections", "catalog", "child_discount_percent", "premium_add_on_per_guest",
    ),
)
def calculate_menu_pricing(
    selections: Sequence[GuestMenuSelection],
    catalog: Iterable[MenuCatalogItem],
    child_discount_percent: Decimal = Decimal("50"),
    premium_add_on_per_guest: Decimal = ZERO,
) -> MenuPricingBreakdown:
    """
    Itemized subtotal / food-cost overrides for a guest list.

    Per guest: cost is the sum of cost-per-serving over both proteins and
    every enabled side; price is the sum of price-per-serving over the same
    items, reduced by the child discount for children, plus the flat
    premium add-on.
    """
    indexed = index_catalog(catalog)
    discount = min(to_non_negative(child_discount_percent), HUNDRED)
    child_multiplier = ONE - discount / HUNDRED
    add_on = to_non_negative(premium_add_on_per_guest)

    missing: set[str] = set()
    lines = tuple(
        price_guest(guest, indexed, child_multiplier, add_on, missing)
        for guest in selections
    )

    subtotal = sum((line.price for line in lines), ZERO)
    food_cost = sum((line.cost for line in lines), ZERO)

    if missing:
        logger.warning(
            "menu_items_missing_from_catalog",
            extra={"missing_item_ids": sorted(missing), "guest_count": len(lines)},
        )

    return MenuPricingBreakdown(
        subtotal_override=round_money(subtotal),
        food_cost_override=round_money(food_cost),
        missing_item_ids=tuple(sorted(missing)),
        guest_lines=lines,
    )


def build_menu_pricing_snapshot(
    menu_id: str,
    selections: Sequence[GuestMenuSelection],
    catalog: Iterable[MenuCatalogItem],
    calculated_at: datetime,
    child_discount_percent: Decimal = Decimal("50"),
    premium_add_on_per_guest: Decimal = ZERO,
) -> MenuPricingSnapshot:
    """Freeze the menu figures for a booking at ``calculated_at``."""
    breakdown = calculate_menu_pricing(
        selections,
        catalog,
        child_discount_percent=child_discount_percent,
        premium_add_on_per_guest=premium_add_on_per_guest,
    )
    return MenuPricingSnapshot(
        menu_id=menu_id,
        subtotal_override=breakdown.subtotal_override,
        food_cost_override=breakdown.food_cost_override,
        calculated_at=calculated_at,
    )
