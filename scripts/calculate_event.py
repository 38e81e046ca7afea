#!/usr/bin/env python3
"""
Price one catered event and print the financial breakdown as JSON.

Usage:
    python3 scripts/calculate_event.py event.yaml
    python3 scripts/calculate_event.py event.json --rules rules.yaml
    python3 scripts/calculate_event.py event.yaml --menu guests.yaml --catalog items.yaml
    python3 scripts/calculate_event.py event.yaml --log-level DEBUG   # engine traces on stderr

The event file is a booking record (YAML or JSON; snake_case or camelCase
keys), e.g.:

    adults: 10
    children: 2
    eventType: private-dinner
    distanceMiles: 32
    premiumAddOn: 5

With ``--menu`` and ``--catalog`` the event is first priced from the guest
menu (list of guest selections) against the menu item catalog, and the
resulting snapshot replaces the formula subtotal and food cost.
"""

import argparse
import dataclasses
import json
import logging
import sys
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from catering_config import get_active_rules
from catering_engines.menu_pricing import GuestMenuSelection, MenuCatalogItem
from catering_engines.staffing import StaffingPlan
from catering_kernel.exceptions import CateringKernelError
from catering_kernel.logging_config import configure_logging, get_logger
from catering_services import apply_menu_pricing, calculate_booking_financials
from catering_services.booking_financials import BookingRecord

logger = get_logger("scripts.calculate_event")


def _load_document(path: Path) -> Any:
    """YAML is a superset of JSON, so one loader reads both."""
    with open(path) as f:
        return yaml.safe_load(f)


def to_jsonable(value: Any) -> Any:
    """Plain JSON rendition: Decimals as strings, enums as values."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, StaffingPlan):
        return {
            "roles": list(value.roles),
            "assistant_needed": value.assistant_needed,
            "total_staff_count": value.total_staff_count,
            "matched_profile_id": value.matched_profile_id,
            "matched_profile_name": value.matched_profile_name,
            "slots": [to_jsonable(slot) for slot in value.slots],
        }
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)
        }
    if hasattr(value, "items"):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[1])
    parser.add_argument("event", type=Path, help="Booking record (YAML or JSON)")
    parser.add_argument("--rules", type=Path, default=None, help="Rules YAML file")
    parser.add_argument("--menu", type=Path, default=None, help="Guest selections file")
    parser.add_argument("--catalog", type=Path, default=None, help="Menu item catalog file")
    parser.add_argument("--menu-id", default="menu", help="Identifier for the menu snapshot")
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    args = parser.parse_args(argv)

    if (args.menu is None) != (args.catalog is None):
        parser.error("--menu and --catalog must be given together")

    configure_logging(level=getattr(logging, args.log_level), stream=sys.stderr)

    try:
        rules = get_active_rules(args.rules)
        booking = BookingRecord.from_mapping(_load_document(args.event) or {})

        if args.menu is not None:
            selections = [
                GuestMenuSelection.from_mapping(entry)
                for entry in _load_document(args.menu) or []
            ]
            catalog = [
                MenuCatalogItem.from_mapping(entry)
                for entry in _load_document(args.catalog) or []
            ]
            booking = apply_menu_pricing(booking, args.menu_id, selections, catalog, rules)

        result = calculate_booking_financials(booking, rules)
    except CateringKernelError as exc:
        logger.error("event_calculation_failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    payload = {
        "pricing_source": result.pricing_source.value,
        "financials": to_jsonable(result.financials),
    }
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
