"""
Pytest fixtures for the catering kernel test suite.

Provides:
- The built-in rule document and a variant with staffing profiles
- An event factory with sensible defaults
- A small menu catalog
"""

from decimal import Decimal

import pytest

from catering_config import DEFAULT_RULES, rules_from_dict
from catering_engines.menu_pricing import MenuCatalogItem
from catering_kernel.domain.event import EventInput
from catering_kernel.domain.rules import EventCategory
from catering_kernel.logging_config import LogContext, reset_logging


@pytest.fixture(autouse=True)
def _isolated_log_context():
    """Context fields never leak between tests."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def default_rules():
    return DEFAULT_RULES


@pytest.fixture
def profiled_rules():
    """Defaults plus three staffing profiles, listed in priority order."""
    return rules_from_dict(
        {
            "staffing": {
                "profiles": [
                    {
                        "id": "small-private",
                        "name": "Small private dinner",
                        "event_category": "private-dinner",
                        "min_guests": 1,
                        "max_guests": 15,
                        "roles": ["lead", "assistant"],
                    },
                    {
                        "id": "large-private",
                        "name": "Large private dinner",
                        "event_category": "private-dinner",
                        "min_guests": 16,
                        "max_guests": 9999,
                        "roles": ["lead", "full", "full", "assistant"],
                    },
                    {
                        "id": "any-mid",
                        "name": "Anything mid-sized",
                        "event_category": "any",
                        "min_guests": 10,
                        "max_guests": 40,
                        "roles": ["buffet", "buffet"],
                    },
                ]
            }
        }
    )


@pytest.fixture
def make_event():
    """Factory for ``EventInput`` with private-dinner defaults."""

    def _make(**overrides):
        values = {
            "adults": 10,
            "children": 0,
            "event_category": EventCategory.PRIVATE_DINNER,
        }
        values.update(overrides)
        return EventInput(**values)

    return _make


@pytest.fixture
def menu_catalog():
    return [
        MenuCatalogItem(id="protein-chicken", cost_per_serving=Decimal("4"), price_per_serving=Decimal("12")),
        MenuCatalogItem(id="protein-steak", cost_per_serving=Decimal("7"), price_per_serving=Decimal("20")),
        MenuCatalogItem(id="protein-shrimp", cost_per_serving=Decimal("6")),
        MenuCatalogItem(id="side-rice", cost_per_serving=Decimal("1"), price_per_serving=Decimal("3")),
        MenuCatalogItem(id="side-noodles", cost_per_serving=Decimal("1.5"), price_per_serving=Decimal("4")),
        MenuCatalogItem(id="side-salad", cost_per_serving=Decimal("0.5"), price_per_serving=Decimal("2")),
        MenuCatalogItem(id="side-veggies", cost_per_serving=Decimal("1"), price_per_serving=Decimal("2.5")),
    ]
