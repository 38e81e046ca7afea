"""
catering_services -- Package init and public API.

Responsibility:
    Orchestration over the pure engines for stored booking records:
    pricing-source selection and menu snapshot application. This is the
    only layer that may use wall-clock time.

Architecture position:
    Services -- orchestration over engines + kernel.

    Dependency direction (enforced by tests/architecture/test_engine_purity.py):
        catering_services/ -> catering_engines/  (allowed)
        catering_services/ -> catering_kernel/   (allowed)
        catering_engines/  -> catering_services/ (FORBIDDEN)
        catering_kernel/   -> catering_services/ (FORBIDDEN)
"""

from catering_kernel.logging_config import get_logger

logger = get_logger("services")

from catering_services.booking_financials import (
    BookingFinancials,
    BookingRecord,
    PricingSource,
    apply_menu_pricing,
    calculate_booking_financials,
)

__all__ = [
    "BookingFinancials",
    "BookingRecord",
    "PricingSource",
    "apply_menu_pricing",
    "calculate_booking_financials",
]
