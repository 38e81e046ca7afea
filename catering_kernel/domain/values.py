"""
Values -- Decimal helpers for currency amounts and percentages.

Responsibility:
    Provides the numeric primitives every engine uses: boundary
    normalization of raw numbers (``to_amount``), percentage application
    (``percent_of``), division-guarded ratios (``safe_ratio_percent``) and
    the single sanctioned rounding function (``round_money``).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Decimal-only arithmetic: floats are converted via ``str`` so that
      ``0.1`` becomes ``Decimal("0.1")`` and not its binary expansion.
    - Non-finite values never enter the engines: ``to_amount`` maps NaN,
      Infinity, None and unparsable input to the supplied default.
    - Division by zero yields ``0`` rather than raising.

Failure modes:
    - None. These helpers normalize instead of raising.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP


def to_amount(value: Any, default: Decimal = ZERO) -> Decimal:
    """
    Normalize a raw numeric value into a finite Decimal.

    Preconditions: none -- any object is accepted.
    Postconditions: Returns a finite Decimal. ``None``, booleans, NaN,
        +/-Infinity and strings that do not parse as numbers all map to
        ``default``.

    Example:
        to_amount("12.50") -> Decimal("12.50")
        to_amount(float("nan")) -> Decimal("0")
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return default
    if not result.is_finite():
        return default
    return result


def to_optional_amount(value: Any) -> Decimal | None:
    """Like ``to_amount`` but keeps "absent" distinguishable from zero."""
    if value is None or isinstance(value, bool):
        return None
    normalized = to_amount(value, default=Decimal("NaN"))
    if normalized.is_nan():
        return None
    return normalized


def to_non_negative(value: Any, default: Decimal = ZERO) -> Decimal:
    """Finite, non-negative Decimal; negatives clamp to zero."""
    result = to_amount(value, default)
    return result if result >= ZERO else ZERO


def percent_of(amount: Decimal, percent: Decimal) -> Decimal:
    """Apply a 0..100 percentage to an amount without rounding."""
    return amount * percent / HUNDRED


def safe_ratio_percent(numerator: Decimal, denominator: Decimal) -> Decimal:
    """``numerator / denominator * 100``, or 0 when the denominator is 0."""
    if denominator == ZERO:
        return ZERO
    return numerator / denominator * HUNDRED


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the given number of decimal places.

    This is the only sanctioned rounding function. Engines do not round
    intermediate figures; rounding is applied to presentation values and
    to the menu pricing totals.

    Example:
        round_money(Decimal("10.555")) -> Decimal("10.56")
    """
    return value.quantize(Decimal(1).scaleb(-decimal_places), rounding=rounding)


def format_percent(value: Decimal, decimal_places: int = 1) -> str:
    """Render a percentage for human-readable warnings ("32.5")."""
    return str(round_money(value, decimal_places))


def format_plain(value: Decimal) -> str:
    """Render a configured limit without trailing zeros ("30", "27.5")."""
    normalized = value.normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(ONE))
    return str(normalized)
