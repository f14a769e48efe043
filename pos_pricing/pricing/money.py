"""
Money helpers.

All prices inside the engine are ``Decimal`` values quantized to the cent.
Catalog rows may hand us floats (SQLite, JSON rule maps), so every inbound
number goes through ``to_decimal`` via its string form to avoid binary noise.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from ..config import CURRENCY_PLACES

CENT = Decimal(1).scaleb(-CURRENCY_PLACES)
ZERO = Decimal("0.00")


def to_decimal(value: Any) -> Decimal:
    """Convert a catalog number (int, float, str, Decimal) to Decimal."""
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal(0)
    return Decimal(str(value))


def round_money(amount: Decimal) -> Decimal:
    """Round to the cent, half-up."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_money(value: Any) -> Decimal:
    """Convert and round a catalog number to a money amount."""
    return round_money(to_decimal(value))
