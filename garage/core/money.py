"""Money amounts: prices, contributions, budget totals and unit costs.

Amounts are ``Decimal`` values held at a fixed 9 decimal places, the same
scale as the ``Numeric(38, 9)`` columns, so the in-memory and SQL backends
agree to the last digit and a budget can be spent down to exactly zero.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Any

from pydantic import PlainSerializer

MONEY_DECIMAL_PLACES = 9
ZERO = Decimal("0")

_QUANTUM = Decimal(1).scaleb(-MONEY_DECIMAL_PLACES)

# JSON bodies carry plain numbers; Python callers keep the Decimal.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def round_money(value: Decimal) -> Decimal:
    return value.quantize(_QUANTUM, rounding=ROUND_HALF_UP)


def to_money(value: Any) -> Decimal:
    """Convert ``value`` to a money Decimal.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather than
    its binary expansion. Raises ``ValueError``/``TypeError`` or
    ``decimal.InvalidOperation`` for anything that is not a finite number.
    """
    if isinstance(value, bool):
        raise TypeError("booleans are not amounts")
    amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    if not amount.is_finite():
        raise ValueError(f"amount must be finite, got {value!r}")
    return round_money(amount)


def format_money(value: Decimal) -> str:
    """Exact plain-notation rendering, without trailing zeros: 1234567, 0.1."""
    return format(value.normalize(), "f")
