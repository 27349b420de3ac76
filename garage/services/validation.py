"""Input coercion shared by the services.

The core may be driven by something other than the HTTP layer, so every
service re-checks its own arguments and raises ``ValidationError`` with a
message fit for the end user.
"""
import math
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from garage.core.errors import ValidationError
from garage.core.money import to_money
from garage.schemas.parts import Performance

PERFORMANCE_KEYS = ("p", "a", "m")


def require_text(value: Any, label: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise ValidationError(f"{label} is required.")
    return text


def optional_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def non_negative_number(value: Any, label: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {label}.")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}.")
    if not math.isfinite(number) or number < 0:
        raise ValidationError(f"Invalid {label}.")
    return number


def non_negative_money(value: Any, label: str) -> Decimal:
    try:
        amount = to_money(value)
    except (TypeError, ValueError, InvalidOperation):
        raise ValidationError(f"Invalid {label}.")
    if amount < 0:
        raise ValidationError(f"Invalid {label}.")
    return amount


def _integer(value: Any, label: str) -> int:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"Invalid {label}.")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{label} must be an integer.")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be an integer.")


def int_in_range(value: Any, label: str, low: int, high: Optional[int] = None) -> int:
    number = _integer(value, label)
    if number < low or (high is not None and number > high):
        bounds = f"between {low} and {high}" if high is not None else f"at least {low}"
        raise ValidationError(f"{label} must be {bounds}.")
    return number


def positive_int(value: Any, label: str) -> int:
    return int_in_range(value, label, 1)


def non_negative_int(value: Any, label: str) -> int:
    return int_in_range(value, label, 0)


def performance(value: Any) -> Performance:
    """Normalize a {p, a, m} mapping; missing keys default to 0, each must be 0-9."""
    if value is None:
        return Performance()
    if isinstance(value, Performance):
        return value.model_copy()
    if not isinstance(value, dict):
        raise ValidationError("Invalid performance.")
    unknown = set(value) - set(PERFORMANCE_KEYS)
    if unknown:
        raise ValidationError(f"Unknown performance keys: {', '.join(sorted(unknown))}.")
    return Performance(**{
        key: int_in_range(value.get(key, 0), f"performance.{key}", 0, 9) for key in PERFORMANCE_KEYS
    })
