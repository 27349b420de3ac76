"""Typed errors raised by the garage engine.

Every error carries an HTTP-style ``status_code`` hint; the API layer maps
them 1:1 to responses. Nothing here is fatal to the process: callers recover by
issuing a corrected request.
"""
from decimal import Decimal

from garage.core.money import format_money


def _amount(value) -> str:
    return format_money(value) if isinstance(value, Decimal) else str(value)


class GarageError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GarageError):
    """Malformed or out-of-range input."""
    status_code = 400


class NotFoundError(GarageError):
    status_code = 404


class ConflictError(GarageError):
    """Business-rule violation (duplicate name, max cars, referenced item...)."""
    status_code = 409


class InsufficientResourceError(GarageError):
    status_code = 400

    def __init__(self, message: str, required, available):
        super().__init__(f"{message} (required {_amount(required)}, available {_amount(available)})")
        self.required = required
        self.available = available


class InsufficientStockError(InsufficientResourceError):
    pass


class InsufficientBudgetError(InsufficientResourceError):
    pass
