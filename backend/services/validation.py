# backend/services/validation.py
from typing import Any, Optional

from services.errors import InvalidInput


def as_int(value: Any, field: str = "Quantity") -> int:
    """Coerce a caller-supplied number to int.

    Accepts ints and integral strings ("5"); rejects bools, floats with a
    fractional part and anything non-numeric.
    """
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be a whole number")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidInput(f"{field} must be a whole number")


def positive_quantity(value: Any) -> int:
    if value is None or value == "":
        raise InvalidInput("Quantity is required")
    qty = as_int(value)
    if qty <= 0:
        raise InvalidInput("Quantity must be a positive number")
    return qty


def non_negative_quantity(value: Any) -> int:
    if value is None or value == "":
        return 0
    qty = as_int(value)
    if qty < 0:
        raise InvalidInput("Quantity must be a non-negative number")
    return qty


def required_text(value: Optional[str], message: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInput(message)
    return text


def optional_notes(value: Optional[str]) -> Optional[str]:
    return value or None
