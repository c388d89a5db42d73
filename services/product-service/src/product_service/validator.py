"""
Validation of incoming product payloads.

Checks run in a fixed order and the first failing check decides the
reported message: title, description, price present, price positive,
count present, count non-negative. Numbers must also fit a DynamoDB
number once coerced, so a valid payload always maps and serializes.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from product_service.exceptions import ValidationError

TITLE_REQUIRED = "Title is required"
DESCRIPTION_REQUIRED = "Description is required"
PRICE_REQUIRED = "Price is required"
PRICE_NOT_POSITIVE = "Price must be a positive number"
COUNT_REQUIRED = "Count is required"
PRICE_OUT_OF_RANGE = "Price is out of range"
COUNT_NEGATIVE = "Count must be a non-negative integer"
COUNT_OUT_OF_RANGE = "Count is out of range"
NOT_AN_OBJECT = "Product must be an object"

# DynamoDB numbers: magnitude in [1e-130, 1e126), at most 38 significant digits.
MIN_STORED_NUMBER = Decimal("1e-128")
MAX_STORED_NUMBER = Decimal("1e126")
MAX_COUNT = 10 ** 38 - 1


@dataclass(frozen=True)
class ValidationResult:
    """Verdict of validate_product."""
    is_valid: bool
    message: Optional[str] = None
    field_name: Optional[str] = None

    def raise_for_invalid(self, data: Any = None) -> None:
        if self.is_valid:
            return
        actual = data.get(self.field_name) if isinstance(data, dict) and self.field_name else None
        raise ValidationError(
            message=self.message or "Invalid product",
            field_name=self.field_name,
            actual=actual,
        )


VALID = ValidationResult(is_valid=True)


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def to_number(value: Any) -> Optional[Decimal]:
    """Coerce a JSON number or numeric string to Decimal, None if not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = Decimal(str(value))
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not number.is_finite():
        return None
    return number


def _invalid(message: str, field_name: str) -> ValidationResult:
    return ValidationResult(is_valid=False, message=message, field_name=field_name)


def validate_product(data: Any, require_count: bool = True) -> ValidationResult:
    """
    Validate a raw product payload.

    Args:
        data: Decoded JSON payload
        require_count: When False a missing count is accepted

    Returns:
        ValidationResult carrying the first failing check's message
    """
    if not isinstance(data, dict):
        return _invalid(NOT_AN_OBJECT, None)

    if not _is_present(data.get("title")):
        return _invalid(TITLE_REQUIRED, "title")
    if not _is_present(data.get("description")):
        return _invalid(DESCRIPTION_REQUIRED, "description")

    if not _is_present(data.get("price")):
        return _invalid(PRICE_REQUIRED, "price")
    price = to_number(data["price"])
    if price is None or price <= 0:
        return _invalid(PRICE_NOT_POSITIVE, "price")
    # Product stores price as a float; the coerced value is what gets persisted.
    stored_price = float(price)
    if stored_price <= 0:
        return _invalid(PRICE_NOT_POSITIVE, "price")
    if math.isinf(stored_price) or not (
        MIN_STORED_NUMBER <= Decimal(str(stored_price)) < MAX_STORED_NUMBER
    ):
        return _invalid(PRICE_OUT_OF_RANGE, "price")

    if not _is_present(data.get("count")):
        if require_count:
            return _invalid(COUNT_REQUIRED, "count")
        return VALID
    count = to_number(data["count"])
    if count is None or count < 0 or count != count.to_integral_value():
        return _invalid(COUNT_NEGATIVE, "count")
    if count > MAX_COUNT:
        return _invalid(COUNT_OUT_OF_RANGE, "count")

    return VALID
