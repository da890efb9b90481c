from __future__ import annotations

import re
from typing import Iterable, Mapping

from .errors import OrderValidationError

# Optional 254 / +254 / 0 prefix, then a 7 followed by 8 digits.
PHONE_PATTERN = re.compile(r"^(?:254|\+254|0)?(7[0-9]{8})$")

MSG_TABLE_REQUIRED = "Please enter your table number"
MSG_PHONE_REQUIRED = "Please enter your phone number"
MSG_PHONE_INVALID = "Please enter a valid Kenyan phone number"
MSG_CART_EMPTY = "Your cart is empty. Please add items to your order"
MSG_BAD_QUANTITY = "Item quantities must be at least 1"
MSG_BAD_PRICE = "Every item needs a valid price"


def is_valid_phone_number(phone: str) -> bool:
    return bool(PHONE_PATTERN.match(phone.strip()))


def validate_submission(
    table_number: str,
    phone_number: str,
    items: Iterable[Mapping],
    *,
    require_price: bool = True,
) -> None:
    """Check an order submission, raising on the first unmet precondition.

    Customer lines carry only menu ids; pass ``require_price=False`` until
    the catalog lookup has filled in prices.
    """
    if not (table_number or "").strip():
        raise OrderValidationError(MSG_TABLE_REQUIRED)
    if not (phone_number or "").strip():
        raise OrderValidationError(MSG_PHONE_REQUIRED)
    if not is_valid_phone_number(phone_number):
        raise OrderValidationError(MSG_PHONE_INVALID)
    items = list(items or [])
    if not items:
        raise OrderValidationError(MSG_CART_EMPTY)
    for item in items:
        quantity = item.get("quantity")
        if not _is_integral(quantity) or quantity < 1:
            raise OrderValidationError(MSG_BAD_QUANTITY)
        if not require_price:
            continue
        price = item.get("price")
        if isinstance(price, bool) or not isinstance(price, (int, float)) or price < 0:
            raise OrderValidationError(MSG_BAD_PRICE)


def _is_integral(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def order_total(items: Iterable[Mapping]) -> float:
    return sum(float(item["price"]) * int(item["quantity"]) for item in items)
