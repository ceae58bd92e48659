"""
Price calculation for cart lines and cart totals

All amounts are integers in minor currency units (centavos). Decimal input
from the catalog or older stored carts is converted once with
to_minor_units(); display strings come from format_price().
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Any

from models.cart import CartItem, CartSummary
from models.errors import InvalidCartItem

MINOR_UNITS = 100
_CENT = Decimal("0.01")


def to_minor_units(value: Any) -> int:
    # 50 -> 5000, "12.5" -> 1250, 0.1 -> 10
    if isinstance(value, bool):
        raise InvalidCartItem(f"Not a monetary amount: {value!r}")
    try:
        amount = Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise InvalidCartItem(f"Not a monetary amount: {value!r}")
    if not amount.is_finite() or amount < 0:
        raise InvalidCartItem(f"Monetary amount must be non-negative: {value!r}")
    return int(amount * MINOR_UNITS)


def to_major_units(amount: int) -> Decimal:
    return (Decimal(amount) / MINOR_UNITS).quantize(_CENT)


def format_price(amount: int, symbol: str = "₱") -> str:
    return f"{symbol}{to_major_units(amount):,.2f}"


def line_unit_price(item: CartItem) -> int:
    variant_extra = item.variant.additional_price if item.variant is not None else 0
    addons_total = sum(addon.price for addon in item.addons)
    return item.base_price + variant_extra + addons_total


def line_total(item: CartItem) -> int:
    return line_unit_price(item) * item.quantity


def cart_total_items(items: Iterable[CartItem]) -> int:
    return sum(item.quantity for item in items)


def cart_total_price(items: Iterable[CartItem]) -> int:
    return sum(line_total(item) for item in items)


def summarize(items: Iterable[CartItem]) -> CartSummary:
    items = list(items)
    return CartSummary(
        line_count=len(items),
        total_items=cart_total_items(items),
        total_price=cart_total_price(items)
    )
