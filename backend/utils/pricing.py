# backend/utils/pricing.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple

from config import settings


@dataclass(frozen=True)
class OrderTotals:
    subtotal: int
    shipping: int
    tax: int
    total: int


def items_subtotal(lines: Iterable[Tuple[int, int]]) -> int:
    """Sum of price * quantity over (price, quantity) pairs."""
    return sum(price * quantity for price, quantity in lines)


def shipping_cost(subtotal: int) -> int:
    if subtotal >= settings.FREE_SHIPPING_THRESHOLD:
        return 0
    return settings.SHIPPING_FLAT_FEE


def tax_amount(subtotal: int) -> int:
    # Half-up rounding to whole pesos
    tax = Decimal(subtotal) * Decimal(str(settings.TAX_RATE))
    return int(tax.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_totals(lines: Iterable[Tuple[int, int]], subtotal: Optional[int] = None) -> OrderTotals:
    """Order amounts for the given lines.

    A non-zero ``subtotal`` supplied by the caller wins over the line sum.
    Tax is reported alongside but is not part of ``total``: prices are
    shown tax-inclusive and the tax line is for the receipt only.
    """
    if not subtotal:
        subtotal = items_subtotal(lines)
    shipping = shipping_cost(subtotal)
    return OrderTotals(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax_amount(subtotal),
        total=subtotal + shipping,
    )
