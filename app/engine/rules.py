from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from app.utils.decimal_utils import to_decimal

PERCENTAGE = "percentage"
FIXED = "fixed"
DISCOUNT_TYPES = (PERCENTAGE, FIXED)

HUNDRED = Decimal("100")


@dataclass(slots=True, frozen=True)
class Percentage:
    value: Decimal

    kind = PERCENTAGE

    def amount(self, subtotal: Decimal) -> Decimal:
        return subtotal * self.value / HUNDRED


@dataclass(slots=True, frozen=True)
class Fixed:
    value: Decimal

    kind = FIXED

    def amount(self, subtotal: Decimal) -> Decimal:
        # never more than the base it applies to
        return min(self.value, subtotal)


DiscountRule = Union[Percentage, Fixed]


def rule_for(discount_type: str, discount_value) -> DiscountRule:
    """Build the discount rule for a stored (type, value) pair."""
    value = to_decimal(discount_value)
    kind = (discount_type or "").lower()
    if kind == PERCENTAGE:
        return Percentage(value)
    if kind == FIXED:
        return Fixed(value)
    raise ValueError(f"Unknown discount type: {discount_type!r}")
