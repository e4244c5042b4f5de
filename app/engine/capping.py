from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List

from app.utils.decimal_utils import ZERO, round_money


@dataclass(slots=True, frozen=True)
class CapResult:
    raw_total: Decimal
    discount_applied: Decimal
    components: List[Decimal]

    @property
    def capped(self) -> bool:
        return self.discount_applied < self.raw_total


def enforce_cap(components: List[Decimal], total_amount: Decimal, max_ratio: Decimal) -> CapResult:
    """
    Limit the combined discount to ``max_ratio`` of the order total.

    When the limit bites, every component is shrunk by the same ratio and
    rounded to cents on its own, so the components may drift a cent or two
    from ``discount_applied``. ``discount_applied`` is the exact figure.
    """
    raw_total = sum(components, ZERO)
    cap = max_ratio * total_amount
    discount_applied = min(raw_total, cap, total_amount)

    if discount_applied < raw_total and raw_total > 0:
        ratio = discount_applied / raw_total
        components = [round_money(amount * ratio) for amount in components]

    return CapResult(raw_total=raw_total, discount_applied=discount_applied, components=list(components))
