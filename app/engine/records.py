from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, FrozenSet, List, Optional, Protocol

from app.engine.rules import DiscountRule


@dataclass(slots=True, frozen=True)
class VoucherRecord:
    id: int
    code: str
    rule: DiscountRule
    expiration_date: datetime
    usage_limit: int
    used_count: int
    is_active: bool = True
    min_order_value: Decimal = Decimal("0")


@dataclass(slots=True, frozen=True)
class PromotionRecord:
    id: int
    code: str
    rule: DiscountRule
    expiration_date: datetime
    usage_limit: int
    used_count: int
    is_active: bool = True
    eligible_categories: FrozenSet[int] = frozenset()
    eligible_items: FrozenSet[int] = frozenset()

    @property
    def applies_to_whole_order(self) -> bool:
        return not self.eligible_categories and not self.eligible_items


@dataclass(slots=True, frozen=True)
class OrderLine:
    product_id: int
    category_id: int
    unit_price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(slots=True)
class DiscountRequest:
    user_id: int
    items: List[OrderLine]
    voucher_code: Optional[str] = None
    promotion_codes: List[str] = field(default_factory=list)


@dataclass(slots=True)
class AppliedInstrument:
    instrument_id: int
    code: str
    discount_amount: Decimal


@dataclass(slots=True)
class OrderDraft:
    """
    The order record the engine hands to persistence.
    Amounts are final: component amounts are already rescaled when the cap applied.
    """

    user_id: int
    items: List[OrderLine]
    total_amount: Decimal
    discount_applied: Decimal
    final_amount: Decimal
    applied_voucher: Optional[AppliedInstrument] = None
    applied_promotions: List[AppliedInstrument] = field(default_factory=list)


class InstrumentLookup(Protocol):
    async def find_voucher_by_code(self, code: str) -> Optional[VoucherRecord]: ...

    async def find_promotion_by_code(self, code: str) -> Optional[PromotionRecord]: ...


class UsageRecorder(Protocol):
    async def increment_voucher_usage(self, voucher_id: int) -> None: ...

    async def increment_promotion_usage(self, promotion_id: int) -> None: ...


class OrderWriter(Protocol):
    async def persist_order(self, draft: OrderDraft) -> Any: ...


class UsageLimitReached(Exception):
    """Raised by a usage recorder when the guarded increment matched no row."""
