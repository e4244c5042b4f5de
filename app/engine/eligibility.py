"""
Eligibility checks for vouchers and promotions.

Both validators are pure: they look only at the record they are given, the
order context and the current time. Checks run in a fixed order and the first
failing one is reported:

    not found -> inactive -> expired -> usage exceeded -> voucher minimum / promotion items
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Generic, Optional, Sequence, TypeVar

from app.core.exceptions import RejectionReason
from app.engine.records import OrderLine, PromotionRecord, VoucherRecord

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Eligibility(Generic[T]):
    instrument: Optional[T] = None
    reason: Optional[RejectionReason] = None

    @property
    def valid(self) -> bool:
        return self.reason is None

    @classmethod
    def ok(cls, instrument: T) -> "Eligibility[T]":
        return cls(instrument=instrument)

    @classmethod
    def reject(cls, reason: RejectionReason, instrument: Optional[T] = None) -> "Eligibility[T]":
        return cls(instrument=instrument, reason=reason)


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _common_checks(record, now: datetime) -> Optional[RejectionReason]:
    if not record.is_active:
        return RejectionReason.INACTIVE
    if _as_utc(now) > _as_utc(record.expiration_date):
        return RejectionReason.EXPIRED
    if record.used_count >= record.usage_limit:
        return RejectionReason.USAGE_EXCEEDED
    return None


def validate_voucher(
    voucher: Optional[VoucherRecord], subtotal: Decimal, now: datetime
) -> Eligibility[VoucherRecord]:
    if voucher is None:
        return Eligibility.reject(RejectionReason.NOT_FOUND)
    reason = _common_checks(voucher, now)
    if reason is not None:
        return Eligibility.reject(reason, voucher)
    if subtotal < voucher.min_order_value:
        return Eligibility.reject(RejectionReason.BELOW_MINIMUM_ORDER, voucher)
    return Eligibility.ok(voucher)


def is_line_eligible(promotion: PromotionRecord, line: OrderLine) -> bool:
    if promotion.applies_to_whole_order:
        return True
    return line.product_id in promotion.eligible_items or line.category_id in promotion.eligible_categories


def eligible_subtotal(promotion: PromotionRecord, items: Sequence[OrderLine]) -> Decimal:
    """
    Subtotal of the lines a promotion may discount.

    An unrestricted promotion covers the whole order. A restricted one covers
    every line whose product is listed or whose category is listed.
    """
    return sum(
        (line.line_total for line in items if is_line_eligible(promotion, line)),
        Decimal("0"),
    )


def validate_promotion(
    promotion: Optional[PromotionRecord], items: Sequence[OrderLine], now: datetime
) -> Eligibility[PromotionRecord]:
    if promotion is None:
        return Eligibility.reject(RejectionReason.NOT_FOUND)
    reason = _common_checks(promotion, now)
    if reason is not None:
        return Eligibility.reject(reason, promotion)
    if not any(is_line_eligible(promotion, line) for line in items):
        return Eligibility.reject(RejectionReason.NO_ELIGIBLE_ITEMS, promotion)
    return Eligibility.ok(promotion)
