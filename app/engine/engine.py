"""
Discount application engine.

Applies at most one voucher and any number of promotions to a new order:

1. reject malformed requests before touching the store,
2. validate the voucher, then all promotions (looked up concurrently),
3. compute each raw discount and enforce the global cap,
4. record usage for every applied instrument, voucher first,
5. persist the order.

Nothing is written until every instrument has validated. Collaborators are
injected, see ``app.engine.records`` for their contracts.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, List, Optional, Sequence

from app.core.exceptions import AppError, ErrorKind, InstrumentRejected, RejectionReason
from app.engine.capping import enforce_cap
from app.engine.eligibility import eligible_subtotal, validate_promotion, validate_voucher
from app.engine.records import (
    AppliedInstrument,
    DiscountRequest,
    InstrumentLookup,
    OrderDraft,
    OrderWriter,
    PromotionRecord,
    UsageLimitReached,
    UsageRecorder,
    VoucherRecord,
)
from app.utils.decimal_utils import ZERO

logger = logging.getLogger(__name__)

VOUCHER = "voucher"
PROMOTION = "promotion"

_REASON_TEXT = {
    RejectionReason.NOT_FOUND: "not found",
    RejectionReason.INACTIVE: "is not active",
    RejectionReason.EXPIRED: "has expired",
    RejectionReason.USAGE_EXCEEDED: "usage limit exceeded",
    RejectionReason.NO_ELIGIBLE_ITEMS: "has no eligible items in this order",
}


@dataclass(slots=True, frozen=True)
class EngineConfig:
    max_discount_ratio: Decimal = Decimal("0.5")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def rejection(instrument: str, code: str, reason: RejectionReason, record=None) -> InstrumentRejected:
    if reason is RejectionReason.BELOW_MINIMUM_ORDER:
        message = f"Minimum order value of {record.min_order_value} required for voucher '{code}'"
    else:
        message = f"{instrument.capitalize()} '{code}' {_REASON_TEXT[reason]}"
    return InstrumentRejected(instrument, code, reason, message)


class DiscountEngine:
    def __init__(
        self,
        lookup: InstrumentLookup,
        usage: UsageRecorder,
        orders: OrderWriter,
        config: Optional[EngineConfig] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.lookup = lookup
        self.usage = usage
        self.orders = orders
        self.config = config or EngineConfig()
        self.clock = clock

    # -----------------------
    # Input checks
    # -----------------------
    @staticmethod
    def normalize_codes(request: DiscountRequest) -> DiscountRequest:
        """Trim every code so duplicate and collision checks compare what the lookups see."""
        voucher_code = request.voucher_code
        if voucher_code is not None:
            voucher_code = voucher_code.strip()
            if not voucher_code:
                raise AppError("Voucher code must be a non-empty string", ErrorKind.INPUT)

        codes = [code.strip() for code in request.promotion_codes or []]
        if any(not code for code in codes):
            raise AppError("Each promotion code must be a non-empty string", ErrorKind.INPUT)
        return replace(request, voucher_code=voucher_code, promotion_codes=codes)

    @staticmethod
    def check_request(request: DiscountRequest) -> Decimal:
        """Reject malformed requests; returns the order total."""
        if not request.items:
            raise AppError("Order must contain at least one item", ErrorKind.INPUT)

        codes = request.promotion_codes or []
        if request.voucher_code and request.voucher_code in codes:
            raise AppError("The same code cannot be used as both a voucher and a promotion", ErrorKind.INPUT)
        if len(set(codes)) != len(codes):
            raise AppError("Duplicate promotion codes are not allowed", ErrorKind.INPUT)

        total = sum((line.line_total for line in request.items), ZERO)
        if total <= 0:
            raise AppError("Order total must be greater than zero", ErrorKind.INPUT)
        return total

    # -----------------------
    # Validation phase (reads only)
    # -----------------------
    async def _validated_voucher(self, code: str, total: Decimal, now: datetime) -> VoucherRecord:
        record = await self.lookup.find_voucher_by_code(code)
        result = validate_voucher(record, total, now)
        if not result.valid:
            raise rejection(VOUCHER, code, result.reason, record)
        return result.instrument

    async def _validated_promotions(self, request: DiscountRequest, now: datetime) -> List[PromotionRecord]:
        codes = request.promotion_codes
        records = await asyncio.gather(*(self.lookup.find_promotion_by_code(code) for code in codes))

        promotions = []
        for code, record in zip(codes, records):
            result = validate_promotion(record, request.items, now)
            if not result.valid:
                raise rejection(PROMOTION, code, result.reason, record)
            promotions.append(result.instrument)
        return promotions

    # -----------------------
    # Commit phase (writes)
    # -----------------------
    async def _record_usage(self, voucher: Optional[VoucherRecord], promotions: Sequence[PromotionRecord]) -> None:
        if voucher is not None:
            try:
                await self.usage.increment_voucher_usage(voucher.id)
            except UsageLimitReached:
                raise rejection(VOUCHER, voucher.code, RejectionReason.USAGE_EXCEEDED)
        for promotion in promotions:
            try:
                await self.usage.increment_promotion_usage(promotion.id)
            except UsageLimitReached:
                raise rejection(PROMOTION, promotion.code, RejectionReason.USAGE_EXCEEDED)

    async def apply_discounts(self, request: DiscountRequest) -> Any:
        request = self.normalize_codes(request)
        total = self.check_request(request)
        now = self.clock()

        try:
            voucher = None
            if request.voucher_code:
                voucher = await self._validated_voucher(request.voucher_code, total, now)
            promotions = await self._validated_promotions(request, now) if request.promotion_codes else []

            raw_amounts = []
            if voucher is not None:
                raw_amounts.append(voucher.rule.amount(total))
            for promotion in promotions:
                raw_amounts.append(promotion.rule.amount(eligible_subtotal(promotion, request.items)))

            capped = enforce_cap(raw_amounts, total, self.config.max_discount_ratio)
            amounts = iter(capped.components)

            applied_voucher = None
            if voucher is not None:
                applied_voucher = AppliedInstrument(voucher.id, voucher.code, next(amounts))
            applied_promotions = [AppliedInstrument(p.id, p.code, next(amounts)) for p in promotions]

            draft = OrderDraft(
                user_id=request.user_id,
                items=list(request.items),
                total_amount=total,
                discount_applied=capped.discount_applied,
                final_amount=total - capped.discount_applied,
                applied_voucher=applied_voucher,
                applied_promotions=applied_promotions,
            )

            await self._record_usage(voucher, promotions)
            order = await self.orders.persist_order(draft)
        except InstrumentRejected as exc:
            logger.info("Discount rejected for user %s: %s", request.user_id, exc.message)
            raise
        except AppError:
            raise
        except Exception as exc:
            logger.exception("Failed to apply discounts for user %s", request.user_id)
            raise AppError("Failed to apply discounts", ErrorKind.SYSTEM) from exc

        if capped.capped:
            logger.info(
                "Discount capped for user %s: raw=%s applied=%s", request.user_id, capped.raw_total, capped.discount_applied
            )
        logger.info(
            "Order created for user %s: total=%s discount=%s final=%s",
            request.user_id, draft.total_amount, draft.discount_applied, draft.final_amount,
        )
        return order
