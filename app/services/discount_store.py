# app/services/discount_store.py
import asyncio
import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.engine.records import OrderDraft, PromotionRecord, UsageLimitReached, VoucherRecord
from app.engine.rules import rule_for
from app.models.order_models import Order, OrderItem, OrderPromotion
from app.models.promotion_models import Promotion
from app.models.voucher_models import Voucher
from app.utils.decimal_utils import round_stored, to_decimal

logger = logging.getLogger(__name__)


def voucher_record(voucher: Voucher) -> VoucherRecord:
    return VoucherRecord(
        id=voucher.id,
        code=voucher.code,
        rule=rule_for(voucher.discount_type, voucher.discount_value),
        expiration_date=voucher.expiration_date,
        usage_limit=voucher.usage_limit,
        used_count=voucher.used_count,
        is_active=voucher.is_active,
        min_order_value=to_decimal(voucher.min_order_value),
    )


def promotion_record(promotion: Promotion) -> PromotionRecord:
    return PromotionRecord(
        id=promotion.id,
        code=promotion.code,
        rule=rule_for(promotion.discount_type, promotion.discount_value),
        expiration_date=promotion.expiration_date,
        usage_limit=promotion.usage_limit,
        used_count=promotion.used_count,
        is_active=promotion.is_active,
        eligible_categories=frozenset(promotion.eligible_category_ids),
        eligible_items=frozenset(promotion.eligible_item_ids),
    )


class SqlDiscountStore:
    """
    Engine collaborators backed by one AsyncSession.

    Usage increments and the new order are flushed into the same transaction
    and committed together by ``persist_order``. Call ``rollback`` when the
    engine fails so partial increments are discarded.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        # an AsyncSession must not run two statements at once
        self._lock = asyncio.Lock()

    # -----------------------
    # Lookups
    # -----------------------
    async def find_voucher_by_code(self, code: str) -> Optional[VoucherRecord]:
        async with self._lock:
            result = await self.db.execute(select(Voucher).where(Voucher.code == code))
            voucher = result.scalar_one_or_none()
        return voucher_record(voucher) if voucher else None

    async def find_promotion_by_code(self, code: str) -> Optional[PromotionRecord]:
        async with self._lock:
            result = await self.db.execute(select(Promotion).where(Promotion.code == code))
            promotion = result.scalar_one_or_none()
        return promotion_record(promotion) if promotion else None

    # -----------------------
    # Usage increments (guarded, atomic per row)
    # -----------------------
    async def increment_voucher_usage(self, voucher_id: int) -> None:
        async with self._lock:
            result = await self.db.execute(
                update(Voucher)
                .where(Voucher.id == voucher_id, Voucher.used_count < Voucher.usage_limit)
                .values(used_count=Voucher.used_count + 1)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise UsageLimitReached(f"voucher {voucher_id}")

    async def increment_promotion_usage(self, promotion_id: int) -> None:
        async with self._lock:
            result = await self.db.execute(
                update(Promotion)
                .where(Promotion.id == promotion_id, Promotion.used_count < Promotion.usage_limit)
                .values(used_count=Promotion.used_count + 1)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise UsageLimitReached(f"promotion {promotion_id}")

    # -----------------------
    # Order persistence
    # -----------------------
    async def persist_order(self, draft: OrderDraft) -> Order:
        total_amount = round_stored(draft.total_amount)
        discount_applied = round_stored(draft.discount_applied)
        order = Order(
            user_id=draft.user_id,
            total_amount=total_amount,
            discount_applied=discount_applied,
            final_amount=total_amount - discount_applied,
            items=[
                OrderItem(
                    position=position,
                    product_id=line.product_id,
                    category_id=line.category_id,
                    price=line.unit_price,
                    quantity=line.quantity,
                )
                for position, line in enumerate(draft.items)
            ],
            applied_promotions=[
                OrderPromotion(
                    position=position,
                    promotion_id=applied.instrument_id,
                    code=applied.code,
                    discount_amount=round_stored(applied.discount_amount),
                )
                for position, applied in enumerate(draft.applied_promotions)
            ],
        )
        if draft.applied_voucher is not None:
            order.voucher_id = draft.applied_voucher.instrument_id
            order.voucher_code = draft.applied_voucher.code
            order.voucher_discount_amount = round_stored(draft.applied_voucher.discount_amount)

        async with self._lock:
            self.db.add(order)
            await self.db.flush()
            await self.db.commit()
        logger.debug("Persisted order %s", order.id)
        return order

    async def rollback(self) -> None:
        async with self._lock:
            await self.db.rollback()
