# app/services/order_service.py
import logging
from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import MAX_DISCOUNT_RATIO
from app.engine.engine import DiscountEngine, EngineConfig
from app.models.order_models import Order
from app.schemas.order_schemas import ApplyDiscountRequest, OrderOut
from app.services.discount_store import SqlDiscountStore

logger = logging.getLogger(__name__)


def build_engine(store: SqlDiscountStore) -> DiscountEngine:
    return DiscountEngine(
        lookup=store,
        usage=store,
        orders=store,
        config=EngineConfig(max_discount_ratio=MAX_DISCOUNT_RATIO),
    )


# =====================================================
# 🔹 APPLY DISCOUNTS / CREATE ORDER
# =====================================================
async def apply_discounts(db: AsyncSession, payload: ApplyDiscountRequest) -> dict:
    store = SqlDiscountStore(db)
    engine = build_engine(store)
    try:
        order = await engine.apply_discounts(payload.to_request())
    except Exception:
        await store.rollback()
        raise

    order = await _load_order(db, order.id)
    return {
        "message": "Order created with discounts applied successfully",
        "data": OrderOut.model_validate(order),
    }


# =====================================================
# 🔹 RETRIEVAL
# =====================================================
async def _load_order(db: AsyncSession, order_id: int) -> Order | None:
    result = await db.execute(
        select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_order_by_id(db: AsyncSession, order_id: int) -> dict:
    order = await _load_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return {"message": "Order retrieved successfully", "data": OrderOut.model_validate(order)}


async def get_orders_by_user(db: AsyncSession, user_id: int) -> dict:
    result = await db.execute(
        select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc(), Order.id.desc())
    )
    orders = result.scalars().all()
    return {
        "message": "Orders retrieved successfully",
        "data": [OrderOut.model_validate(o) for o in orders],
    }


async def get_all_orders(db: AsyncSession) -> dict:
    result = await db.execute(select(Order).order_by(Order.created_at.desc(), Order.id.desc()))
    orders = result.scalars().all()
    return {
        "message": "All orders retrieved successfully",
        "data": [OrderOut.model_validate(o) for o in orders],
    }
