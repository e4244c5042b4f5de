# app/services/promotion_service.py
import logging
from typing import List
from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.category_models import Category
from app.models.product_models import Product
from app.models.promotion_models import Promotion
from app.schemas.promotion_schemas import PromotionCreate, PromotionUpdate, PromotionOut
from app.utils.code_utils import generate_code
from app.utils.instrument_checks import check_expiration, check_percentage, check_usage, clean_code

logger = logging.getLogger(__name__)


# -----------------------
# Helpers
# -----------------------
async def _code_exists(db: AsyncSession, code: str, exclude_id: int | None = None) -> bool:
    query = select(Promotion.id).where(Promotion.code == code)
    if exclude_id is not None:
        query = query.where(Promotion.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None


async def _resolve(db: AsyncSession, model, ids: List[int], label: str) -> list:
    """Load the referenced rows, failing on any unknown id."""
    wanted = set(ids)
    if not wanted:
        return []
    result = await db.execute(select(model).where(model.id.in_(wanted)))
    rows = result.scalars().all()
    missing = wanted - {row.id for row in rows}
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown {label} IDs: {sorted(missing)}")
    return list(rows)


async def _load_promotion(db: AsyncSession, promotion_id: int) -> Promotion:
    result = await db.execute(
        select(Promotion).where(Promotion.id == promotion_id).execution_options(populate_existing=True)
    )
    promotion = result.scalars().first()
    if not promotion:
        raise HTTPException(status_code=404, detail="Promotion not found")
    return promotion


# -----------------------
# CREATE
# -----------------------
async def create_promotion(db: AsyncSession, payload: PromotionCreate) -> dict:
    check_percentage(payload.discount_type, payload.discount_value)
    check_expiration(payload.expiration_date)

    code = clean_code(payload.code, "Promotion") if payload.code and payload.code.strip() else generate_code("PRM")
    if await _code_exists(db, code):
        raise HTTPException(status_code=400, detail="Promotion code already exists")

    categories = await _resolve(db, Category, payload.eligible_categories, "category")
    products = await _resolve(db, Product, payload.eligible_items, "product")

    promotion = Promotion(
        **payload.model_dump(exclude={"code", "eligible_categories", "eligible_items"}),
        code=code,
        used_count=0,
        eligible_categories=categories,
        eligible_items=products,
    )
    db.add(promotion)
    await db.commit()

    promotion = await _load_promotion(db, promotion.id)
    logger.info("Created promotion %s (%s %s)", promotion.code, promotion.discount_type, promotion.discount_value)
    return {"message": "Promotion created successfully", "data": PromotionOut.model_validate(promotion)}


# -----------------------
# READ
# -----------------------
async def get_promotions(db: AsyncSession, is_active: bool | None = None) -> dict:
    query = select(Promotion)
    if is_active is not None:
        query = query.where(Promotion.is_active == is_active)
    result = await db.execute(query.order_by(Promotion.created_at.desc(), Promotion.id.desc()))
    promotions = result.scalars().all()
    return {
        "message": "Promotions retrieved successfully",
        "data": [PromotionOut.model_validate(p) for p in promotions],
    }


async def get_promotion_by_id(db: AsyncSession, promotion_id: int) -> dict:
    promotion = await _load_promotion(db, promotion_id)
    return {"message": "Promotion retrieved successfully", "data": PromotionOut.model_validate(promotion)}


# -----------------------
# UPDATE
# -----------------------
async def update_promotion(db: AsyncSession, promotion_id: int, payload: PromotionUpdate) -> dict:
    promotion = await _load_promotion(db, promotion_id)
    update_data = payload.model_dump(exclude_unset=True)

    if "discount_type" in update_data or "discount_value" in update_data:
        check_percentage(
            update_data.get("discount_type", promotion.discount_type),
            update_data.get("discount_value", promotion.discount_value),
        )

    if update_data.get("usage_limit") is not None:
        check_usage(update_data["usage_limit"], promotion.used_count)

    if update_data.get("code") is not None:
        update_data["code"] = clean_code(update_data["code"], "Promotion")
        if await _code_exists(db, update_data["code"], exclude_id=promotion_id):
            raise HTTPException(status_code=400, detail="Promotion code already exists")

    category_ids = update_data.pop("eligible_categories", None)
    product_ids = update_data.pop("eligible_items", None)
    targeted = bool(promotion.eligible_categories or promotion.eligible_items)
    remaining_categories = promotion.eligible_category_ids if category_ids is None else category_ids
    remaining_items = promotion.eligible_item_ids if product_ids is None else product_ids
    if targeted and not remaining_categories and not remaining_items:
        raise HTTPException(
            status_code=400,
            detail="A targeted promotion must keep at least one eligible category or product",
        )

    if category_ids is not None:
        promotion.eligible_categories = await _resolve(db, Category, category_ids, "category")
    if product_ids is not None:
        promotion.eligible_items = await _resolve(db, Product, product_ids, "product")

    for key, value in update_data.items():
        if value is None:
            continue
        setattr(promotion, key, value)

    await db.commit()
    promotion = await _load_promotion(db, promotion_id)
    return {"message": "Promotion updated successfully", "data": PromotionOut.model_validate(promotion)}


# -----------------------
# DELETE
# -----------------------
async def delete_promotion(db: AsyncSession, promotion_id: int) -> dict:
    promotion = await _load_promotion(db, promotion_id)
    await db.delete(promotion)
    await db.commit()
    logger.info("Deleted promotion %s", promotion.code)
    return {"message": "Promotion deleted successfully", "data": None}
