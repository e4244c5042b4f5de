# app/routers/promotions_router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.promotion_schemas import (
    PromotionCreate, PromotionUpdate, PromotionResponse, PromotionListResponse
)
from app.services import promotion_service

router = APIRouter(prefix="/promotions", tags=["Promotions"])


@router.post("/", response_model=PromotionResponse, status_code=201)
async def route_create_promotion(payload: PromotionCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a new promotion.
    Leave eligible_categories and eligible_items empty to cover the whole order.
    """
    return await promotion_service.create_promotion(db, payload)


@router.get("/", response_model=PromotionListResponse)
async def route_get_promotions(
    db: AsyncSession = Depends(get_db),
    is_active: bool | None = Query(None, description="Filter by active status"),
):
    return await promotion_service.get_promotions(db, is_active=is_active)


@router.get("/{promotion_id}", response_model=PromotionResponse)
async def route_get_promotion(promotion_id: int, db: AsyncSession = Depends(get_db)):
    return await promotion_service.get_promotion_by_id(db, promotion_id)


@router.put("/{promotion_id}", response_model=PromotionResponse)
async def route_update_promotion(promotion_id: int, payload: PromotionUpdate, db: AsyncSession = Depends(get_db)):
    return await promotion_service.update_promotion(db, promotion_id, payload)


@router.delete("/{promotion_id}", response_model=PromotionResponse)
async def route_delete_promotion(promotion_id: int, db: AsyncSession = Depends(get_db)):
    return await promotion_service.delete_promotion(db, promotion_id)
