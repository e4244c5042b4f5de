# app/routers/orders_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.order_schemas import ApplyDiscountRequest, OrderResponse, OrderListResponse
from app.services import order_service

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("/apply-discount", response_model=OrderResponse, status_code=201)
async def route_apply_discounts(payload: ApplyDiscountRequest, db: AsyncSession = Depends(get_db)):
    """
    Create an order and apply a voucher and/or promotions to it.

    - the combined discount is capped at 50% of the order total by default
    - a code cannot be both the voucher and a promotion
    - duplicate promotion codes are rejected
    - vouchers must meet their minimum order value
    - vouchers/promotions must be active, unexpired and under their usage limit
    - promotions only discount their eligible products/categories
    """
    return await order_service.apply_discounts(db, payload)


@router.get("/", response_model=OrderListResponse)
async def route_get_all_orders(db: AsyncSession = Depends(get_db)):
    """Fetch every order, newest first."""
    return await order_service.get_all_orders(db)


@router.get("/user/{user_id}", response_model=OrderListResponse)
async def route_get_user_orders(user_id: int, db: AsyncSession = Depends(get_db)):
    return await order_service.get_orders_by_user(db, user_id)


@router.get("/{order_id}", response_model=OrderResponse)
async def route_get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    return await order_service.get_order_by_id(db, order_id)
