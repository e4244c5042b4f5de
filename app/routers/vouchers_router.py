# app/routers/vouchers_router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.voucher_schemas import VoucherCreate, VoucherUpdate, VoucherResponse, VoucherListResponse
from app.services import voucher_service

router = APIRouter(prefix="/vouchers", tags=["Vouchers"])


@router.post("/", response_model=VoucherResponse, status_code=201)
async def route_create_voucher(payload: VoucherCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a new voucher. A code is generated when none is given.
    """
    return await voucher_service.create_voucher(db, payload)


@router.get("/", response_model=VoucherListResponse)
async def route_get_vouchers(
    db: AsyncSession = Depends(get_db),
    is_active: bool | None = Query(None, description="Filter by active status"),
):
    return await voucher_service.get_vouchers(db, is_active=is_active)


@router.get("/{voucher_id}", response_model=VoucherResponse)
async def route_get_voucher(voucher_id: int, db: AsyncSession = Depends(get_db)):
    """Fetch a single voucher by ID."""
    return await voucher_service.get_voucher_by_id(db, voucher_id)


@router.put("/{voucher_id}", response_model=VoucherResponse)
async def route_update_voucher(voucher_id: int, payload: VoucherUpdate, db: AsyncSession = Depends(get_db)):
    """Update voucher fields; only the provided ones change."""
    return await voucher_service.update_voucher(db, voucher_id, payload)


@router.delete("/{voucher_id}", response_model=VoucherResponse)
async def route_delete_voucher(voucher_id: int, db: AsyncSession = Depends(get_db)):
    return await voucher_service.delete_voucher(db, voucher_id)
