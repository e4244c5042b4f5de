# app/services/voucher_service.py
import logging
from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.voucher_models import Voucher
from app.schemas.voucher_schemas import VoucherCreate, VoucherUpdate, VoucherOut
from app.utils.code_utils import generate_code
from app.utils.instrument_checks import check_expiration, check_percentage, check_usage, clean_code

logger = logging.getLogger(__name__)


# -----------------------
# Helpers
# -----------------------
async def _code_exists(db: AsyncSession, code: str, exclude_id: int | None = None) -> bool:
    query = select(Voucher.id).where(Voucher.code == code)
    if exclude_id is not None:
        query = query.where(Voucher.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None


async def _get_voucher(db: AsyncSession, voucher_id: int) -> Voucher:
    voucher = await db.get(Voucher, voucher_id)
    if not voucher:
        raise HTTPException(status_code=404, detail="Voucher not found")
    return voucher


# -----------------------
# CREATE
# -----------------------
async def create_voucher(db: AsyncSession, payload: VoucherCreate) -> dict:
    check_percentage(payload.discount_type, payload.discount_value)
    check_expiration(payload.expiration_date)
    check_usage(payload.usage_limit, payload.used_count)

    code = clean_code(payload.code, "Voucher") if payload.code and payload.code.strip() else generate_code("VCH")
    if await _code_exists(db, code):
        raise HTTPException(status_code=400, detail="Voucher code already exists")

    voucher = Voucher(**payload.model_dump(exclude={"code"}), code=code)
    db.add(voucher)
    await db.commit()
    await db.refresh(voucher)

    logger.info("Created voucher %s (%s %s)", voucher.code, voucher.discount_type, voucher.discount_value)
    return {"message": "Voucher created successfully", "data": VoucherOut.model_validate(voucher)}


# -----------------------
# READ
# -----------------------
async def get_vouchers(db: AsyncSession, is_active: bool | None = None) -> dict:
    query = select(Voucher)
    if is_active is not None:
        query = query.where(Voucher.is_active == is_active)
    result = await db.execute(query.order_by(Voucher.created_at.desc(), Voucher.id.desc()))
    vouchers = result.scalars().all()
    return {
        "message": "Vouchers retrieved successfully",
        "data": [VoucherOut.model_validate(v) for v in vouchers],
    }


async def get_voucher_by_id(db: AsyncSession, voucher_id: int) -> dict:
    voucher = await _get_voucher(db, voucher_id)
    return {"message": "Voucher retrieved successfully", "data": VoucherOut.model_validate(voucher)}


# -----------------------
# UPDATE
# -----------------------
async def update_voucher(db: AsyncSession, voucher_id: int, payload: VoucherUpdate) -> dict:
    voucher = await _get_voucher(db, voucher_id)
    update_data = payload.model_dump(exclude_unset=True)

    if "discount_type" in update_data or "discount_value" in update_data:
        check_percentage(
            update_data.get("discount_type", voucher.discount_type),
            update_data.get("discount_value", voucher.discount_value),
        )

    if update_data.get("usage_limit") is not None:
        check_usage(update_data["usage_limit"], voucher.used_count)

    if update_data.get("code") is not None:
        update_data["code"] = clean_code(update_data["code"], "Voucher")
        if await _code_exists(db, update_data["code"], exclude_id=voucher_id):
            raise HTTPException(status_code=400, detail="Voucher code already exists")

    for key, value in update_data.items():
        if value is None:
            continue
        setattr(voucher, key, value)

    await db.commit()
    await db.refresh(voucher)
    return {"message": "Voucher updated successfully", "data": VoucherOut.model_validate(voucher)}


# -----------------------
# DELETE
# -----------------------
async def delete_voucher(db: AsyncSession, voucher_id: int) -> dict:
    voucher = await _get_voucher(db, voucher_id)
    await db.delete(voucher)
    await db.commit()
    logger.info("Deleted voucher %s", voucher.code)
    return {"message": "Voucher deleted successfully", "data": None}
