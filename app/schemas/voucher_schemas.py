# app/schemas/voucher_schemas.py
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from typing import List, Optional
from typing_extensions import Annotated, Literal
from datetime import datetime
from decimal import Decimal

NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


def _normalize_type(value):
    return value.lower() if isinstance(value, str) else value


DiscountType = Annotated[Literal["percentage", "fixed"], BeforeValidator(_normalize_type)]


class VoucherCreate(BaseModel):
    code: Optional[str] = None
    discount_type: DiscountType
    discount_value: NonNegativeDecimal
    expiration_date: datetime
    usage_limit: int = Field(..., ge=1)
    used_count: int = Field(default=0, ge=0)
    min_order_value: NonNegativeDecimal = Decimal("0")
    is_active: bool = True


class VoucherUpdate(BaseModel):
    code: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[NonNegativeDecimal] = None
    expiration_date: Optional[datetime] = None
    usage_limit: Optional[int] = Field(default=None, ge=1)
    min_order_value: Optional[NonNegativeDecimal] = None
    is_active: Optional[bool] = None


class VoucherOut(BaseModel):
    id: int
    code: str
    discount_type: str
    discount_value: Decimal
    expiration_date: datetime
    usage_limit: int
    used_count: int
    min_order_value: Decimal
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class VoucherResponse(BaseModel):
    message: str
    data: Optional[VoucherOut] = None


class VoucherListResponse(BaseModel):
    message: str
    data: List[VoucherOut]
