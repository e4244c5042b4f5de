# app/schemas/order_schemas.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from typing_extensions import Annotated
from datetime import datetime
from decimal import Decimal

from app.engine.records import DiscountRequest, OrderLine

NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=14, decimal_places=2)]


# --------------------------
# Request
# --------------------------
class OrderItemIn(BaseModel):
    product_id: int
    category_id: int
    price: NonNegativeDecimal
    quantity: int = Field(..., ge=1)


class ApplyDiscountRequest(BaseModel):
    user_id: int
    items: List[OrderItemIn] = Field(..., min_length=1)
    voucher_code: Optional[str] = None
    promotion_codes: List[str] = Field(default_factory=list)

    @field_validator("voucher_code")
    def voucher_code_not_blank(cls, value):
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Voucher code must be a non-empty string")
        return value

    @field_validator("promotion_codes")
    def promotion_codes_not_blank(cls, value):
        codes = [code.strip() for code in value]
        if any(not code for code in codes):
            raise ValueError("Each promotion code must be a non-empty string")
        return codes

    def to_request(self) -> DiscountRequest:
        return DiscountRequest(
            user_id=self.user_id,
            items=[
                OrderLine(
                    product_id=item.product_id,
                    category_id=item.category_id,
                    unit_price=item.price,
                    quantity=item.quantity,
                )
                for item in self.items
            ],
            voucher_code=self.voucher_code,
            promotion_codes=list(self.promotion_codes),
        )


# --------------------------
# Response
# --------------------------
class OrderItemOut(BaseModel):
    product_id: int
    category_id: int
    price: Decimal
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class AppliedVoucherOut(BaseModel):
    voucher_id: Optional[int] = None
    code: str
    discount_amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class AppliedPromotionOut(BaseModel):
    promotion_id: Optional[int] = None
    code: str
    discount_amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: int
    items: List[OrderItemOut]
    total_amount: Decimal
    discount_applied: Decimal
    final_amount: Decimal
    applied_voucher: Optional[AppliedVoucherOut] = None
    applied_promotions: List[AppliedPromotionOut] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    message: str
    data: OrderOut


class OrderListResponse(BaseModel):
    message: str
    data: List[OrderOut]
