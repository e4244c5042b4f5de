# app/schemas/promotion_schemas.py
from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from typing import List, Optional
from typing_extensions import Annotated, Literal
from datetime import datetime
from decimal import Decimal

NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


def _normalize_type(value):
    return value.lower() if isinstance(value, str) else value


DiscountType = Annotated[Literal["percentage", "fixed"], BeforeValidator(_normalize_type)]


class PromotionCreate(BaseModel):
    code: Optional[str] = None
    discount_type: DiscountType
    discount_value: NonNegativeDecimal
    expiration_date: datetime
    usage_limit: int = Field(..., ge=1)
    is_active: bool = True
    eligible_categories: List[int] = Field(default_factory=list)
    eligible_items: List[int] = Field(default_factory=list)


class PromotionUpdate(BaseModel):
    code: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[NonNegativeDecimal] = None
    expiration_date: Optional[datetime] = None
    usage_limit: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None
    eligible_categories: Optional[List[int]] = None
    eligible_items: Optional[List[int]] = None


class PromotionOut(BaseModel):
    id: int
    code: str
    discount_type: str
    discount_value: Decimal
    expiration_date: datetime
    usage_limit: int
    used_count: int
    is_active: bool
    eligible_categories: List[int] = Field(validation_alias=AliasChoices("eligible_category_ids", "eligible_categories"))
    eligible_items: List[int] = Field(validation_alias=AliasChoices("eligible_item_ids", "eligible_items"))
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PromotionResponse(BaseModel):
    message: str
    data: Optional[PromotionOut] = None


class PromotionListResponse(BaseModel):
    message: str
    data: List[PromotionOut]
