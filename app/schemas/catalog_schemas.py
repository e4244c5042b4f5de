# app/schemas/catalog_schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from typing_extensions import Annotated
from datetime import datetime
from decimal import Decimal

NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


# --------------------------
# Category
# --------------------------
class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --------------------------
# Product
# --------------------------
class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category_id: int
    price: NonNegativeDecimal
    description: Optional[str] = None
    stock: int = Field(default=0, ge=0)
    is_active: bool = True


class ProductUpdate(BaseModel):
    """
    All fields optional for partial updates.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category_id: Optional[int] = None
    price: Optional[NonNegativeDecimal] = None
    description: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class ProductOut(BaseModel):
    id: int
    name: str
    category_id: int
    price: Decimal
    description: Optional[str] = None
    stock: int
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# --------------------------
# Envelopes
# --------------------------
class CategoryResponse(BaseModel):
    message: str
    data: Optional[CategoryOut] = None


class CategoryListResponse(BaseModel):
    message: str
    data: List[CategoryOut]


class ProductResponse(BaseModel):
    message: str
    data: Optional[ProductOut] = None


class ProductListResponse(BaseModel):
    message: str
    data: List[ProductOut]
