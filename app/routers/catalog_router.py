# app/routers/catalog_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.catalog_schemas import (
    CategoryCreate, CategoryUpdate, CategoryResponse, CategoryListResponse,
    ProductCreate, ProductUpdate, ProductResponse, ProductListResponse,
)
from app.services import catalog_service

router = APIRouter(tags=["Catalog"])


# CATEGORIES
@router.post("/categories", response_model=CategoryResponse, status_code=201)
async def route_create_category(payload: CategoryCreate, db: AsyncSession = Depends(get_db)):
    return await catalog_service.create_category(db, payload)


@router.get("/categories", response_model=CategoryListResponse)
async def route_get_categories(db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_all_categories(db)


@router.get("/categories/{category_id}", response_model=CategoryResponse)
async def route_get_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_category(db, category_id)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
async def route_update_category(category_id: int, payload: CategoryUpdate, db: AsyncSession = Depends(get_db)):
    return await catalog_service.update_category(db, category_id, payload)


@router.delete("/categories/{category_id}", response_model=CategoryResponse)
async def route_delete_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return await catalog_service.delete_category(db, category_id)


# PRODUCTS
@router.post("/products", response_model=ProductResponse, status_code=201)
async def route_create_product(payload: ProductCreate, db: AsyncSession = Depends(get_db)):
    return await catalog_service.create_product(db, payload)


@router.get("/products", response_model=ProductListResponse)
async def route_get_products(db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_all_products(db)


@router.get("/products/{product_id}", response_model=ProductResponse)
async def route_get_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_product(db, product_id)


@router.put("/products/{product_id}", response_model=ProductResponse)
async def route_update_product(product_id: int, payload: ProductUpdate, db: AsyncSession = Depends(get_db)):
    return await catalog_service.update_product(db, product_id, payload)


@router.delete("/products/{product_id}", response_model=ProductResponse)
async def route_delete_product(product_id: int, db: AsyncSession = Depends(get_db)):
    return await catalog_service.delete_product(db, product_id)
