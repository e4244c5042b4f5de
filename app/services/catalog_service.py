# app/services/catalog_service.py
import logging
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.category_models import Category
from app.models.product_models import Product
from app.models.promotion_models import promotion_categories, promotion_products
from app.schemas.catalog_schemas import (
    CategoryCreate, CategoryUpdate, CategoryOut,
    ProductCreate, ProductUpdate, ProductOut,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------
# CATEGORIES
# ---------------------------------------------------
async def _targeted_by_promotion(db: AsyncSession, column, target_id: int) -> bool:
    # removing the last target would widen a promotion to the whole order
    result = await db.execute(select(column).where(column == target_id).limit(1))
    return result.first() is not None


async def _get_category(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


async def _category_name_taken(db: AsyncSession, name: str, exclude_id: int | None = None) -> bool:
    query = select(Category.id).where(Category.name == name)
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    result = await db.execute(query)
    return result.first() is not None


async def create_category(db: AsyncSession, data: CategoryCreate) -> dict:
    if await _category_name_taken(db, data.name):
        raise HTTPException(status_code=400, detail=f"Category '{data.name}' already exists")

    category = Category(**data.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return {"message": "Category created successfully", "data": CategoryOut.model_validate(category)}


async def get_all_categories(db: AsyncSession) -> dict:
    result = await db.execute(select(Category).order_by(Category.name))
    categories = result.scalars().all()
    return {
        "message": "Categories fetched successfully",
        "data": [CategoryOut.model_validate(c) for c in categories],
    }


async def get_category(db: AsyncSession, category_id: int) -> dict:
    category = await _get_category(db, category_id)
    return {"message": "Category fetched successfully", "data": CategoryOut.model_validate(category)}


async def update_category(db: AsyncSession, category_id: int, data: CategoryUpdate) -> dict:
    category = await _get_category(db, category_id)
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)

    if "name" in update_data and await _category_name_taken(db, update_data["name"], exclude_id=category_id):
        raise HTTPException(status_code=400, detail=f"Category '{update_data['name']}' already exists")

    for key, value in update_data.items():
        setattr(category, key, value)

    await db.commit()
    await db.refresh(category)
    return {"message": "Category updated successfully", "data": CategoryOut.model_validate(category)}


async def delete_category(db: AsyncSession, category_id: int) -> dict:
    category = await _get_category(db, category_id)
    in_use = await db.execute(select(Product.id).where(Product.category_id == category_id).limit(1))
    if in_use.first() is not None:
        raise HTTPException(status_code=400, detail="Category still has products")
    if await _targeted_by_promotion(db, promotion_categories.c.category_id, category_id):
        raise HTTPException(status_code=400, detail="Category is still targeted by a promotion")

    await db.delete(category)
    await db.commit()
    return {"message": "Category deleted successfully", "data": None}


# ---------------------------------------------------
# PRODUCTS
# ---------------------------------------------------
async def _get_product(db: AsyncSession, product_id: int) -> Product:
    product = await db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


async def create_product(db: AsyncSession, data: ProductCreate) -> dict:
    """
    Create a new product under an existing category.
    """
    try:
        await _get_category(db, data.category_id)

        product = Product(**data.model_dump())
        db.add(product)
        await db.commit()
        await db.refresh(product)
        logger.info("Created product '%s' (ID: %s)", product.name, product.id)
        return {"message": "Product created successfully", "data": ProductOut.model_validate(product)}

    except HTTPException:
        await db.rollback()
        raise
    except IntegrityError as e:
        await db.rollback()
        raise HTTPException(status_code=400, detail=f"Integrity error: {e.orig}")


async def get_all_products(db: AsyncSession) -> dict:
    """
    Fetch all products.
    """
    result = await db.execute(select(Product).order_by(Product.id))
    products = result.scalars().all()
    return {
        "message": "Products fetched successfully",
        "data": [ProductOut.model_validate(p) for p in products],
    }


async def get_product(db: AsyncSession, product_id: int) -> dict:
    product = await _get_product(db, product_id)
    return {"message": "Product fetched successfully", "data": ProductOut.model_validate(product)}


async def update_product(db: AsyncSession, product_id: int, data: ProductUpdate) -> dict:
    product = await _get_product(db, product_id)
    update_data = data.model_dump(exclude_unset=True, exclude_none=True)

    if "category_id" in update_data:
        await _get_category(db, update_data["category_id"])

    for key, value in update_data.items():
        setattr(product, key, value)

    await db.commit()
    await db.refresh(product)
    return {"message": "Product updated successfully", "data": ProductOut.model_validate(product)}


async def delete_product(db: AsyncSession, product_id: int) -> dict:
    product = await _get_product(db, product_id)
    if await _targeted_by_promotion(db, promotion_products.c.product_id, product_id):
        raise HTTPException(status_code=400, detail="Product is still targeted by a promotion")
    await db.delete(product)
    await db.commit()
    return {"message": "Product deleted successfully", "data": None}
