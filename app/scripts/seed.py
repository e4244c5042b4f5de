# app/scripts/seed.py
import asyncio
import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import delete

from app.core.db import AsyncSessionLocal, init_models
from app.models import Category, Order, Product, Promotion, Voucher
from app.utils.code_utils import generate_code

CATEGORIES = [
    "Electronics", "Clothing", "Home & Garden", "Sports & Outdoors",
    "Books", "Toys & Games", "Health & Beauty", "Office Supplies",
]

PRODUCT_NAMES = [
    "Wireless Headphones", "Smart Watch", "Laptop Stand", "USB-C Cable",
    "Running Shoes", "Yoga Mat", "Water Bottle", "Backpack",
    "Coffee Maker", "Blender", "Novel Collection", "Cookbook",
    "Board Game", "Puzzle", "Face Cream", "Notebook",
]

DISCOUNT_CODES = [
    "SUMMER2025", "WINTER2025", "BLACKFRIDAY", "CYBERMONDAY",
    "STUDENT10", "WELCOME20", "LOYALTY15", "BIRTHDAY25",
]


def _money(low: int, high: int) -> Decimal:
    return Decimal(random.randint(low * 100, high * 100)) / 100


async def seed():
    await init_models()
    now = datetime.now(timezone.utc)

    async with AsyncSessionLocal() as session:
        for model in (Order, Promotion, Voucher, Product, Category):
            await session.execute(delete(model))

        categories = [Category(name=name, description=f"{name} category") for name in CATEGORIES]
        session.add_all(categories)
        await session.flush()

        products = [
            Product(
                name=name,
                category_id=random.choice(categories).id,
                price=_money(10, 500),
                stock=random.randint(0, 100),
            )
            for name in PRODUCT_NAMES
        ]
        session.add_all(products)
        await session.flush()

        codes = list(DISCOUNT_CODES)
        random.shuffle(codes)
        for code in codes[:4]:
            percentage = random.random() < 0.5
            session.add(Voucher(
                code=code,
                discount_type="percentage" if percentage else "fixed",
                discount_value=Decimal(random.randint(5, 30)) if percentage else _money(5, 50),
                expiration_date=now + timedelta(days=random.randint(30, 180)),
                usage_limit=random.randint(10, 100),
                min_order_value=Decimal(random.choice([0, 0, 50, 100])),
            ))

        for code in codes[4:]:
            percentage = random.random() < 0.5
            session.add(Promotion(
                code=code,
                discount_type="percentage" if percentage else "fixed",
                discount_value=Decimal(random.randint(5, 25)) if percentage else _money(5, 40),
                expiration_date=now + timedelta(days=random.randint(30, 180)),
                usage_limit=random.randint(10, 100),
                eligible_categories=random.sample(categories, k=random.randint(0, 2)),
                eligible_items=random.sample(products, k=random.randint(0, 2)),
            ))

        # one already-expired voucher to try the rejection path
        session.add(Voucher(
            code=generate_code("VCH"),
            discount_type="percentage",
            discount_value=Decimal("10"),
            expiration_date=now - timedelta(days=1),
            usage_limit=10,
        ))

        await session.commit()
        print(f"Seeded {len(categories)} categories, {len(products)} products, "
              f"{len(codes[:4]) + 1} vouchers and {len(codes[4:])} promotions")


if __name__ == "__main__":
    asyncio.run(seed())
