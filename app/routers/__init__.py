# app/routers/__init__.py

from .catalog_router import router as catalog_router
from .orders_router import router as orders_router
from .promotions_router import router as promotions_router
from .vouchers_router import router as vouchers_router

__all__ = [
    "catalog_router",
    "orders_router",
    "promotions_router",
    "vouchers_router",
]
