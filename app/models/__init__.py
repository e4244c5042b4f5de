# app/models/__init__.py
from app.models.category_models import Category
from app.models.product_models import Product
from app.models.voucher_models import Voucher
from app.models.promotion_models import Promotion, promotion_categories, promotion_products
from app.models.order_models import Order, OrderItem, OrderPromotion
