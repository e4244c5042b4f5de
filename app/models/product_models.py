# app/models/product_models.py
from sqlalchemy import (
    Column, Integer, String, Numeric, Boolean, CheckConstraint, Index,
    ForeignKey, DateTime, func
)
from app.core.db import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), index=True, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    description = Column(String(500), nullable=True)
    stock = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(price >= 0, name="check_product_price_non_negative"),
        CheckConstraint(stock >= 0, name="check_product_stock_non_negative"),
        Index("ix_product_name_category", "name", "category_id"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}')>"
