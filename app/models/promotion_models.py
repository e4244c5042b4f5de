# app/models/promotion_models.py
from sqlalchemy import (
    Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey, Table, CheckConstraint, func
)
from sqlalchemy.orm import relationship
from app.core.db import Base

promotion_categories = Table(
    "promotion_categories",
    Base.metadata,
    Column("promotion_id", Integer, ForeignKey("promotions.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="RESTRICT"), primary_key=True),
)

promotion_products = Table(
    "promotion_products",
    Base.metadata,
    Column("promotion_id", Integer, ForeignKey("promotions.id", ondelete="CASCADE"), primary_key=True),
    Column("product_id", Integer, ForeignKey("products.id", ondelete="RESTRICT"), primary_key=True),
)


class Promotion(Base):
    __tablename__ = "promotions"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, nullable=False, index=True)
    discount_type = Column(String(20), nullable=False)  # 'percentage' or 'fixed'
    discount_value = Column(Numeric(12, 2), nullable=False)
    expiration_date = Column(DateTime(timezone=True), nullable=False)
    usage_limit = Column(Integer, nullable=False)
    used_count = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    eligible_categories = relationship("Category", secondary=promotion_categories, lazy="selectin")
    eligible_items = relationship("Product", secondary=promotion_products, lazy="selectin")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(usage_limit > 0, name="check_promotion_usage_limit_positive"),
        CheckConstraint(used_count >= 0, name="check_promotion_used_count_non_negative"),
        CheckConstraint(used_count <= usage_limit, name="check_promotion_used_within_limit"),
    )

    @property
    def eligible_category_ids(self) -> list[int]:
        return [c.id for c in self.eligible_categories]

    @property
    def eligible_item_ids(self) -> list[int]:
        return [p.id for p in self.eligible_items]

    def __repr__(self):
        return f"<Promotion(id={self.id}, code='{self.code}')>"
