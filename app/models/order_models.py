# app/models/order_models.py
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from app.core.db import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)

    total_amount = Column(Numeric(14, 4), nullable=False)
    discount_applied = Column(Numeric(14, 4), default=0, nullable=False)
    final_amount = Column(Numeric(14, 4), nullable=False)

    # Snapshot of the applied voucher (at most one)
    voucher_id = Column(Integer, ForeignKey("vouchers.id", ondelete="SET NULL"), nullable=True, index=True)
    voucher_code = Column(String(50), nullable=True)
    voucher_discount_amount = Column(Numeric(14, 4), nullable=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
        lazy="selectin",
    )
    applied_promotions = relationship(
        "OrderPromotion",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderPromotion.position",
        lazy="selectin",
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def applied_voucher(self):
        if self.voucher_code is None:
            return None
        return {
            "voucher_id": self.voucher_id,
            "code": self.voucher_code,
            "discount_amount": self.voucher_discount_amount,
        }


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    # Snapshot values at order time; the product may change or disappear later
    product_id = Column(Integer, nullable=False)
    category_id = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")


class OrderPromotion(Base):
    __tablename__ = "order_promotions"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    promotion_id = Column(Integer, ForeignKey("promotions.id", ondelete="SET NULL"), nullable=True, index=True)
    code = Column(String(50), nullable=False)
    discount_amount = Column(Numeric(14, 4), nullable=False)

    order = relationship("Order", back_populates="applied_promotions")
