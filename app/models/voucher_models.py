# app/models/voucher_models.py
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, CheckConstraint, func
from app.core.db import Base


class Voucher(Base):
    __tablename__ = "vouchers"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, nullable=False, index=True)
    discount_type = Column(String(20), nullable=False)  # 'percentage' or 'fixed'
    discount_value = Column(Numeric(12, 2), nullable=False)
    expiration_date = Column(DateTime(timezone=True), nullable=False, index=True)
    usage_limit = Column(Integer, nullable=False)
    used_count = Column(Integer, default=0, nullable=False)
    min_order_value = Column(Numeric(12, 2), default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(usage_limit > 0, name="check_voucher_usage_limit_positive"),
        CheckConstraint(used_count >= 0, name="check_voucher_used_count_non_negative"),
        CheckConstraint(used_count <= usage_limit, name="check_voucher_used_within_limit"),
        CheckConstraint(min_order_value >= 0, name="check_voucher_min_order_non_negative"),
    )

    def __repr__(self):
        return f"<Voucher(id={self.id}, code='{self.code}')>"
