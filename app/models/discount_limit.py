# app/models/discount_limit.py
from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, UniqueConstraint, func

from app.core.db import Base


class DiscountLimit(Base):
    """
    Cap overlay + lifetime claim counter for one (brand, discount).
    Works for static and admin-configured discounts alike.
    """

    __tablename__ = "discount_limits"
    __table_args__ = (
        UniqueConstraint("brand_id", "discount_id", name="discount_limits_brand_discount_uq"),
        CheckConstraint("claims_used >= 0", name="discount_limits_claims_used_check"),
    )

    id = Column(Integer, primary_key=True, index=True)

    brand_id = Column(String(64), nullable=False, index=True)
    discount_id = Column(String(64), nullable=False)

    max_per_day = Column(Integer, nullable=True)  # None = use catalog value, 0 = unlimited
    max_claims = Column(Integer, nullable=True)   # None = no lifetime cap
    claims_used = Column(Integer, nullable=False, default=0)

    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
