# app/models/discount.py
from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from app.core.db import Base


class Discount(Base):
    """Admin-configured catalog entry. Overrides the static per-brand list."""

    __tablename__ = "discounts"
    __table_args__ = (
        UniqueConstraint("brand_id", "discount_id", name="discounts_brand_discount_uq"),
        CheckConstraint("limit_per_day >= 0", name="discounts_limit_per_day_check"),
    )

    id = Column(Integer, primary_key=True, index=True)

    brand_id = Column(String(64), nullable=False, index=True)
    discount_id = Column(String(64), nullable=False)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)

    limit_per_day = Column(Integer, nullable=False, server_default="0")  # 0 = unlimited
    max_claims_total = Column(Integer, nullable=True)

    # "HH:MM", None = open on that side
    start_time = Column(String(5), nullable=True)
    end_time = Column(String(5), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
