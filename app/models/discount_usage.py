# app/models/discount_usage.py
from __future__ import annotations

from sqlalchemy import CheckConstraint, Column, Integer, String, UniqueConstraint

from app.core.db import Base


class DiscountUsage(Base):
    __tablename__ = "discount_usage"
    __table_args__ = (
        UniqueConstraint(
            "brand_id", "discount_id", "usage_date", name="discount_usage_brand_discount_date_uq"
        ),
        CheckConstraint("used_count >= 0", name="discount_usage_used_count_check"),
    )

    id = Column(Integer, primary_key=True, index=True)

    brand_id = Column(String(64), nullable=False, index=True)
    discount_id = Column(String(64), nullable=False)
    usage_date = Column(String(10), nullable=False)  # YYYY-MM-DD, venue calendar day

    used_count = Column(Integer, nullable=False, default=0)
