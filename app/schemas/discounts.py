# app/schemas/discounts.py
from __future__ import annotations

from datetime import datetime
from pydantic import Field

from app.schemas.common import CamelModel


# -------------------------
# Public
# -------------------------
class AvailabilityItemOut(CamelModel):
    discount_id: str
    used: int
    max: int | None
    available: bool


class AvailabilityOut(CamelModel):
    date: str
    availability: list[AvailabilityItemOut]


class AvailableDiscountOut(CamelModel):
    id: str
    title: str
    description: str
    slots_left: int | None
    sold_out: bool
    time_window_label: str | None


class DiscountsAvailableOut(CamelModel):
    discounts: list[AvailableDiscountOut]


class DiscountClaimIn(CamelModel):
    discount_ids: list[str] = Field(..., min_length=1, max_length=10)
    day: str | None = Field(default=None, alias="date")
    time_slot: str | None = None


class DiscountClaimOut(CamelModel):
    discount_id: str
    used_today: int
    claims_used: int


class DiscountClaimsOut(CamelModel):
    date: str
    claims: list[DiscountClaimOut]


# -------------------------
# Admin catalog
# -------------------------
class DiscountCreateIn(CamelModel):
    id: str = Field(..., min_length=1, max_length=64)
    title: str = Field(..., min_length=1)
    description: str | None = None
    limit_per_day: int = Field(0, ge=0)
    max_claims_total: int | None = Field(default=None, ge=0)
    start_time: str | None = None
    end_time: str | None = None
    active: bool = True


class DiscountUpdateIn(CamelModel):
    id: str = Field(..., min_length=1)
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    limit_per_day: int | None = Field(default=None, ge=0)
    max_claims_total: int | None = Field(default=None, ge=0)
    start_time: str | None = None
    end_time: str | None = None
    active: bool | None = None


class DiscountOut(CamelModel):
    id: str
    title: str
    description: str
    limit_per_day: int
    max_claims_total: int | None
    start_time: str | None
    end_time: str | None
    active: bool
    created_at: datetime | None = None


class DiscountListOut(CamelModel):
    items: list[DiscountOut]
