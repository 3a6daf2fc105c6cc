# app/schemas/discount_limits.py
from __future__ import annotations

from pydantic import Field

from app.schemas.common import CamelModel


class DiscountLimitIn(CamelModel):
    discount_id: str = Field(..., min_length=1)
    # fractional caps are floored by the service
    max_per_day: float | None = Field(default=None, allow_inf_nan=False)
    max_claims: float | None = Field(default=None, allow_inf_nan=False)


class DiscountLimitOut(CamelModel):
    discount_id: str
    max_per_day: int | None
    max_claims: int | None
    claims_used: int


class DiscountLimitItemOut(CamelModel):
    discount_id: str
    label: str
    active: bool
    max_per_day: int
    max_claims: int | None
    used: int
    claims_used: int
    available: bool


class DiscountLimitsOut(CamelModel):
    date: str
    items: list[DiscountLimitItemOut]


class DiscountUsageResetIn(CamelModel):
    day: str | None = Field(default=None, alias="date")
    discount_id: str | None = None
    reset_claims: bool = False


class DiscountUsageResetOut(CamelModel):
    success: bool = True
    date: str | None
    discount_id: str
    reset_claims: bool
    rows: int
