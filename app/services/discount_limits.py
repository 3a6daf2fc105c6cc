# app/services/discount_limits.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date

from app.services.discount_availability import DiscountAvailability, evaluate_one
from app.services.discount_catalog import DiscountCatalog, find_definition
from app.services.discount_store import (
    UNSET,
    DiscountStorageError,
    DiscountValidationError,
    LimitState,
    SqlDiscountStore,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResetResult:
    discount_id: str | None     # None = every discount of the brand
    day: date | None            # None for lifetime resets
    reset_lifetime: bool
    rows: int


def _floor_cap(value: float | None) -> int:
    return 0 if value is None else max(0, math.floor(value))


async def _require_discount(catalog: DiscountCatalog, brand_id: str, discount_id: str) -> None:
    if await find_definition(catalog, brand_id, discount_id) is None:
        raise DiscountValidationError("Invalid discountId for this brand")


async def limits_overview(
    catalog: DiscountCatalog,
    store: SqlDiscountStore,
    brand_id: str,
    day: date,
) -> list[DiscountAvailability]:
    """Admin view: every catalog entry (inactive included) with caps and both counters."""
    definitions = await catalog.get_catalog(brand_id)
    limits = await store.get_limits(brand_id)
    daily = await store.get_daily_usage(brand_id, day)
    return [evaluate_one(d, limits.get(d.id), daily.get(d.id, 0)) for d in definitions]


async def set_cap(
    catalog: DiscountCatalog,
    store: SqlDiscountStore,
    brand_id: str,
    discount_id: str,
    *,
    today: date,
    max_per_day: float | None = UNSET,
    max_claims: float | None = UNSET,
) -> LimitState:
    """
    Upsert the cap overlay for one discount.

    Both values are floored to non-negative ints. None counts as 0.
    max_per_day 0 = no daily limit, max_claims 0 = no lifetime cap.
    A positive cap below what is already recorded is rejected before anything is written.
    """
    await _require_discount(catalog, brand_id, discount_id)

    if max_per_day is UNSET and max_claims is UNSET:
        raise DiscountValidationError("Provide maxPerDay and/or maxClaims")

    updates: dict = {}

    if max_per_day is not UNSET:
        max_per_day = _floor_cap(max_per_day)
        if max_per_day > 0:
            used_today = (await store.get_daily_usage(brand_id, today)).get(discount_id, 0)
            if max_per_day < used_today:
                raise DiscountValidationError(
                    f"maxPerDay ({max_per_day}) cannot be below today's usage ({used_today}). "
                    "Reset today's usage first."
                )
        updates["max_per_day"] = max_per_day

    if max_claims is not UNSET:
        max_claims = _floor_cap(max_claims)
        if max_claims > 0:
            current = (await store.get_limits(brand_id)).get(discount_id)
            claims_used = current.claims_used if current else 0
            if max_claims < claims_used:
                raise DiscountValidationError(
                    f"maxClaims ({max_claims}) cannot be below claims already used ({claims_used}). "
                    "Reset claims first."
                )
        updates["max_claims"] = max_claims

    try:
        state = await store.upsert_limit(brand_id, discount_id, **updates)
        await store.commit()
    except DiscountStorageError:
        await store.rollback()
        raise

    logger.info("discount cap updated brand=%s discount=%s %s", brand_id, discount_id, updates)
    return state


async def reset_usage(
    catalog: DiscountCatalog,
    store: SqlDiscountStore,
    brand_id: str,
    *,
    today: date,
    discount_id: str | None = None,
    day: date | None = None,
    reset_lifetime: bool = False,
) -> ResetResult:
    if discount_id:
        await _require_discount(catalog, brand_id, discount_id)

    try:
        if reset_lifetime:
            rows = await store.reset_lifetime(brand_id, discount_id)
            result = ResetResult(discount_id=discount_id, day=None, reset_lifetime=True, rows=rows)
        else:
            target = day or today
            rows = await store.reset_daily(brand_id, target, discount_id)
            result = ResetResult(discount_id=discount_id, day=target, reset_lifetime=False, rows=rows)
        await store.commit()
    except DiscountStorageError:
        await store.rollback()
        raise

    logger.info(
        "discount usage reset brand=%s discount=%s day=%s lifetime=%s rows=%s",
        brand_id,
        discount_id or "all",
        result.day,
        reset_lifetime,
        rows,
    )
    return result
