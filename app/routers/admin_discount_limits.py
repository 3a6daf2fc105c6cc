# app/routers/admin_discount_limits.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from app.core.deps import get_discount_catalog, get_discount_store, require_venue_admin
from app.schemas.discount_limits import (
    DiscountLimitIn,
    DiscountLimitItemOut,
    DiscountLimitOut,
    DiscountLimitsOut,
    DiscountUsageResetIn,
    DiscountUsageResetOut,
)
from app.services.discount_availability import parse_date, venue_today
from app.services.discount_limits import limits_overview, reset_usage, set_cap
from app.services.discount_store import (
    MIGRATIONS_HINT,
    UNSET,
    DiscountStorageError,
    DiscountValidationError,
)

router = APIRouter(prefix="/admin/venues", tags=["Admin - Discount Limits"])


@router.get("/{brand_id}/discount-limits", response_model=DiscountLimitsOut)
async def get_discount_limits(
    brand_id: str,
    date: str | None = Query(default=None),
    catalog=Depends(get_discount_catalog),
    store=Depends(get_discount_store),
    admin_user=Depends(require_venue_admin),
):
    day = parse_date(date)
    try:
        items = await limits_overview(catalog, store, brand_id, day)
    except DiscountStorageError:
        raise HTTPException(status_code=503, detail=MIGRATIONS_HINT)

    return DiscountLimitsOut(
        date=day.isoformat(),
        items=[
            DiscountLimitItemOut(
                discount_id=a.discount_id,
                label=a.definition.title,
                active=a.definition.active,
                max_per_day=a.max_per_day,
                max_claims=a.max_claims,
                used=a.used_today,
                claims_used=a.claims_used,
                available=a.available,
            )
            for a in items
        ],
    )


@router.post("/{brand_id}/discount-limits", response_model=DiscountLimitOut)
async def save_discount_limit(
    brand_id: str,
    body: DiscountLimitIn,
    catalog=Depends(get_discount_catalog),
    store=Depends(get_discount_store),
    admin_user=Depends(require_venue_admin),
):
    sent = body.model_fields_set
    try:
        state = await set_cap(
            catalog,
            store,
            brand_id,
            body.discount_id.strip(),
            today=venue_today(),
            max_per_day=body.max_per_day if "max_per_day" in sent else UNSET,
            max_claims=body.max_claims if "max_claims" in sent else UNSET,
        )
    except DiscountValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DiscountStorageError:
        raise HTTPException(status_code=503, detail=MIGRATIONS_HINT)

    return DiscountLimitOut(
        discount_id=state.discount_id,
        max_per_day=state.max_per_day,
        max_claims=state.max_claims,
        claims_used=state.claims_used,
    )


@router.post("/{brand_id}/discount-limits/reset", response_model=DiscountUsageResetOut)
async def reset_discount_usage(
    brand_id: str,
    body: DiscountUsageResetIn,
    catalog=Depends(get_discount_catalog),
    store=Depends(get_discount_store),
    admin_user=Depends(require_venue_admin),
):
    discount_id = (body.discount_id or "").strip() or None
    try:
        result = await reset_usage(
            catalog,
            store,
            brand_id,
            today=venue_today(),
            discount_id=discount_id,
            day=parse_date(body.day) if body.day else None,
            reset_lifetime=body.reset_claims,
        )
    except DiscountValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DiscountStorageError:
        raise HTTPException(status_code=503, detail=MIGRATIONS_HINT)

    return DiscountUsageResetOut(
        date=result.day.isoformat() if result.day else None,
        discount_id=result.discount_id or "all",
        reset_claims=result.reset_lifetime,
        rows=result.rows,
    )
