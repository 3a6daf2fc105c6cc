# app/routers/venue_discounts.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.core.deps import get_discount_catalog, get_discount_store
from app.schemas.discounts import (
    AvailabilityItemOut,
    AvailabilityOut,
    AvailableDiscountOut,
    DiscountClaimIn,
    DiscountClaimOut,
    DiscountClaimsOut,
    DiscountsAvailableOut,
)
from app.services.brands import get_brand_or_404
from app.services.discount_availability import (
    evaluate_availability,
    parse_date,
    parse_time_slot,
    time_window_label,
)
from app.services.discount_redemption import redeem_discounts
from app.services.discount_store import (
    MIGRATIONS_HINT,
    DiscountSoldOut,
    DiscountStorageError,
    DiscountValidationError,
)

router = APIRouter(prefix="/venues", tags=["Venue Discounts"])

READ_CACHE_CONTROL = "public, s-maxage=10, stale-while-revalidate=30"


@router.get("/{brand_id}/discounts-availability", response_model=AvailabilityOut)
async def discounts_availability(
    brand_id: str,
    response: Response,
    date: str | None = Query(default=None, description="YYYY-MM-DD, defaults to today"),
    catalog=Depends(get_discount_catalog),
    store=Depends(get_discount_store),
):
    get_brand_or_404(brand_id)
    day = parse_date(date)

    items = await evaluate_availability(catalog, store, brand_id, day)

    response.headers["Cache-Control"] = READ_CACHE_CONTROL
    return AvailabilityOut(
        date=day.isoformat(),
        availability=[
            AvailabilityItemOut(
                discount_id=a.discount_id,
                used=a.used,
                max=a.max,
                available=a.available,
            )
            for a in items
        ],
    )


@router.get("/{brand_id}/discounts-available", response_model=DiscountsAvailableOut)
async def discounts_available(
    brand_id: str,
    response: Response,
    date: str | None = Query(default=None, description="YYYY-MM-DD, defaults to today"),
    time_slot: str | None = Query(default=None, alias="timeSlot", description="HH:MM"),
    catalog=Depends(get_discount_catalog),
    store=Depends(get_discount_store),
):
    # booking form shape: only offers whose time window contains the slot
    get_brand_or_404(brand_id)
    day = parse_date(date)
    slot = parse_time_slot(time_slot)

    items = await evaluate_availability(catalog, store, brand_id, day, slot)

    response.headers["Cache-Control"] = READ_CACHE_CONTROL
    return DiscountsAvailableOut(
        discounts=[
            AvailableDiscountOut(
                id=a.discount_id,
                title=a.definition.title,
                description=a.definition.description or "",
                slots_left=a.slots_left,
                sold_out=not a.available,
                time_window_label=time_window_label(a.definition.start_time, a.definition.end_time),
            )
            for a in items
        ]
    )


@router.post("/{brand_id}/discount-claims", response_model=DiscountClaimsOut)
async def claim_discounts(
    brand_id: str,
    body: DiscountClaimIn,
    catalog=Depends(get_discount_catalog),
    store=Depends(get_discount_store),
):
    get_brand_or_404(brand_id)
    day = parse_date(body.day)

    try:
        claims = await redeem_discounts(
            catalog,
            store,
            brand_id,
            body.discount_ids,
            day,
            parse_time_slot(body.time_slot),
        )
    except DiscountValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DiscountSoldOut as e:
        raise HTTPException(status_code=409, detail=str(e))
    except DiscountStorageError:
        raise HTTPException(status_code=503, detail=MIGRATIONS_HINT)

    return DiscountClaimsOut(
        date=day.isoformat(),
        claims=[
            DiscountClaimOut(
                discount_id=c.discount_id,
                used_today=c.used_today,
                claims_used=c.claims_used,
            )
            for c in claims
        ],
    )
