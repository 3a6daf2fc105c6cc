# app/routers/admin_discounts.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.deps import require_venue_admin
from app.models.discount import Discount
from app.schemas.discounts import DiscountCreateIn, DiscountListOut, DiscountOut, DiscountUpdateIn
from app.services.discount_store import MIGRATIONS_HINT, STORAGE_ERRORS
from app.services.discounts import create_discount, delete_discount, list_discounts, update_discount

router = APIRouter(prefix="/admin/venues", tags=["Admin - Discounts"])


def _out(d: Discount) -> DiscountOut:
    return DiscountOut(
        id=d.discount_id,
        title=d.title,
        description=d.description or "",
        limit_per_day=int(d.limit_per_day or 0),
        max_claims_total=d.max_claims_total,
        start_time=d.start_time,
        end_time=d.end_time,
        active=bool(d.is_active),
        created_at=d.created_at,
    )


@router.get("/{brand_id}/discounts", response_model=DiscountListOut)
async def get_discounts(
    brand_id: str,
    db: AsyncSession = Depends(get_db),
    admin_user=Depends(require_venue_admin),
):
    try:
        rows = await list_discounts(db, brand_id=brand_id)
    except STORAGE_ERRORS:
        raise HTTPException(status_code=503, detail=MIGRATIONS_HINT)
    return DiscountListOut(items=[_out(d) for d in rows])


@router.post("/{brand_id}/discounts", response_model=DiscountOut, status_code=201)
async def add_discount(
    brand_id: str,
    body: DiscountCreateIn,
    db: AsyncSession = Depends(get_db),
    admin_user=Depends(require_venue_admin),
):
    try:
        d = await create_discount(
            db,
            brand_id=brand_id,
            discount_id=body.id,
            title=body.title,
            description=body.description,
            limit_per_day=body.limit_per_day,
            max_claims_total=body.max_claims_total,
            start_time=body.start_time,
            end_time=body.end_time,
            is_active=body.active,
        )
    except STORAGE_ERRORS:
        raise HTTPException(status_code=503, detail=MIGRATIONS_HINT)
    return _out(d)


@router.patch("/{brand_id}/discounts", response_model=DiscountOut)
async def edit_discount(
    brand_id: str,
    body: DiscountUpdateIn,
    db: AsyncSession = Depends(get_db),
    admin_user=Depends(require_venue_admin),
):
    updates = body.model_dump(exclude_unset=True, exclude={"id"})
    if "active" in updates:
        updates["is_active"] = bool(updates.pop("active"))
    if "title" in updates and updates["title"] is None:
        updates.pop("title")

    try:
        d = await update_discount(db, brand_id=brand_id, discount_id=body.id.strip(), updates=updates)
    except STORAGE_ERRORS:
        raise HTTPException(status_code=503, detail=MIGRATIONS_HINT)
    return _out(d)


@router.delete("/{brand_id}/discounts/{discount_id}")
async def remove_discount(
    brand_id: str,
    discount_id: str,
    db: AsyncSession = Depends(get_db),
    admin_user=Depends(require_venue_admin),
):
    try:
        await delete_discount(db, brand_id=brand_id, discount_id=discount_id)
    except STORAGE_ERRORS:
        raise HTTPException(status_code=503, detail=MIGRATIONS_HINT)
    return {"success": True}
