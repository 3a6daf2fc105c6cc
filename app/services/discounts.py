# app/services/discounts.py
from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.discount import Discount
from app.services.discount_availability import parse_time_slot


def _clean_time(value) -> str | None:
    # malformed HH:MM is stored as "no bound"
    return parse_time_slot(value) if isinstance(value, str) else None


def _check_window(start_time: str | None, end_time: str | None) -> None:
    if start_time and end_time and end_time <= start_time:
        raise HTTPException(status_code=400, detail="End time must be after start time")


async def _get_discount(db: AsyncSession, brand_id: str, discount_id: str) -> Discount:
    res = await db.execute(
        select(Discount).where(Discount.brand_id == brand_id, Discount.discount_id == discount_id)
    )
    discount = res.scalar_one_or_none()
    if not discount:
        raise HTTPException(status_code=404, detail="Discount not found")
    return discount


async def list_discounts(db: AsyncSession, *, brand_id: str) -> list[Discount]:
    res = await db.execute(
        select(Discount)
        .where(Discount.brand_id == brand_id)
        .order_by(Discount.created_at.asc(), Discount.id.asc())
    )
    return list(res.scalars().all())


async def create_discount(
    db: AsyncSession,
    *,
    brand_id: str,
    discount_id: str,
    title: str,
    description: str | None,
    limit_per_day: int,
    max_claims_total: int | None,
    start_time: str | None,
    end_time: str | None,
    is_active: bool,
) -> Discount:
    discount_id = discount_id.strip()
    if not discount_id:
        raise HTTPException(status_code=400, detail="Discount id is required")

    start_time = _clean_time(start_time)
    end_time = _clean_time(end_time)
    _check_window(start_time, end_time)

    discount = Discount(
        brand_id=brand_id,
        discount_id=discount_id,
        title=title.strip(),
        description=description,
        limit_per_day=max(0, int(limit_per_day or 0)),
        max_claims_total=max_claims_total if max_claims_total and max_claims_total > 0 else None,
        start_time=start_time,
        end_time=end_time,
        is_active=is_active,
    )

    try:
        db.add(discount)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail="Discount id already exists for this venue")

    await db.refresh(discount)
    return discount


async def update_discount(
    db: AsyncSession,
    *,
    brand_id: str,
    discount_id: str,
    updates: dict,
) -> Discount:
    """Partial update; `updates` holds only the fields the admin sent."""
    discount = await _get_discount(db, brand_id, discount_id)
    if not updates:
        return discount

    if "limit_per_day" in updates:
        updates["limit_per_day"] = max(0, int(updates["limit_per_day"] or 0))
    if "max_claims_total" in updates:
        v = updates["max_claims_total"]
        updates["max_claims_total"] = v if v and v > 0 else None
    for key in ("start_time", "end_time"):
        if key in updates:
            updates[key] = _clean_time(updates[key])

    _check_window(
        updates.get("start_time", discount.start_time),
        updates.get("end_time", discount.end_time),
    )

    try:
        for key, value in updates.items():
            setattr(discount, key, value)
        await db.commit()
        await db.refresh(discount)
        return discount

    except Exception:
        await db.rollback()
        raise


async def delete_discount(db: AsyncSession, *, brand_id: str, discount_id: str) -> None:
    discount = await _get_discount(db, brand_id, discount_id)
    try:
        await db.delete(discount)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
