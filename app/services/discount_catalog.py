# app/services/discount_catalog.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.discount import Discount
from app.services.discount_store import STORAGE_ERRORS, DiscountStorageError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscountDefinition:
    id: str
    brand_id: str
    title: str
    description: str | None = None
    limit_per_day: int = 0                 # <= 0 = no daily limit
    max_claims_total: int | None = None    # None / <= 0 = no lifetime cap
    start_time: str | None = None          # "HH:MM"
    end_time: str | None = None            # "HH:MM"
    active: bool = True


class DiscountCatalog(Protocol):
    async def get_catalog(self, brand_id: str) -> list[DiscountDefinition]:
        ...


def _static(brand_id: str, *entries: dict) -> list[DiscountDefinition]:
    return [DiscountDefinition(brand_id=brand_id, **e) for e in entries]


# Bookable offers per brand when no admin-configured catalog exists.
STATIC_DISCOUNTS: dict[str, list[DiscountDefinition]] = {
    "kiik69": _static(
        "kiik69",
        {"id": "kiik-10-percent", "title": "10% off on total bill", "limit_per_day": 20},
        {
            "id": "kiik-lunch",
            "title": "Lunch Special @ ₹128",
            "start_time": "12:00",
            "end_time": "19:00",
        },
    ),
    "c53": _static(
        "c53",
        {
            "id": "lunch-special",
            "title": "Lunch Special @ ₹127",
            "description": "Eat & drink anything 12PM-7PM",
            "start_time": "12:00",
            "end_time": "19:00",
        },
    ),
    "boiler-room": _static(
        "boiler-room",
        {
            "id": "lunch-special",
            "title": "Lunch Special @ ₹127",
            "start_time": "12:00",
            "end_time": "19:00",
        },
    ),
    "alehouse": _static(
        "alehouse",
        {
            "id": "alehouse-lunch",
            "title": "Lunch Special @ ₹128",
            "start_time": "12:00",
            "end_time": "19:00",
        },
        {"id": "alehouse-liquor", "title": "50% off on liquor"},
    ),
    "skyhy": _static(
        "skyhy",
        {
            "id": "skyhy-lunch",
            "title": "Lunch Special @ ₹128",
            "start_time": "12:00",
            "end_time": "19:00",
        },
    ),
}


class StaticCatalog:
    def __init__(self, table: dict[str, list[DiscountDefinition]] | None = None):
        self._table = STATIC_DISCOUNTS if table is None else table

    async def get_catalog(self, brand_id: str) -> list[DiscountDefinition]:
        return list(self._table.get(brand_id, []))


def definition_from_row(row: Discount) -> DiscountDefinition:
    return DiscountDefinition(
        id=row.discount_id,
        brand_id=row.brand_id,
        title=row.title,
        description=row.description,
        limit_per_day=int(row.limit_per_day or 0),
        max_claims_total=row.max_claims_total,
        start_time=row.start_time,
        end_time=row.end_time,
        active=bool(row.is_active),
    )


class DatabaseCatalog:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get_catalog(self, brand_id: str) -> list[DiscountDefinition]:
        try:
            res = await self._db.execute(
                select(Discount)
                .where(Discount.brand_id == brand_id)
                .order_by(Discount.created_at.asc(), Discount.id.asc())
            )
            rows = res.scalars().all()
        except STORAGE_ERRORS as e:
            await self._db.rollback()
            raise DiscountStorageError("Discount catalog is unavailable") from e

        return [definition_from_row(r) for r in rows]


class FallbackCatalog:
    """Admin-configured discounts first; the static table when there are none or the DB is down."""

    def __init__(self, primary: DiscountCatalog, fallback: DiscountCatalog):
        self.primary = primary
        self.fallback = fallback

    async def get_catalog(self, brand_id: str) -> list[DiscountDefinition]:
        try:
            items = await self.primary.get_catalog(brand_id)
        except DiscountStorageError as e:
            logger.warning("catalog for %s unavailable, using static list: %s", brand_id, e)
            return await self.fallback.get_catalog(brand_id)

        if items:
            return items
        return await self.fallback.get_catalog(brand_id)


STATIC_CATALOG = StaticCatalog()


async def find_definition(
    catalog: DiscountCatalog, brand_id: str, discount_id: str
) -> DiscountDefinition | None:
    for d in await catalog.get_catalog(brand_id):
        if d.id == discount_id:
            return d
    return None
