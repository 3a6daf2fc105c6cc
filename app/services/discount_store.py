# app/services/discount_store.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.discount_limit import DiscountLimit
from app.models.discount_usage import DiscountUsage


logger = logging.getLogger(__name__)


class DiscountError(Exception):
    pass


class DiscountValidationError(DiscountError):
    pass


class DiscountSoldOut(DiscountError):
    pass


class DiscountStorageError(DiscountError):
    pass


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# marks "leave this field alone" in partial updates
UNSET: Any = _Unset()

# 503 detail for every write endpoint backed by discount storage
MIGRATIONS_HINT = (
    "Discount tables are missing or the database is unreachable. "
    "Run the pending database migrations."
)

# asyncpg raises connect failures (refused, timeout) as plain OSError
STORAGE_ERRORS = (SQLAlchemyError, OSError)


@dataclass(frozen=True)
class LimitState:
    """
    Admin overlay for one discount.
    max_per_day / max_claims: None = inherit catalog value, 0 = unlimited.
    """

    discount_id: str
    max_per_day: int | None = None
    max_claims: int | None = None
    claims_used: int = 0


@dataclass(frozen=True)
class ClaimResult:
    discount_id: str
    used_today: int
    claims_used: int


class SqlDiscountStore:
    """
    Usage counters and cap overlays backed by SQLAlchemy.

    Every failure of the underlying database (unreachable, tables not migrated)
    surfaces as DiscountStorageError so callers can pick their own recovery.
    """

    def __init__(self, db: AsyncSession):
        self._db = db

    @asynccontextmanager
    async def _storage(self, action: str):
        try:
            yield
        except STORAGE_ERRORS as e:
            logger.warning("discount storage failed during %s: %s", action, e)
            await self._db.rollback()
            raise DiscountStorageError(MIGRATIONS_HINT) from e

    def _insert_ignore(self, model, index_elements: list[str], **values):
        dialect = self._db.get_bind().dialect.name
        if dialect == "postgresql":
            stmt = postgresql.insert(model)
        elif dialect == "sqlite":
            stmt = sqlite.insert(model)
        else:
            raise DiscountStorageError(f"Unsupported database dialect: {dialect}")
        return stmt.values(**values).on_conflict_do_nothing(index_elements=index_elements)

    # -------------------------
    # Reads
    # -------------------------
    async def get_limits(self, brand_id: str) -> dict[str, LimitState]:
        async with self._storage("get_limits"):
            res = await self._db.execute(
                select(DiscountLimit)
                .where(DiscountLimit.brand_id == brand_id)
                .execution_options(populate_existing=True)
            )
            rows = res.scalars().all()

        return {
            r.discount_id: LimitState(
                discount_id=r.discount_id,
                max_per_day=r.max_per_day,
                max_claims=r.max_claims,
                claims_used=int(r.claims_used or 0),
            )
            for r in rows
        }

    async def get_daily_usage(self, brand_id: str, day: date) -> dict[str, int]:
        async with self._storage("get_daily_usage"):
            res = await self._db.execute(
                select(DiscountUsage.discount_id, DiscountUsage.used_count).where(
                    DiscountUsage.brand_id == brand_id,
                    DiscountUsage.usage_date == day.isoformat(),
                )
            )
            rows = res.all()

        return {discount_id: int(used or 0) for discount_id, used in rows}

    # -------------------------
    # Admin writes
    # -------------------------
    async def upsert_limit(
        self,
        brand_id: str,
        discount_id: str,
        *,
        max_per_day: int | None = UNSET,
        max_claims: int | None = UNSET,
    ) -> LimitState:
        values: dict[str, Any] = {}
        if max_per_day is not UNSET:
            values["max_per_day"] = max_per_day
        if max_claims is not UNSET:
            values["max_claims"] = max_claims

        async with self._storage("upsert_limit"):
            await self._db.execute(
                self._insert_ignore(
                    DiscountLimit,
                    ["brand_id", "discount_id"],
                    brand_id=brand_id,
                    discount_id=discount_id,
                    claims_used=0,
                )
            )
            if values:
                await self._db.execute(
                    update(DiscountLimit)
                    .where(
                        DiscountLimit.brand_id == brand_id,
                        DiscountLimit.discount_id == discount_id,
                    )
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )

            res = await self._db.execute(
                select(DiscountLimit).where(
                    DiscountLimit.brand_id == brand_id,
                    DiscountLimit.discount_id == discount_id,
                )
                .execution_options(populate_existing=True)
            )
            row = res.scalar_one()

        return LimitState(
            discount_id=row.discount_id,
            max_per_day=row.max_per_day,
            max_claims=row.max_claims,
            claims_used=int(row.claims_used or 0),
        )

    async def reset_daily(self, brand_id: str, day: date, discount_id: str | None = None) -> int:
        stmt = update(DiscountUsage).where(
            DiscountUsage.brand_id == brand_id,
            DiscountUsage.usage_date == day.isoformat(),
        )
        if discount_id:
            stmt = stmt.where(DiscountUsage.discount_id == discount_id)

        async with self._storage("reset_daily"):
            res = await self._db.execute(
                stmt.values(used_count=0).execution_options(synchronize_session=False)
            )
        return int(res.rowcount or 0)

    async def reset_lifetime(self, brand_id: str, discount_id: str | None = None) -> int:
        stmt = update(DiscountLimit).where(DiscountLimit.brand_id == brand_id)
        if discount_id:
            stmt = stmt.where(DiscountLimit.discount_id == discount_id)

        async with self._storage("reset_lifetime"):
            res = await self._db.execute(
                stmt.values(claims_used=0).execution_options(synchronize_session=False)
            )
        return int(res.rowcount or 0)

    # -------------------------
    # Redemption
    # -------------------------
    async def claim(
        self,
        brand_id: str,
        discount_id: str,
        day: date,
        *,
        daily_cap: int | None,
        total_cap: int | None,
    ) -> ClaimResult:
        """
        Take one slot. The binding counter is bumped with a single conditional
        UPDATE ... WHERE count < cap RETURNING count, so concurrent claims
        serialize on the row lock and can never push a counter past its cap.
        The non-binding counter is bumped unconditionally for reporting.
        """
        usage_date = day.isoformat()

        async with self._storage("claim"):
            await self._db.execute(
                self._insert_ignore(
                    DiscountUsage,
                    ["brand_id", "discount_id", "usage_date"],
                    brand_id=brand_id,
                    discount_id=discount_id,
                    usage_date=usage_date,
                    used_count=0,
                )
            )
            await self._db.execute(
                self._insert_ignore(
                    DiscountLimit,
                    ["brand_id", "discount_id"],
                    brand_id=brand_id,
                    discount_id=discount_id,
                    claims_used=0,
                )
            )

            daily_stmt = (
                update(DiscountUsage)
                .where(
                    DiscountUsage.brand_id == brand_id,
                    DiscountUsage.discount_id == discount_id,
                    DiscountUsage.usage_date == usage_date,
                )
                .values(used_count=DiscountUsage.used_count + 1)
                .returning(DiscountUsage.used_count)
                .execution_options(synchronize_session=False)
            )
            total_stmt = (
                update(DiscountLimit)
                .where(
                    DiscountLimit.brand_id == brand_id,
                    DiscountLimit.discount_id == discount_id,
                )
                .values(claims_used=DiscountLimit.claims_used + 1)
                .returning(DiscountLimit.claims_used)
                .execution_options(synchronize_session=False)
            )

            if total_cap:
                total_stmt = total_stmt.where(DiscountLimit.claims_used < total_cap)
            elif daily_cap:
                daily_stmt = daily_stmt.where(DiscountUsage.used_count < daily_cap)

            claims_used = (await self._db.execute(total_stmt)).scalar_one_or_none()
            if claims_used is None:
                raise DiscountSoldOut(f"Discount '{discount_id}' is sold out")

            used_today = (await self._db.execute(daily_stmt)).scalar_one_or_none()
            if used_today is None:
                raise DiscountSoldOut(f"Discount '{discount_id}' is sold out for {usage_date}")

        return ClaimResult(
            discount_id=discount_id,
            used_today=int(used_today),
            claims_used=int(claims_used),
        )

    # -------------------------
    # Unit of work
    # -------------------------
    async def commit(self) -> None:
        async with self._storage("commit"):
            await self._db.commit()

    async def rollback(self) -> None:
        await self._db.rollback()
