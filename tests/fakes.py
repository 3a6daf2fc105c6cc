from __future__ import annotations

import copy
from datetime import date

from app.services.discount_catalog import DiscountDefinition
from app.services.discount_store import (
    UNSET,
    ClaimResult,
    DiscountSoldOut,
    DiscountStorageError,
    LimitState,
)


class InMemoryDiscountStore:
    """Same surface as SqlDiscountStore; rollback restores the last commit."""

    def __init__(self):
        self.limits: dict[tuple[str, str], dict] = {}
        self.daily: dict[tuple[str, str, str], int] = {}
        self.commits = 0
        self.claim_order: list[str] = []
        self._snapshot = self._state()

    def _state(self):
        return copy.deepcopy((self.limits, self.daily))

    # seeding helpers
    def set_daily(self, brand_id: str, discount_id: str, day: date, used: int) -> None:
        self.daily[(brand_id, discount_id, day.isoformat())] = used
        self._snapshot = self._state()

    def set_limit(self, brand_id: str, discount_id: str, **fields) -> None:
        row = self.limits.setdefault(
            (brand_id, discount_id), {"max_per_day": None, "max_claims": None, "claims_used": 0}
        )
        row.update(fields)
        self._snapshot = self._state()

    def used_on(self, brand_id: str, discount_id: str, day: date) -> int:
        return self.daily.get((brand_id, discount_id, day.isoformat()), 0)

    async def get_limits(self, brand_id: str) -> dict[str, LimitState]:
        return {
            discount_id: LimitState(discount_id=discount_id, **row)
            for (b, discount_id), row in self.limits.items()
            if b == brand_id
        }

    async def get_daily_usage(self, brand_id: str, day: date) -> dict[str, int]:
        return {
            discount_id: used
            for (b, discount_id, d), used in self.daily.items()
            if b == brand_id and d == day.isoformat()
        }

    async def upsert_limit(self, brand_id, discount_id, *, max_per_day=UNSET, max_claims=UNSET):
        row = self.limits.setdefault(
            (brand_id, discount_id), {"max_per_day": None, "max_claims": None, "claims_used": 0}
        )
        if max_per_day is not UNSET:
            row["max_per_day"] = max_per_day
        if max_claims is not UNSET:
            row["max_claims"] = max_claims
        return LimitState(discount_id=discount_id, **row)

    async def reset_daily(self, brand_id, day, discount_id=None) -> int:
        rows = 0
        for key in self.daily:
            b, d_id, d = key
            if b == brand_id and d == day.isoformat() and (discount_id is None or d_id == discount_id):
                self.daily[key] = 0
                rows += 1
        return rows

    async def reset_lifetime(self, brand_id, discount_id=None) -> int:
        rows = 0
        for (b, d_id), row in self.limits.items():
            if b == brand_id and (discount_id is None or d_id == discount_id):
                row["claims_used"] = 0
                rows += 1
        return rows

    async def claim(self, brand_id, discount_id, day, *, daily_cap, total_cap) -> ClaimResult:
        self.claim_order.append(discount_id)
        key = (brand_id, discount_id, day.isoformat())
        row = self.limits.setdefault(
            (brand_id, discount_id), {"max_per_day": None, "max_claims": None, "claims_used": 0}
        )
        used = self.daily.get(key, 0)

        if total_cap and row["claims_used"] >= total_cap:
            raise DiscountSoldOut(f"Discount '{discount_id}' is sold out")
        if not total_cap and daily_cap and used >= daily_cap:
            raise DiscountSoldOut(f"Discount '{discount_id}' is sold out")

        row["claims_used"] += 1
        self.daily[key] = used + 1
        return ClaimResult(discount_id=discount_id, used_today=used + 1, claims_used=row["claims_used"])

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot = self._state()

    async def rollback(self) -> None:
        self.limits, self.daily = copy.deepcopy(self._snapshot)


class UnreachableStore(InMemoryDiscountStore):
    async def get_limits(self, brand_id):
        raise DiscountStorageError("connection refused")

    async def get_daily_usage(self, brand_id, day):
        raise DiscountStorageError("connection refused")

    async def upsert_limit(self, *args, **kwargs):
        raise DiscountStorageError("relation \"discount_limits\" does not exist")

    async def reset_daily(self, *args, **kwargs):
        raise DiscountStorageError("relation \"discount_usage\" does not exist")

    async def reset_lifetime(self, *args, **kwargs):
        raise DiscountStorageError("relation \"discount_limits\" does not exist")


class UnreachableCatalog:
    async def get_catalog(self, brand_id: str) -> list[DiscountDefinition]:
        raise DiscountStorageError("relation \"discounts\" does not exist")
