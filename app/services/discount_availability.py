# app/services/discount_availability.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.services.discount_catalog import STATIC_CATALOG, DiscountCatalog, DiscountDefinition
from app.services.discount_store import DiscountStorageError, LimitState, SqlDiscountStore


logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^\d{2}:\d{2}$")


@dataclass(frozen=True)
class DiscountAvailability:
    definition: DiscountDefinition
    used: int
    max: int | None
    available: bool
    max_per_day: int = 0
    max_claims: int | None = None
    used_today: int = 0
    claims_used: int = 0

    @property
    def discount_id(self) -> str:
        return self.definition.id

    @property
    def slots_left(self) -> int | None:
        if self.max is None:
            return None
        return max(0, self.max - self.used)


# -------------------------
# Lenient query parsing
# -------------------------
def venue_today() -> date:
    return datetime.now(ZoneInfo(settings.VENUE_TIMEZONE)).date()


def parse_date(value: str | None) -> date:
    """YYYY-MM-DD or today; the booking UI must never hard-fail on a bad param."""
    if value and _DATE_RE.match(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    return venue_today()


def parse_clock(value: str | None) -> time | None:
    if not value or not _TIME_RE.match(value):
        return None
    hours, minutes = int(value[:2]), int(value[3:])
    if hours > 23 or minutes > 59:
        return None
    return time(hours, minutes)


def parse_time_slot(value: str | None) -> str | None:
    t = parse_clock(value)
    return t.strftime("%H:%M") if t else None


# -------------------------
# Time windows
# -------------------------
def in_time_window(time_slot: str | None, start_time: str | None, end_time: str | None) -> bool:
    slot = parse_clock(time_slot)
    if slot is None:
        return True

    start = parse_clock(start_time)
    end = parse_clock(end_time)
    if start is not None and slot < start:
        return False
    if end is not None and slot >= end:
        return False
    return True


def time_window_label(start_time: str | None, end_time: str | None) -> str | None:
    start = parse_clock(start_time)
    end = parse_clock(end_time)
    if start and end:
        return f"{start:%H:%M} - {end:%H:%M}"
    if start:
        return f"From {start:%H:%M}"
    if end:
        return f"Until {end:%H:%M}"
    return None


# -------------------------
# Caps
# -------------------------
def effective_caps(definition: DiscountDefinition, limit: LimitState | None) -> tuple[int, int | None]:
    """
    Returns (per_day, total). Admin overlay wins over catalog defaults.
    per_day 0 = no daily limit, total None = no lifetime cap.
    """
    per_day = int(definition.limit_per_day or 0)
    total = definition.max_claims_total

    if limit is not None:
        if limit.max_per_day is not None:
            per_day = int(limit.max_per_day)
        if limit.max_claims is not None:
            total = int(limit.max_claims)

    per_day = max(0, per_day)
    if total is not None and total <= 0:
        total = None
    return per_day, total


def evaluate_one(
    definition: DiscountDefinition,
    limit: LimitState | None,
    used_today: int,
) -> DiscountAvailability:
    per_day, total = effective_caps(definition, limit)
    claims_used = limit.claims_used if limit else 0

    # lifetime cap is binding when set; the daily cap is ignored then
    if total is not None:
        used, cap = claims_used, total
    elif per_day > 0:
        used, cap = used_today, per_day
    else:
        used, cap = used_today, None

    return DiscountAvailability(
        definition=definition,
        used=used,
        max=cap,
        available=True if cap is None else used < cap,
        max_per_day=per_day,
        max_claims=total,
        used_today=used_today,
        claims_used=claims_used,
    )


async def evaluate_availability(
    catalog: DiscountCatalog,
    store: SqlDiscountStore,
    brand_id: str,
    day: date,
    time_slot: str | None = None,
    *,
    fallback: DiscountCatalog = STATIC_CATALOG,
) -> list[DiscountAvailability]:
    """
    Read-only projection of catalog + counters for one brand and day.

    Inactive discounts are dropped. With a time_slot, discounts whose
    [start_time, end_time) window does not contain it are dropped too.
    Storage failures degrade to the static list with zero usage.
    """
    try:
        definitions = await catalog.get_catalog(brand_id)
        limits = await store.get_limits(brand_id)
        daily = await store.get_daily_usage(brand_id, day)
    except DiscountStorageError as e:
        logger.warning("discount counters for %s unavailable, serving static list: %s", brand_id, e)
        definitions = await fallback.get_catalog(brand_id)
        limits, daily = {}, {}

    return [
        evaluate_one(d, limits.get(d.id), daily.get(d.id, 0))
        for d in definitions
        if d.active and in_time_window(time_slot, d.start_time, d.end_time)
    ]
