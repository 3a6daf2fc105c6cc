# app/services/discount_redemption.py
from __future__ import annotations

import logging
from datetime import date

from app.services.discount_availability import effective_caps, in_time_window
from app.services.discount_catalog import DiscountCatalog
from app.services.discount_store import ClaimResult, DiscountValidationError, SqlDiscountStore


logger = logging.getLogger(__name__)


async def redeem_discounts(
    catalog: DiscountCatalog,
    store: SqlDiscountStore,
    brand_id: str,
    discount_ids: list[str],
    day: date,
    time_slot: str | None = None,
) -> list[ClaimResult]:
    """
    Claim one slot of each discount for a booking on `day`.
    All or nothing: if any claim is sold out nothing is committed.
    """
    # counter rows are always locked in id order
    wanted = sorted({d.strip() for d in discount_ids if d and d.strip()})
    if not wanted:
        raise DiscountValidationError("At least one discountId is required")

    definitions = {d.id: d for d in await catalog.get_catalog(brand_id)}
    for discount_id in wanted:
        d = definitions.get(discount_id)
        if d is None or not d.active:
            raise DiscountValidationError(f"Invalid discountId for this brand: {discount_id}")
        if not in_time_window(time_slot, d.start_time, d.end_time):
            raise DiscountValidationError(f"Discount '{discount_id}' is not offered at {time_slot}")

    try:
        limits = await store.get_limits(brand_id)
        claimed: list[ClaimResult] = []
        for discount_id in wanted:
            per_day, total = effective_caps(definitions[discount_id], limits.get(discount_id))
            claimed.append(
                await store.claim(
                    brand_id,
                    discount_id,
                    day,
                    daily_cap=per_day or None,
                    total_cap=total,
                )
            )
        await store.commit()
    except Exception:
        await store.rollback()
        raise

    logger.info("discounts redeemed brand=%s day=%s ids=%s", brand_id, day, wanted)
    return claimed
