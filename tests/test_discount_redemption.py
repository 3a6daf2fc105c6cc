from __future__ import annotations

import pytest

from app.services.discount_redemption import redeem_discounts
from app.services.discount_store import DiscountSoldOut, DiscountValidationError
from tests.conftest import DAY


async def test_redeem_increments_both_counters(catalog, store):
    [claim] = await redeem_discounts(catalog, store, "kiik69", ["daily"], DAY)

    assert claim.used_today == 1
    assert claim.claims_used == 1
    assert store.commits == 1


async def test_redeem_stops_at_daily_cap(catalog, store):
    store.set_daily("kiik69", "daily", DAY, 2)
    await redeem_discounts(catalog, store, "kiik69", ["daily"], DAY)

    with pytest.raises(DiscountSoldOut):
        await redeem_discounts(catalog, store, "kiik69", ["daily"], DAY)
    assert store.used_on("kiik69", "daily", DAY) == 3


async def test_redeem_is_all_or_nothing(catalog, store):
    store.set_limit("kiik69", "total", claims_used=2)

    with pytest.raises(DiscountSoldOut):
        await redeem_discounts(catalog, store, "kiik69", ["daily", "total"], DAY)

    assert store.used_on("kiik69", "daily", DAY) == 0
    assert store.commits == 0


async def test_redeem_claims_in_id_order(catalog, store):
    claims = await redeem_discounts(catalog, store, "kiik69", ["total", "lunch", "daily"], DAY)

    assert store.claim_order == ["daily", "lunch", "total"]
    assert [c.discount_id for c in claims] == ["daily", "lunch", "total"]


async def test_redeem_deduplicates_ids(catalog, store):
    claims = await redeem_discounts(catalog, store, "kiik69", ["daily", " daily ", "daily"], DAY)
    assert len(claims) == 1
    assert store.used_on("kiik69", "daily", DAY) == 1


@pytest.mark.parametrize("ids", [[], ["nope"], ["off"]])
async def test_redeem_rejects_unknown_or_inactive(catalog, store, ids):
    with pytest.raises(DiscountValidationError):
        await redeem_discounts(catalog, store, "kiik69", ids, DAY)


async def test_redeem_outside_time_window(catalog, store):
    with pytest.raises(DiscountValidationError):
        await redeem_discounts(catalog, store, "kiik69", ["lunch"], DAY, "19:00")

    [claim] = await redeem_discounts(catalog, store, "kiik69", ["lunch"], DAY, "12:00")
    assert claim.used_today == 1
