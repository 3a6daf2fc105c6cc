from __future__ import annotations

from app.core.deps import get_discount_store
from app.main import app
from app.models.admin_user import VENUE_ADMIN
from app.services.discount_availability import venue_today
from app.services.discount_store import MIGRATIONS_HINT
from tests.conftest import DAY
from tests.fakes import UnreachableStore


async def test_overview(client, store):
    store.set_daily("alehouse", "alehouse-liquor", DAY, 4)

    r = await client.get("/admin/venues/alehouse/discount-limits", params={"date": "2025-01-10"})
    assert r.status_code == 200
    items = {i["discountId"]: i for i in r.json()["items"]}
    assert items["alehouse-liquor"] == {
        "discountId": "alehouse-liquor",
        "label": "50% off on liquor",
        "active": True,
        "maxPerDay": 0,
        "maxClaims": None,
        "used": 4,
        "claimsUsed": 0,
        "available": True,
    }


async def test_save_limit_rejects_cap_below_todays_usage(client, store):
    store.set_daily("kiik69", "kiik-10-percent", venue_today(), 5)

    r = await client.post(
        "/admin/venues/kiik69/discount-limits",
        json={"discountId": "kiik-10-percent", "maxPerDay": 4},
    )
    assert r.status_code == 400
    assert "today's usage" in r.json()["detail"]
    assert store.limits == {}

    r = await client.post(
        "/admin/venues/kiik69/discount-limits",
        json={"discountId": "kiik-10-percent", "maxPerDay": 5, "maxClaims": 100},
    )
    assert r.status_code == 200
    assert r.json() == {
        "discountId": "kiik-10-percent",
        "maxPerDay": 5,
        "maxClaims": 100,
        "claimsUsed": 0,
    }


async def test_save_limit_only_touches_sent_fields(client, store):
    store.set_limit("kiik69", "kiik-10-percent", max_per_day=7)

    r = await client.post(
        "/admin/venues/kiik69/discount-limits",
        json={"discountId": "kiik-10-percent", "maxClaims": 50},
    )
    assert r.status_code == 200
    assert r.json()["maxPerDay"] == 7
    assert r.json()["maxClaims"] == 50


async def test_save_limit_unknown_discount(client):
    r = await client.post(
        "/admin/venues/kiik69/discount-limits",
        json={"discountId": "lunch-special", "maxPerDay": 4},
    )
    assert r.status_code == 400


async def test_write_storage_failure_asks_for_migrations(client):
    app.dependency_overrides[get_discount_store] = lambda: UnreachableStore()

    r = await client.post(
        "/admin/venues/kiik69/discount-limits",
        json={"discountId": "kiik-10-percent", "maxClaims": None},
    )
    assert r.status_code == 503
    assert r.json()["detail"] == MIGRATIONS_HINT


async def test_reset_claims_for_all_discounts(client, store):
    store.set_limit("alehouse", "alehouse-lunch", claims_used=3)
    store.set_limit("alehouse", "alehouse-liquor", claims_used=8)

    r = await client.post("/admin/venues/alehouse/discount-limits/reset", json={"resetClaims": True})
    assert r.status_code == 200
    assert r.json() == {"success": True, "date": None, "discountId": "all", "resetClaims": True, "rows": 2}
    assert all(row["claims_used"] == 0 for row in store.limits.values())


async def test_venue_admin_cannot_manage_other_venues(client, admin):
    admin.role = VENUE_ADMIN
    admin.venue_permissions = ["alehouse"]

    r = await client.get("/admin/venues/kiik69/discount-limits")
    assert r.status_code == 403

    r = await client.get("/admin/venues/alehouse/discount-limits")
    assert r.status_code == 200


async def test_unknown_venue_is_404_for_admins(client):
    r = await client.post("/admin/venues/nowhere/discount-limits/reset", json={})
    assert r.status_code == 404


async def test_save_limit_floors_fractional_caps(client):
    r = await client.post(
        "/admin/venues/kiik69/discount-limits",
        json={"discountId": "kiik-10-percent", "maxPerDay": 3.7, "maxClaims": None},
    )
    assert r.status_code == 200
    assert r.json()["maxPerDay"] == 3
    assert r.json()["maxClaims"] == 0


async def test_reset_storage_failure_asks_for_migrations(client):
    app.dependency_overrides[get_discount_store] = lambda: UnreachableStore()

    r = await client.post("/admin/venues/kiik69/discount-limits/reset", json={"resetClaims": True})
    assert r.status_code == 503
    assert r.json()["detail"] == MIGRATIONS_HINT
