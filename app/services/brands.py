# app/services/brands.py
from __future__ import annotations

from fastapi import HTTPException


# brand_id -> display name
BRANDS: dict[str, str] = {
    "the-hub": "The Hub",
    "alehouse": "Alehouse",
    "c53": "C53 World Cuisine",
    "boiler-room": "Boiler Room",
    "skyhy": "SkyHy Live",
    "kiik69": "KIIK 69 Sports Bar",
    "club-rogue-gachibowli": "clubrogue - gachibowli",
    "club-rogue-kondapur": "clubrogue - kondapur",
    "club-rogue-jubilee-hills": "clubrogue - jubileehills",
    "sound-of-soul": "Sound of Soul Club & Kitchen",
    "rejoy": "Rejoy Club",
    "firefly": "Firefly Club & Socialroom",
}


def is_known_brand(brand_id: str) -> bool:
    return brand_id in BRANDS


def get_brand_or_404(brand_id: str) -> str:
    if not is_known_brand(brand_id):
        raise HTTPException(status_code=404, detail="Venue not found")
    return brand_id
