from __future__ import annotations

import jwt
import pytest

from app.core.config import settings
from app.core.security import TokenError, create_access_token, decode_token, hash_password, verify_password
from app.models.admin_user import MAIN_ADMIN, VENUE_ADMIN, AdminUser


def test_password_roundtrip():
    hashed = hash_password("bassik123")
    assert verify_password("bassik123", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("bassik123", "not-a-hash")


def test_access_token_roundtrip():
    payload = decode_token(create_access_token(admin_id=7, role=MAIN_ADMIN))
    assert payload["sub"] == "7"
    assert payload["role"] == MAIN_ADMIN


def test_expired_and_foreign_tokens_are_rejected():
    expired = jwt.encode({"sub": "1", "type": "access", "exp": 1}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
    with pytest.raises(TokenError):
        decode_token(expired)

    refresh = jwt.encode({"sub": "1", "type": "refresh"}, settings.JWT_SECRET, algorithm=settings.JWT_ALG)
    with pytest.raises(TokenError):
        decode_token(refresh)


def test_venue_permissions():
    main = AdminUser(username="a", role=MAIN_ADMIN, venue_permissions=[])
    venue = AdminUser(username="b", role=VENUE_ADMIN, venue_permissions=["c53"])
    assert main.can_access_venue("kiik69")
    assert venue.can_access_venue("c53")
    assert not venue.can_access_venue("kiik69")
