# app/scripts/create_admin.py
"""
Create or update a back-office admin.

    python -m app.scripts.create_admin <username> <password> [brand_id ...]

Without brand ids the account is a main admin (all venues).
"""
import asyncio
import sys

from sqlalchemy import select

from app.core.db import AsyncSessionLocal
from app.core.security import hash_password
from app.models.admin_user import MAIN_ADMIN, VENUE_ADMIN, AdminUser
from app.services.brands import is_known_brand


async def create_admin(username: str, password: str, venues: list[str]) -> AdminUser:
    unknown = [b for b in venues if not is_known_brand(b)]
    if unknown:
        raise SystemExit(f"Unknown brand ids: {', '.join(unknown)}")

    async with AsyncSessionLocal() as db:
        res = await db.execute(select(AdminUser).where(AdminUser.username == username))
        admin = res.scalar_one_or_none()
        if admin is None:
            admin = AdminUser(username=username, password_hash="")
            db.add(admin)

        admin.password_hash = hash_password(password)
        admin.role = VENUE_ADMIN if venues else MAIN_ADMIN
        admin.venue_permissions = venues
        admin.is_active = True

        await db.commit()
        await db.refresh(admin)
        return admin


def main() -> None:
    if len(sys.argv) < 3:
        raise SystemExit(__doc__)
    admin = asyncio.run(create_admin(sys.argv[1], sys.argv[2], sys.argv[3:]))
    print(f"Admin '{admin.username}' saved (id={admin.id}, role={admin.role})")


if __name__ == "__main__":
    main()
