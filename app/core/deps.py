from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.security import decode_token, TokenError
from app.models.admin_user import MAIN_ADMIN, AdminUser
from app.services.brands import get_brand_or_404
from app.services.discount_catalog import STATIC_CATALOG, DatabaseCatalog, FallbackCatalog
from app.services.discount_store import SqlDiscountStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/admin/login")


async def get_current_admin(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> AdminUser:
    if not token:
        raise HTTPException(status_code=401, detail="Missing bearer token")

    try:
        payload = decode_token(token)
    except TokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    admin_id = payload.get("sub")
    try:
        admin_id_int = int(admin_id)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid admin id in token")

    res = await db.execute(select(AdminUser).where(AdminUser.id == admin_id_int))
    admin = res.scalar_one_or_none()

    if not admin:
        raise HTTPException(status_code=401, detail="Admin not found")
    if not admin.is_active:
        raise HTTPException(status_code=401, detail="Admin inactive")

    return admin


def require_main_admin(current_admin: AdminUser = Depends(get_current_admin)) -> AdminUser:
    if current_admin.role != MAIN_ADMIN:
        raise HTTPException(status_code=403, detail="Main admin only")
    return current_admin


def require_venue_admin(
    brand_id: str,
    current_admin: AdminUser = Depends(get_current_admin),
) -> AdminUser:
    get_brand_or_404(brand_id)
    if not current_admin.can_access_venue(brand_id):
        raise HTTPException(status_code=403, detail="No access to this venue")
    return current_admin


# -------------------------
# Discount storage
# -------------------------
def get_discount_store(db: AsyncSession = Depends(get_db)) -> SqlDiscountStore:
    return SqlDiscountStore(db)


def get_discount_catalog(db: AsyncSession = Depends(get_db)) -> FallbackCatalog:
    return FallbackCatalog(DatabaseCatalog(db), STATIC_CATALOG)
