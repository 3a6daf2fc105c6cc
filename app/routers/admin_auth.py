# app/routers/admin_auth.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.db import get_db
from app.core.deps import get_current_admin
from app.core.security import verify_password, create_access_token
from app.models.admin_user import AdminUser
from app.schemas.auth import AdminMeOut, TokenOut

router = APIRouter(prefix="/admin", tags=["Admin - Auth"])


@router.post("/login", response_model=TokenOut)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_db),
):
    res = await db.execute(select(AdminUser).where(AdminUser.username == form_data.username))
    admin = res.scalar_one_or_none()

    if not admin:
        raise HTTPException(status_code=401, detail="Invalid username or password")

    if not admin.is_active:
        raise HTTPException(status_code=401, detail="Admin is inactive")

    if not verify_password(form_data.password, admin.password_hash):
        raise HTTPException(status_code=401, detail="Invalid username or password")

    return TokenOut(access_token=create_access_token(admin_id=admin.id, role=admin.role))


@router.get("/me", response_model=AdminMeOut)
async def me(current_admin: AdminUser = Depends(get_current_admin)):
    return AdminMeOut(
        id=int(current_admin.id),
        username=current_admin.username,
        role=current_admin.role,
        venue_permissions=list(current_admin.venue_permissions or []),
    )
