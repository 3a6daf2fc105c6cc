import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# IMPORTANT:
# This imports ALL models so SQLAlchemy registers tables correctly
import app.models  # noqa: F401

from app.core.config import settings
from app.core.db import init_models

# Routers
from app.routers.admin_auth import router as admin_auth_router
from app.routers.admin_discounts import router as admin_discounts_router
from app.routers.admin_discount_limits import router as admin_discount_limits_router
from app.routers.venue_discounts import router as venue_discounts_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Venue Reservations API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup():
    if settings.AUTO_CREATE_TABLES:
        await init_models()


@app.get("/", tags=["Health"])
async def health_check():
    return {"status": "ok"}


# Public booking site
app.include_router(venue_discounts_router)

# Admin back-office
app.include_router(admin_auth_router)
app.include_router(admin_discounts_router)
app.include_router(admin_discount_limits_router)
