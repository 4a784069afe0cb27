from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace.core.config import settings
from marketplace.core.logging_config import configure_logging
from marketplace.routers import coupons, store_coupons

configure_logging()

OPENAPI_TAGS = [
    {"name": "Coupons", "description": "Create, validate and redeem discount coupons."},
    {"name": "Stores", "description": "Coupons scoped to a single store."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Coupon engine of the marketplace. "
        "Manage coupon definitions, preview discounts at checkout "
        "and record redemptions under usage caps."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)


app.include_router(coupons.router, prefix="/v1/coupons", tags=["Coupons"])
app.include_router(store_coupons.router, prefix="/v1/stores", tags=["Stores"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "domain": settings.APP_DOMAIN,
        "status": "running",
    }
