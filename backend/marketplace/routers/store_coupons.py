"""Store-scoped coupon API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from marketplace.core.config import settings
from marketplace.core.database import get_db
from marketplace.models.coupon import Coupon
from marketplace.routers.coupons import coupon_http_error
from marketplace.schemas.coupon import CouponCreate, CouponResponse
from marketplace.services.coupon_errors import CouponError
from marketplace.services.coupon_query_service import CouponQueryService

router = APIRouter()


@router.post(
    "/{store_id}/coupons",
    response_model=CouponResponse,
    status_code=201,
    summary="Create store coupon",
    responses={
        404: {"description": "Store not found"},
        409: {"description": "Coupon with this code already exists"},
        422: {"description": "Validation error"},
    },
)
async def create_store_coupon(
    store_id: UUID,
    data: CouponCreate,
    db: Session = Depends(get_db),
) -> Coupon:
    """Create a coupon usable only for orders at this store."""
    try:
        return CouponQueryService(db).create_store_coupon(store_id, data)
    except CouponError as e:
        raise coupon_http_error(e) from None


@router.get(
    "/{store_id}/coupons",
    response_model=list[CouponResponse],
    summary="List store coupons",
    responses={404: {"description": "Store not found"}},
)
async def list_store_coupons(
    store_id: UUID,
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
) -> list[Coupon]:
    """List the coupons scoped to a store, newest first."""
    service = CouponQueryService(db)
    try:
        coupons = service.get_store_coupons(store_id, skip=skip, limit=limit)
    except CouponError as e:
        raise coupon_http_error(e) from None
    response.headers["X-Total-Count"] = str(service.count_coupons(store_id))
    return coupons
