"""Coupon administration, validation and redemption API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from marketplace.core.config import settings
from marketplace.core.database import get_db
from marketplace.models.coupon import Coupon, CouponErrorCode
from marketplace.models.coupon_redemption import CouponRedemption
from marketplace.schemas.coupon import (
    CouponCreate,
    CouponRedemptionResponse,
    CouponResponse,
    CouponUpdate,
    RedeemCouponRequest,
    ValidateCouponRequest,
    ValidationResult,
)
from marketplace.services.coupon_errors import CouponError
from marketplace.services.coupon_ledger import CouponLedger
from marketplace.services.coupon_query_service import CouponQueryService
from marketplace.services.coupon_registry import CouponRegistry
from marketplace.services.coupon_validator import CouponValidator

router = APIRouter()

_STATUS_BY_CODE = {
    CouponErrorCode.NOT_FOUND: 404,
    CouponErrorCode.STORE_NOT_FOUND: 404,
    CouponErrorCode.DUPLICATE_CODE: 409,
    CouponErrorCode.USAGE_EXCEEDED: 409,
    CouponErrorCode.INVALID_DATE_RANGE: 422,
}


def coupon_http_error(exc: CouponError) -> HTTPException:
    """Translate a CouponError into the matching HTTP error."""
    return HTTPException(status_code=_STATUS_BY_CODE.get(exc.code, 400), detail=str(exc))


@router.post(
    "/",
    response_model=CouponResponse,
    status_code=201,
    summary="Create coupon",
    responses={
        404: {"description": "Store not found"},
        409: {"description": "Coupon with this code already exists"},
        422: {"description": "Validation error"},
    },
)
async def create_coupon(
    data: CouponCreate,
    db: Session = Depends(get_db),
) -> Coupon:
    """Create a new coupon, global or scoped to ``store_id``."""
    try:
        return CouponRegistry(db).create(data)
    except CouponError as e:
        raise coupon_http_error(e) from None


@router.get(
    "/",
    response_model=list[CouponResponse],
    summary="List coupons",
)
async def list_coupons(
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    order_by: str | None = Query(default=None),
    store_id: UUID | None = None,
    db: Session = Depends(get_db),
) -> list[Coupon]:
    """List coupons with optional store filter, newest first by default."""
    service = CouponQueryService(db)
    response.headers["X-Total-Count"] = str(service.count_coupons(store_id))
    return service.list_coupons(skip=skip, limit=limit, store_id=store_id, order_by=order_by)


@router.get(
    "/active",
    response_model=list[CouponResponse],
    summary="List active coupons",
)
async def list_active_coupons(
    store_id: UUID | None = None,
    db: Session = Depends(get_db),
) -> list[Coupon]:
    """List enabled coupons inside their validity window.

    With ``store_id`` the store's coupons are listed with global ones,
    otherwise only global coupons.
    """
    return CouponQueryService(db).get_active_coupons(store_id)


@router.post(
    "/validate",
    response_model=ValidationResult,
    summary="Validate coupon",
)
async def validate_coupon(
    data: ValidateCouponRequest,
    db: Session = Depends(get_db),
) -> ValidationResult:
    """Check whether a coupon applies to an order without using it.

    Rule failures are returned in the body with status 200.
    """
    return CouponValidator(db).validate(data.code, data.order_value, data.store_id)


@router.get(
    "/code/{code}",
    response_model=CouponResponse,
    summary="Get coupon by code",
    responses={404: {"description": "Coupon not found"}},
)
async def get_coupon_by_code(
    code: str,
    db: Session = Depends(get_db),
) -> Coupon:
    """Get a coupon by code, case-insensitively."""
    try:
        return CouponRegistry(db).get_by_code(code)
    except CouponError as e:
        raise coupon_http_error(e) from None


@router.get(
    "/{coupon_id}",
    response_model=CouponResponse,
    summary="Get coupon",
    responses={404: {"description": "Coupon not found"}},
)
async def get_coupon(
    coupon_id: UUID,
    db: Session = Depends(get_db),
) -> Coupon:
    """Get a coupon by ID."""
    try:
        return CouponRegistry(db).get_by_id(coupon_id)
    except CouponError as e:
        raise coupon_http_error(e) from None


@router.put(
    "/{coupon_id}",
    response_model=CouponResponse,
    summary="Update coupon",
    responses={
        404: {"description": "Coupon not found"},
        409: {"description": "Coupon with this code already exists"},
        422: {"description": "Validation error"},
    },
)
async def update_coupon(
    coupon_id: UUID,
    data: CouponUpdate,
    db: Session = Depends(get_db),
) -> Coupon:
    """Update a coupon. Disable it with ``is_active=false`` to retire it."""
    try:
        return CouponRegistry(db).update(coupon_id, data)
    except CouponError as e:
        raise coupon_http_error(e) from None


@router.delete(
    "/{coupon_id}",
    status_code=204,
    summary="Delete coupon",
    responses={404: {"description": "Coupon not found"}},
)
async def delete_coupon(
    coupon_id: UUID,
    db: Session = Depends(get_db),
) -> None:
    """Delete a coupon definition. Redemption history is kept."""
    try:
        CouponRegistry(db).delete(coupon_id)
    except CouponError as e:
        raise coupon_http_error(e) from None


@router.post(
    "/{coupon_id}/redeem",
    response_model=CouponRedemptionResponse,
    status_code=201,
    summary="Redeem coupon",
    responses={
        404: {"description": "Coupon not found"},
        409: {"description": "Coupon usage limit reached"},
    },
)
async def redeem_coupon(
    coupon_id: UUID,
    data: RedeemCouponRequest,
    db: Session = Depends(get_db),
) -> CouponRedemption:
    """Record the use of a coupon by a finalized order."""
    try:
        return CouponLedger(db).redeem(
            coupon_id=coupon_id,
            user_id=data.user_id,
            order_id=data.order_id,
            discount_applied=data.discount_applied,
        )
    except CouponError as e:
        raise coupon_http_error(e) from None


@router.get(
    "/{coupon_id}/usage",
    response_model=list[CouponRedemptionResponse],
    summary="Get coupon usage history",
)
async def get_coupon_usage(
    coupon_id: UUID,
    response: Response,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
) -> list[CouponRedemption]:
    """List the redemptions of a coupon, newest first."""
    service = CouponQueryService(db)
    response.headers["X-Total-Count"] = str(service.count_usage(coupon_id))
    return service.get_usage(coupon_id, skip=skip, limit=limit)
