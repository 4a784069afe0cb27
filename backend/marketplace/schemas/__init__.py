from marketplace.schemas.coupon import (
    CouponCreate,
    CouponRedemptionResponse,
    CouponResponse,
    CouponUpdate,
    RedeemCouponRequest,
    ValidateCouponRequest,
    ValidationResult,
)
from marketplace.schemas.store import StoreCreate

__all__ = [
    "CouponCreate",
    "CouponRedemptionResponse",
    "CouponResponse",
    "CouponUpdate",
    "RedeemCouponRequest",
    "StoreCreate",
    "ValidateCouponRequest",
    "ValidationResult",
]
