from marketplace.models.coupon import (
    Coupon,
    CouponErrorCode,
    CouponState,
    CouponType,
    derive_coupon_state,
)
from marketplace.models.coupon_redemption import CouponRedemption
from marketplace.models.store import Store

__all__ = [
    "Coupon",
    "CouponErrorCode",
    "CouponRedemption",
    "CouponState",
    "CouponType",
    "Store",
    "derive_coupon_state",
]
