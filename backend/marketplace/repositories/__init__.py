from marketplace.repositories.coupon_redemption_repository import CouponRedemptionRepository
from marketplace.repositories.coupon_repository import CouponRepository
from marketplace.repositories.store_repository import StoreRepository

__all__ = [
    "CouponRedemptionRepository",
    "CouponRepository",
    "StoreRepository",
]
