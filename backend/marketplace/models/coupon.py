"""Coupon model for promotional discounts."""

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, func

from marketplace.core.database import Base
from marketplace.models.shared import UUIDType, as_utc, generate_uuid, utc_now


class CouponType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    FREE_DELIVERY = "free_delivery"


class CouponState(str, Enum):
    """Lifecycle state derived from stored fields, never persisted."""

    PENDING = "pending"
    ACTIVE = "active"
    EXHAUSTED = "exhausted"
    EXPIRED = "expired"
    DISABLED = "disabled"


class CouponErrorCode(str, Enum):
    """Why a coupon was rejected, by validation or by a mutating operation."""

    NOT_FOUND = "not_found"
    INACTIVE = "inactive"
    NOT_YET_VALID = "not_yet_valid"
    EXPIRED = "expired"
    STORE_MISMATCH = "store_mismatch"
    BELOW_MINIMUM_ORDER = "below_minimum_order"
    USAGE_EXCEEDED = "usage_exceeded"
    DUPLICATE_CODE = "duplicate_code"
    INVALID_DATE_RANGE = "invalid_date_range"
    STORE_NOT_FOUND = "store_not_found"


class Coupon(Base):
    """Coupon model for promotional discounts."""

    __tablename__ = "coupons"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    code = Column(String(20), unique=True, index=True, nullable=False)

    coupon_type = Column(String(20), nullable=False)
    value = Column(Numeric(12, 2), nullable=False)
    min_order_value = Column(Numeric(12, 2), nullable=True)

    max_uses = Column(Integer, nullable=True)
    used_count = Column(Integer, nullable=False, default=0)

    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_until = Column(DateTime(timezone=True), nullable=False)

    store_id = Column(
        UUIDType, ForeignKey("stores.id", ondelete="CASCADE"), nullable=True, index=True
    )
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now
    )


def derive_coupon_state(coupon: Any, now: datetime | None = None) -> CouponState:
    """Compute the lifecycle state of a coupon-like object.

    Works on both the ORM model and response schemas. Disabled overrides
    everything, then expiry, then the start of the validity window, then
    the usage cap.
    """
    now = as_utc(now or utc_now())

    if not coupon.is_active:
        return CouponState.DISABLED
    if now > as_utc(coupon.valid_until):
        return CouponState.EXPIRED
    if now < as_utc(coupon.valid_from):
        return CouponState.PENDING
    if coupon.max_uses is not None and coupon.used_count >= coupon.max_uses:
        return CouponState.EXHAUSTED
    return CouponState.ACTIVE
