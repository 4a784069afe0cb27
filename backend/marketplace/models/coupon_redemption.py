"""CouponRedemption model, the append-only ledger of coupon usage."""

from sqlalchemy import Column, DateTime, Numeric, String

from marketplace.core.database import Base
from marketplace.models.shared import UUIDType, generate_uuid, utc_now


class CouponRedemption(Base):
    """One successful application of a coupon to a finalized order.

    coupon_id has no foreign key: history outlives coupon deletion.
    """

    __tablename__ = "coupon_redemptions"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    coupon_id = Column(UUIDType, nullable=False, index=True)
    coupon_code = Column(String(20), nullable=False)
    user_id = Column(String(64), nullable=False, index=True)
    order_id = Column(String(64), nullable=False, index=True)
    discount_applied = Column(Numeric(12, 2), nullable=False)

    used_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
