"""Redemption ledger: the single write path for coupon usage."""

import logging
from decimal import Decimal
from typing import NoReturn
from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.models.coupon import CouponErrorCode
from marketplace.models.coupon_redemption import CouponRedemption
from marketplace.repositories.coupon_redemption_repository import CouponRedemptionRepository
from marketplace.repositories.coupon_repository import CouponRepository
from marketplace.services.coupon_errors import CouponError
from marketplace.services.discount_calculator import quantize_money

logger = logging.getLogger(__name__)


class CouponLedger:
    """Records coupon redemptions under the coupon's usage cap.

    The counter increment and the redemption row are committed together or
    not at all, so ``used_count`` always equals the number of rows.
    """

    def __init__(self, db: Session):
        self.db = db
        self.coupon_repo = CouponRepository(db)
        self.redemption_repo = CouponRedemptionRepository(db)

    def redeem(
        self,
        coupon_id: UUID,
        user_id: str,
        order_id: str,
        discount_applied: Decimal,
    ) -> CouponRedemption:
        """Redeem a coupon for a finalized order.

        Call once per order, with the discount previously returned by the
        validator. No retries are attempted here.

        Args:
            coupon_id: The coupon being redeemed.
            user_id: The customer placing the order.
            order_id: The finalized order.
            discount_applied: Discount granted on the order.

        Returns:
            The stored CouponRedemption.

        Raises:
            CouponError: ``not_found`` if the coupon does not exist, or
                ``usage_exceeded`` if the cap was reached, even when an
                earlier validation succeeded.
        """
        discount_applied = quantize_money(Decimal(str(discount_applied)))

        try:
            coupon_code = self.redemption_repo.claim_usage(coupon_id)
            if coupon_code is None:
                self.db.rollback()
                self._raise_rejection(coupon_id)

            redemption = self.redemption_repo.add(
                coupon_id=coupon_id,
                coupon_code=coupon_code,
                user_id=user_id,
                order_id=order_id,
                discount_applied=discount_applied,
            )
            self.db.commit()
        except CouponError:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Redemption of coupon %s for order %s failed", coupon_id, order_id)
            raise

        self.db.refresh(redemption)
        logger.info(
            "Redeemed coupon %s for order %s (user %s, discount %s)",
            redemption.coupon_code,
            order_id,
            user_id,
            discount_applied,
        )
        return redemption

    def _raise_rejection(self, coupon_id: UUID) -> NoReturn:
        if self.coupon_repo.get_by_id(coupon_id) is None:
            raise CouponError(CouponErrorCode.NOT_FOUND, f"Coupon {coupon_id} not found")

        logger.warning("Coupon %s rejected redemption: usage limit reached", coupon_id)
        raise CouponError(CouponErrorCode.USAGE_EXCEEDED, "Coupon usage limit reached")
