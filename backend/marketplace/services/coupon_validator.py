"""Read-only coupon validation for checkout previews."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from marketplace.models.coupon import Coupon, CouponErrorCode
from marketplace.models.shared import as_utc, utc_now
from marketplace.repositories.coupon_repository import CouponRepository
from marketplace.schemas.coupon import CouponResponse, ValidationResult
from marketplace.services.discount_calculator import compute_discount, quantize_money


class CouponValidator:
    """Evaluates whether a coupon applies to a prospective order.

    Never writes and never raises for rule failures: the reason comes back
    on the result. A successful result is advisory only; the ledger decides
    at redemption time.
    """

    def __init__(self, db: Session, delivery_fee: Decimal | None = None):
        self.db = db
        self.coupon_repo = CouponRepository(db)
        self.delivery_fee = delivery_fee

    def validate(
        self,
        code: str,
        order_value: Decimal,
        store_id: UUID | None = None,
        now: datetime | None = None,
    ) -> ValidationResult:
        """Check a coupon code against an order.

        Rules run in a fixed order and the first failure is returned:
        existence, enabled flag, start of window, end of window, store
        scope, minimum order value, usage cap.

        Args:
            code: Coupon code in any case.
            order_value: Value of the order the coupon would apply to.
            store_id: Store the order is placed at, if known. Without it the
                store scope check is skipped.
            now: Evaluation time. Defaults to the current UTC time.

        Returns:
            ValidationResult with the computed discount on success.
        """
        now = as_utc(now or utc_now())
        order_value = Decimal(str(order_value))

        coupon = self.coupon_repo.get_by_code(code)
        if not coupon:
            return self._reject(CouponErrorCode.NOT_FOUND, "Coupon not found")

        if not coupon.is_active:
            return self._reject(CouponErrorCode.INACTIVE, "Coupon is inactive")

        if now < as_utc(coupon.valid_from):  # type: ignore[arg-type]
            return self._reject(CouponErrorCode.NOT_YET_VALID, "Coupon is not valid yet")

        if now > as_utc(coupon.valid_until):  # type: ignore[arg-type]
            return self._reject(CouponErrorCode.EXPIRED, "Coupon has expired")

        if coupon.store_id is not None and store_id is not None and coupon.store_id != store_id:
            return self._reject(
                CouponErrorCode.STORE_MISMATCH, "Coupon is not valid for this store"
            )

        if coupon.min_order_value is not None and order_value < coupon.min_order_value:
            minimum = quantize_money(Decimal(str(coupon.min_order_value)))
            return self._reject(
                CouponErrorCode.BELOW_MINIMUM_ORDER,
                f"Minimum order value is {minimum}",
            )

        if coupon.max_uses is not None and coupon.used_count >= coupon.max_uses:
            return self._reject(CouponErrorCode.USAGE_EXCEEDED, "Coupon usage limit reached")

        return ValidationResult(
            valid=True,
            discount=self._discount_for(coupon, order_value),
            coupon=CouponResponse.model_validate(coupon),
        )

    def _discount_for(self, coupon: Coupon, order_value: Decimal) -> Decimal:
        return compute_discount(
            str(coupon.coupon_type),
            Decimal(str(coupon.value)),
            order_value,
            delivery_fee=self.delivery_fee,
        )

    @staticmethod
    def _reject(error: CouponErrorCode, message: str) -> ValidationResult:
        return ValidationResult(valid=False, discount=Decimal("0.00"), error=error, message=message)
