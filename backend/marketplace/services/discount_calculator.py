"""Discount amount calculation for a single coupon on a single order."""

from decimal import ROUND_HALF_UP, Decimal

from marketplace.core.config import settings
from marketplace.models.coupon import CouponType

CENT = Decimal("0.01")


def quantize_money(amount: Decimal) -> Decimal:
    """Round to cents, half up."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_discount(
    coupon_type: CouponType | str,
    value: Decimal,
    order_value: Decimal,
    delivery_fee: Decimal | None = None,
) -> Decimal:
    """Calculate the discount a coupon grants on an order.

    Args:
        coupon_type: The coupon type.
        value: Percentage rate (0-100) or fixed amount, depending on type.
        order_value: The order value the discount applies to.
        delivery_fee: Credit granted by free_delivery coupons. Defaults to
            ``settings.FREE_DELIVERY_FEE``.

    Returns:
        The discount, never above the order value nor below zero, rounded
        half up to two decimals as the last step.

    Raises:
        ValueError: If the coupon type is unknown.
    """
    coupon_type = CouponType(coupon_type)
    value = Decimal(str(value))
    order_value = Decimal(str(order_value))

    if coupon_type is CouponType.PERCENTAGE:
        amount = order_value * value / Decimal("100")
    elif coupon_type is CouponType.FIXED:
        amount = value
    elif coupon_type is CouponType.FREE_DELIVERY:
        amount = settings.FREE_DELIVERY_FEE if delivery_fee is None else Decimal(str(delivery_fee))
    else:  # pragma: no cover - CouponType() already rejects unknown values
        raise ValueError(f"Unsupported coupon type: {coupon_type}")

    amount = max(min(amount, order_value), Decimal("0"))
    return quantize_money(amount)
