"""Errors raised by mutating coupon operations."""

from marketplace.models.coupon import CouponErrorCode


class CouponError(ValueError):
    """A coupon operation was rejected by a business rule.

    Carries the machine-readable ``code`` alongside the message so routers
    can pick an HTTP status without parsing text.
    """

    def __init__(self, code: CouponErrorCode, message: str):
        super().__init__(message)
        self.code = code
