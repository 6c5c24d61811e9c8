"""Coupon validation."""

from datetime import UTC, datetime

from protean.utils.globals import current_domain

from storefront.checkout import settings
from storefront.checkout.errors import InvalidOrExpiredCoupon, UsageLimitReached
from storefront.coupon.coupon import Coupon, CouponUsage


def validate_coupon(context, code, now=None) -> Coupon | None:
    """Return the coupon to apply, or None when no code was given.

    The lookup is exact and case-sensitive. The per-customer limit is only
    checked when ``STOREFRONT_ENFORCE_PER_USER_COUPON_LIMIT`` is switched on.
    """
    if code is None or not code.strip():
        return None

    coupon = current_domain.repository_for(Coupon).find_by_code(code)
    if coupon is None or not coupon.is_live_at(now or datetime.now(UTC)):
        raise InvalidOrExpiredCoupon()
    if coupon.is_exhausted:
        raise UsageLimitReached()

    if settings.enforce_per_user_coupon_limit() and coupon.per_user_limit is not None:
        used = current_domain.repository_for(CouponUsage).count_for(coupon.id, context.customer_id)
        if used >= coupon.per_user_limit:
            raise UsageLimitReached("You have already used this coupon the maximum number of times")

    return coupon
