"""Coupon aggregate and its per-redemption usage history.

A coupon may combine a fixed amount, a percentage and free shipping. It is
redeemable while active and inside its ``[start_date, end_date)`` window, and
until ``times_used`` reaches ``usage_limit`` when a limit is set.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from storefront.coupon.events import CouponRedeemed
from storefront.domain import storefront


def as_utc(moment):
    """Treat naive datetimes coming back from storage as UTC."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


@storefront.aggregate
class Coupon:
    code = String(required=True, max_length=100, unique=True)
    fixed_amount = Float(min_value=0.0)
    percentage = Float(min_value=0.0, max_value=100.0)
    free_shipping = Boolean(default=False)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    usage_limit = Integer(min_value=0)
    per_user_limit = Integer(min_value=0)
    times_used = Integer(default=0)
    is_active = Boolean(default=True)
    version = Integer(default=1)

    @invariant.post
    def window_must_be_ordered(self):
        if self.start_date and self.end_date and as_utc(self.end_date) <= as_utc(self.start_date):
            raise ValidationError({"end_date": ["End date must be after start date"]})

    def is_live_at(self, moment):
        if not self.is_active:
            return False
        return as_utc(self.start_date) <= moment < as_utc(self.end_date)

    @property
    def is_exhausted(self):
        return self.usage_limit is not None and self.times_used >= self.usage_limit

    def redeem(self, customer_id, order_id):
        """Count one more use of the coupon.

        The limit is checked again here so that an increment can never push
        ``times_used`` past ``usage_limit``.
        """
        if self.is_exhausted:
            raise ValidationError({"coupon_code": ["Coupon usage limit reached"]})

        now = datetime.now(UTC)
        self.times_used += 1
        self.version += 1

        self.raise_(
            CouponRedeemed(
                coupon_id=str(self.id),
                code=self.code,
                customer_id=str(customer_id),
                order_id=str(order_id),
                times_used=self.times_used,
                redeemed_at=now,
            )
        )
        return CouponUsage(
            coupon_id=self.id,
            customer_id=customer_id,
            order_id=order_id,
            used_at=now,
        )


@storefront.aggregate
class CouponUsage:
    """One redemption of a coupon by a customer."""

    coupon_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    used_at = DateTime(required=True)
