"""Domain events for the Coupon aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Coupon")
class CouponRedeemed:
    """A coupon was used by a placed order."""

    __version__ = "v1"

    coupon_id = Identifier(required=True)
    code = String(required=True)
    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    times_used = Integer(required=True)
    redeemed_at = DateTime(required=True)
