"""The checkout pipeline.

Stages run strictly in order and each one consumes what the previous ones
produced. Nothing is written until the final commit, so a failure at any
stage leaves carts, stock, coupons and address books untouched.
"""

import structlog

from storefront.checkout.addressing import resolve_address
from storefront.checkout.assembly import assemble_order
from storefront.checkout.attributes import validate_selections
from storefront.checkout.commit import commit_checkout
from storefront.checkout.coupons import validate_coupon
from storefront.checkout.loading import index_overrides, load_cart
from storefront.checkout.pricing import compute_discount, price_lines
from storefront.checkout.shipping import quote_shipping

logger = structlog.get_logger(__name__)


class CheckoutWorkflow:
    def __init__(self, context):
        self.context = context

    def _checkpoint(self):
        self.context.cancellation.raise_if_cancelled()

    def run(self, request):
        """Place an order for the caller's cart and return it."""
        context = self.context

        self._checkpoint()
        snapshot = load_cart(context)
        overrides = index_overrides(snapshot, request.line_overrides)

        self._checkpoint()
        address = resolve_address(context, request)

        self._checkpoint()
        coupon = validate_coupon(context, request.coupon_code)

        self._checkpoint()
        attributes = validate_selections(snapshot, overrides)

        self._checkpoint()
        priced = price_lines(snapshot, overrides)
        discount = compute_discount(coupon, priced.subtotal)

        self._checkpoint()
        shipping = quote_shipping(address, request.shipping_method_id, priced.subtotal, coupon)

        order = assemble_order(context, snapshot, address, coupon, priced, discount, shipping, attributes)
        logger.debug(
            "Order assembled",
            order_number=order.order_number,
            sub_total=order.sub_total,
            discount_total=order.discount_total,
            shipping_total=order.shipping_total,
            total=order.total,
        )

        self._checkpoint()
        return commit_checkout(context, snapshot, address, coupon, priced, order)
