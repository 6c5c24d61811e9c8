"""Turn the validated pieces of a checkout into an Order aggregate."""

from datetime import UTC, datetime
from uuid import uuid4

from storefront.checkout import settings
from storefront.checkout.errors import CheckoutError
from storefront.order.order import Order, OrderItemAttribute
from storefront.shared.money import ZERO, as_float, round_money


def generate_order_number(now=None) -> str:
    """``ORD-<utc timestamp to the millisecond>-<6 hex chars>``."""
    now = now or datetime.now(UTC)
    stamp = now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 1000:03d}"
    return f"{settings.order_number_prefix()}-{stamp}-{uuid4().hex[:6].upper()}"


def assemble_order(context, snapshot, address, coupon, priced, discount, shipping, attributes) -> Order:
    items_data = []
    for line in snapshot.lines:
        priced_line = priced.line(line.line_id)
        if priced_line is None:
            raise CheckoutError(f"Cart line {line.line_id} was not priced")

        items_data.append(
            {
                "product_id": priced_line.product_id,
                "product_name": priced_line.product_name,
                "unit_price": as_float(priced_line.unit_price),
                "quantity": priced_line.quantity,
                "attributes": [
                    OrderItemAttribute(
                        attribute_id=a.attribute_id,
                        value_id=a.value_id,
                        attribute_name=a.attribute_name,
                        value=a.value,
                    )
                    for a in attributes.get(line.line_id, [])
                ],
            }
        )

    sub_total = round_money(priced.subtotal)
    discount = round_money(discount)
    shipping_total = round_money(shipping.cost)
    total = sub_total - discount + shipping_total
    if total < ZERO:
        raise CheckoutError("Order total cannot be negative")

    return Order.place(
        order_number=generate_order_number(),
        customer_id=context.customer_id,
        items_data=items_data,
        totals={
            "sub_total": as_float(sub_total),
            "discount_total": as_float(discount),
            "shipping_total": as_float(shipping_total),
            "total": as_float(total),
        },
        shipping_address_id=address.address_id,
        shipping_method_id=shipping.method_id,
        coupon_code=coupon.code if coupon else None,
    )
