"""Order aggregate: the immutable, priced result of a checkout.

Monetary fields are a snapshot taken at checkout and never change afterwards:
later price edits, coupon edits or catalogue renames do not touch history.
Only the status, payment status and tracking fields move after creation.

State Machine:
    PENDING → PAYMENT_PENDING → PAID → PROCESSING → PACKED → SHIPPED → DELIVERED
    CANCELLED and RETURNED are reachable from every non-terminal state
    (DELIVERED may only become RETURNED).
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.shared.money import round_money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PAYMENT_PENDING = "PaymentPending"
    PAID = "Paid"
    PROCESSING = "Processing"
    PACKED = "Packed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURNED = "Returned"


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    REFUNDED = "Refunded"
    FAILED = "Failed"


_FORWARD = [
    OrderStatus.PENDING,
    OrderStatus.PAYMENT_PENDING,
    OrderStatus.PAID,
    OrderStatus.PROCESSING,
    OrderStatus.PACKED,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]

# State machine transition map
_VALID_TRANSITIONS = {
    current: {following, OrderStatus.CANCELLED, OrderStatus.RETURNED}
    for current, following in zip(_FORWARD, _FORWARD[1:], strict=False)
}
_VALID_TRANSITIONS[OrderStatus.DELIVERED] = {OrderStatus.RETURNED}
_VALID_TRANSITIONS[OrderStatus.CANCELLED] = set()  # Terminal
_VALID_TRANSITIONS[OrderStatus.RETURNED] = set()  # Terminal


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class OrderItemAttribute:
    """Snapshot of one attribute choice on an order line.

    Display names are copied so that renaming an attribute or value in the
    catalogue never rewrites what the customer bought.
    """

    attribute_id = Identifier(required=True)
    value_id = Identifier()
    attribute_name = String(required=True, max_length=100)
    value = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    attributes = Text()  # JSON: list of OrderItemAttribute dicts

    @property
    def line_total(self):
        return float(round_money(round_money(self.unit_price) * self.quantity))

    @property
    def selected_attributes(self):
        if not self.attributes:
            return []
        return [OrderItemAttribute(**data) for data in json.loads(self.attributes)]


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    customer_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    items = HasMany(OrderItem)
    sub_total = Float(required=True, min_value=0.0)
    discount_total = Float(default=0.0, min_value=0.0)
    shipping_total = Float(default=0.0, min_value=0.0)
    tax_total = Float(default=0.0, min_value=0.0)
    total = Float(required=True, min_value=0.0)
    coupon_code = String(max_length=100)
    shipping_address_id = Identifier()
    shipping_method_id = Identifier()
    tracking_number = String(max_length=255)
    notes = Text()
    placed_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_balance(self):
        expected = round_money(self.sub_total) - round_money(self.discount_total) + round_money(self.shipping_total)
        if round_money(self.total) != expected:
            raise ValidationError({"total": ["Total must equal subtotal - discount + shipping"]})

    @invariant.post
    def discount_cannot_exceed_subtotal(self):
        if round_money(self.discount_total) > round_money(self.sub_total):
            raise ValidationError({"discount_total": ["Discount cannot exceed the subtotal"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        customer_id,
        items_data,
        totals,
        shipping_address_id=None,
        shipping_method_id=None,
        coupon_code=None,
    ):
        """Create a pending order from checkout data.

        Args:
            order_number: Human-facing unique number.
            customer_id: The customer placing the order.
            items_data: List of dicts with product_id, product_name, unit_price,
                        quantity and attributes (list of OrderItemAttribute).
            totals: Dict with sub_total, discount_total, shipping_total, total.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            sub_total=totals["sub_total"],
            discount_total=totals["discount_total"],
            shipping_total=totals["shipping_total"],
            total=totals["total"],
            coupon_code=coupon_code,
            shipping_address_id=shipping_address_id,
            shipping_method_id=shipping_method_id,
            placed_at=now,
            updated_at=now,
        )

        for data in items_data:
            order.add_items(
                OrderItem(
                    product_id=data["product_id"],
                    product_name=data.get("product_name"),
                    unit_price=data["unit_price"],
                    quantity=data["quantity"],
                    attributes=json.dumps([a.to_dict() for a in data.get("attributes", [])]),
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                item_count=len(items_data),
                sub_total=order.sub_total,
                discount_total=order.discount_total,
                shipping_total=order.shipping_total,
                total=order.total,
                coupon_code=coupon_code,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def transition_to(self, target_status):
        """Move the order to ``target_status`` if the state machine allows it."""
        current = OrderStatus(self.status)
        target = OrderStatus(target_status)
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        if target == OrderStatus.PAID:
            self.payment_status = PaymentStatus.PAID.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
