"""Domain tests for the Order aggregate: placement, totals and lifecycle."""

import pytest
from protean.exceptions import ValidationError
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.order.order import Order, OrderItemAttribute, OrderStatus, PaymentStatus


def _place(totals=None, attributes=None):
    return Order.place(
        order_number="ORD-20260301120000000-ABC123",
        customer_id="cust-001",
        items_data=[
            {
                "product_id": "prod-001",
                "product_name": "Desk Lamp",
                "unit_price": 100.0,
                "quantity": 2,
                "attributes": attributes or [],
            }
        ],
        totals=totals or {"sub_total": 200.0, "discount_total": 20.0, "shipping_total": 15.0, "total": 195.0},
        shipping_address_id="addr-001",
        shipping_method_id="ship-001",
        coupon_code="SAVE20",
    )


class TestPlacement:
    def test_place_creates_pending_order(self):
        order = _place()
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.total == 195.0
        assert order.tax_total == 0.0
        assert len(order.items) == 1
        assert order.items[0].line_total == 200.0

    def test_place_raises_order_placed(self):
        order = _place()
        event = order._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.order_number == order.order_number
        assert event.total == 195.0
        assert event.coupon_code == "SAVE20"

    def test_attribute_snapshots_survive(self):
        order = _place(
            attributes=[
                OrderItemAttribute(attribute_id="color", value_id="red", attribute_name="Color", value="Red"),
            ]
        )
        [snapshot] = order.items[0].selected_attributes
        assert snapshot.attribute_name == "Color"
        assert snapshot.value == "Red"

    def test_total_must_balance(self):
        with pytest.raises(ValidationError) as exc:
            _place(totals={"sub_total": 200.0, "discount_total": 20.0, "shipping_total": 15.0, "total": 200.0})
        assert "total" in exc.value.messages

    def test_discount_cannot_exceed_subtotal(self):
        with pytest.raises(ValidationError):
            _place(totals={"sub_total": 10.0, "discount_total": 20.0, "shipping_total": 10.0, "total": 0.0})

    def test_order_needs_items(self):
        with pytest.raises(ValidationError):
            Order.place(
                order_number="ORD-1",
                customer_id="cust-001",
                items_data=[],
                totals={"sub_total": 0.0, "discount_total": 0.0, "shipping_total": 0.0, "total": 0.0},
            )


class TestLifecycle:
    def test_happy_path_to_delivered(self):
        order = _place()
        for status in ["PaymentPending", "Paid", "Processing", "Packed", "Shipped", "Delivered"]:
            order.transition_to(status)
        assert order.status == OrderStatus.DELIVERED.value
        assert order.payment_status == PaymentStatus.PAID.value

    def test_transition_raises_event(self):
        order = _place()
        order.transition_to(OrderStatus.PAYMENT_PENDING.value)
        event = order._events[-1]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "Pending"
        assert event.new_status == "PaymentPending"

    def test_cannot_skip_states(self):
        order = _place()
        with pytest.raises(ValidationError):
            order.transition_to(OrderStatus.SHIPPED.value)

    @pytest.mark.parametrize("terminal", ["Cancelled", "Returned"])
    def test_reachable_from_pending(self, terminal):
        order = _place()
        order.transition_to(terminal)
        assert order.status == terminal

    def test_delivered_can_only_be_returned(self):
        order = _place()
        for status in ["PaymentPending", "Paid", "Processing", "Packed", "Shipped", "Delivered"]:
            order.transition_to(status)
        with pytest.raises(ValidationError):
            order.transition_to(OrderStatus.CANCELLED.value)
        order.transition_to(OrderStatus.RETURNED.value)

    @pytest.mark.parametrize("terminal", ["Cancelled", "Returned"])
    def test_terminal_states_are_final(self, terminal):
        order = _place()
        order.transition_to(terminal)
        with pytest.raises(ValidationError):
            order.transition_to(OrderStatus.PAYMENT_PENDING.value)
