"""Repository for orders."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.order.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    def for_customer(self, customer_id: str) -> list[Order]:
        """The customer's orders, newest first."""
        orders = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return sorted(orders, key=lambda o: o.placed_at, reverse=True)

    def owned_by(self, order_id: str, customer_id: str) -> Order:
        """Fetch an order only if it belongs to ``customer_id``.

        Orders of other customers are reported as missing, never as forbidden.
        """
        order = self.get(order_id)
        if str(order.customer_id) != str(customer_id):
            raise ObjectNotFoundError(f"Order with id `{order_id}` does not exist")
        return order
