"""Repository for shopping carts."""

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def for_customer(self, customer_id: str) -> ShoppingCart | None:
        """The customer's cart, or None when they never created one."""
        results = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return results[0] if results else None

    def for_session(self, session_id: str) -> ShoppingCart | None:
        results = self._dao.query.filter(session_id=session_id).all().items
        return results[0] if results else None
