"""Load the caller's cart together with the current product for each line."""

from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.cart import CartItem, ShoppingCart
from storefront.catalogue.product import Product
from storefront.checkout.errors import CartEmpty, CartLineNotFound

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CartLine:
    item: CartItem
    product: Product

    @property
    def line_id(self):
        return str(self.item.id)


@dataclass(frozen=True)
class CartSnapshot:
    cart: ShoppingCart
    lines: tuple[CartLine, ...]


def load_cart(context) -> CartSnapshot:
    cart = current_domain.repository_for(ShoppingCart).for_customer(context.customer_id)
    if cart is None or not cart.items:
        raise CartEmpty()

    product_repo = current_domain.repository_for(Product)
    lines = []
    for item in cart.items:
        try:
            product = product_repo.get(item.product_id)
        except ObjectNotFoundError as exc:
            logger.warning(
                "Cart references a product that no longer exists",
                cart_id=str(cart.id),
                product_id=str(item.product_id),
            )
            raise CartEmpty("One or more products in the cart no longer exist") from exc
        lines.append(CartLine(item=item, product=product))

    return CartSnapshot(cart=cart, lines=tuple(lines))


def index_overrides(snapshot, overrides) -> dict:
    """Map line id to its override. Unknown lines are rejected, repeats keep the first."""
    known = {line.line_id for line in snapshot.lines}
    indexed = {}
    for override in overrides:
        if override.line_id not in known:
            raise CartLineNotFound(f"Cart line {override.line_id} not found")
        indexed.setdefault(override.line_id, override)
    return indexed
