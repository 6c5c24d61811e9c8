"""Shopping Cart aggregate: the mutable basket that checkout turns into an Order.

A cart belongs to a registered customer or to a guest session. Each line holds
a product reference, a quantity and the attribute selections the shopper made
(e.g. Size=M, Color=Red). Prices are not stored on the cart: they float until
checkout reads the current catalogue price.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from storefront.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)
from storefront.catalogue.selection import dump_selections, load_selections, normalize_selections
from storefront.domain import storefront


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    attributes = Text()  # JSON array of {attribute_id, value_id}
    added_at = DateTime()

    @property
    def selections(self):
        return load_selections(self.attributes)


@storefront.aggregate
class ShoppingCart:
    customer_id = Identifier()  # Nullable for guest carts
    session_id = String(max_length=255)  # For guest cart identification
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id=None, session_id=None):
        if not customer_id and not session_id:
            raise ValidationError({"cart": ["A cart needs a customer or a guest session"]})

        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            session_id=session_id,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def find_item(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    def add_item(self, product_id, quantity, selections=None):
        """Add a product to the cart.

        A line with the same product and the same attribute selections absorbs
        the quantity instead of creating a second line.
        """
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be greater than zero"]})

        normalized = normalize_selections(selections)
        wanted = set(normalized)

        existing = next(
            (i for i in self.items if str(i.product_id) == str(product_id) and set(i.selections) == wanted),
            None,
        )

        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            item_id = str(existing.id)
        else:
            item = CartItem(
                product_id=product_id,
                quantity=quantity,
                attributes=dump_selections(normalized),
                added_at=now,
            )
            self.add_items(item)
            item_id = str(item.id)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=item_id,
                product_id=str(product_id),
                quantity=quantity,
                attributes=dump_selections(normalized),
            )
        )
        return item_id

    def update_item_quantity(self, item_id, new_quantity):
        """Update the quantity of an existing cart item."""
        item = self.find_item(item_id)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        """Remove an item from the cart."""
        item = self.find_item(item_id)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
            )
        )

    def clear(self, order_id=None):
        """Remove every line. Checkout calls this once the order is persisted."""
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                items_removed=removed,
                order_id=str(order_id) if order_id else None,
            )
        )
