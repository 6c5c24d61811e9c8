"""Cart item management: commands and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.catalogue.selection import normalize_selections
from storefront.domain import storefront


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    attributes = Text()  # JSON: list of {attribute_id, value_id}


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        raw = json.loads(command.attributes) if isinstance(command.attributes, str) else command.attributes
        selections = normalize_selections(raw)

        product = current_domain.repository_for(Product).get(command.product_id)
        for selection in selections:
            if not product.allows(selection.attribute_id, selection.value_id):
                raise ValidationError(
                    {
                        "attributes": [
                            f"Invalid attribute selection. AttributeId={selection.attribute_id}, "
                            f"ValueId={selection.value_id or 'null'} is not allowed for this product."
                        ]
                    }
                )

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        item_id = cart.add_item(
            product_id=command.product_id,
            quantity=command.quantity,
            selections=selections,
        )
        repo.add(cart)
        return item_id

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.update_item_quantity(
            item_id=command.item_id,
            new_quantity=command.new_quantity,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.cart_id)
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)
