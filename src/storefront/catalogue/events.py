"""Domain events for the catalogue snapshot aggregates."""

from protean.fields import Float, Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="Product")
class StockDeducted:
    """Stock was taken off a product by a placed order."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)


@storefront.event(part_of="Product")
class ProductRestocked:
    """Units were added back to a product's stock."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    new_stock = Integer(required=True)


@storefront.event(part_of="Product")
class ProductRepriced:
    """The catalogue changed a product's selling price."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    previous_price = Float(required=True)
    new_price = Float(required=True)
