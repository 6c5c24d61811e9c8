"""Product aggregate: the catalogue snapshot that checkout prices and deducts stock from.

Catalogue maintenance (names, images, categories) belongs to the catalogue
collaborator. The storefront only needs the current price, the stock level,
the backorder flag and the attribute/value pairs that may be purchased. Every
change to those bumps ``version``, which checkout compares before committing.
"""

from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, HasMany, Identifier, Integer, String

from storefront.catalogue.events import ProductRepriced, ProductRestocked, StockDeducted
from storefront.domain import storefront


@storefront.entity(part_of="Product")
class ProductAttributeMapping:
    """A purchasable (attribute, value) pair for a product.

    ``value_id`` is empty for free-form attributes that have no closed value set.
    """

    attribute_id = Identifier(required=True)
    value_id = Identifier()


@storefront.aggregate
class Product:
    name = String(required=True, max_length=255)
    sku = String(max_length=50)
    price = Float(required=True, min_value=0.0)
    stock_quantity = Integer(default=0)
    allow_backorder = Boolean(default=False)
    attribute_mappings = HasMany(ProductAttributeMapping)
    version = Integer(default=1)

    def map_attribute(self, attribute_id, value_id=None):
        """Declare an (attribute, value) pair as purchasable for this product."""
        if self.allows(attribute_id, value_id):
            raise ValidationError({"attribute_mappings": ["Attribute value is already mapped"]})

        self.add_attribute_mappings(
            ProductAttributeMapping(
                attribute_id=attribute_id,
                value_id=value_id,
            )
        )
        self.version += 1

    def reprice(self, price):
        """Change the selling price. Orders already placed keep the price they were placed at."""
        if price is None or price < 0:
            raise ValidationError({"price": ["Price cannot be negative"]})

        previous = self.price
        self.price = price
        self.version += 1

        self.raise_(
            ProductRepriced(
                product_id=str(self.id),
                previous_price=previous,
                new_price=price,
            )
        )

    def allows(self, attribute_id, value_id):
        wanted = (str(attribute_id), str(value_id) if value_id else None)
        return any(
            (str(m.attribute_id), str(m.value_id) if m.value_id else None) == wanted for m in self.attribute_mappings
        )

    def can_fulfil(self, quantity):
        return self.allow_backorder or self.stock_quantity >= quantity

    def deduct_stock(self, quantity):
        """Take ``quantity`` units off the shelf, flooring at zero.

        Backorderable products keep their stock untouched.
        """
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be greater than zero"]})
        if self.allow_backorder:
            return

        previous = self.stock_quantity
        self.stock_quantity = max(previous - quantity, 0)
        self.version += 1

        self.raise_(
            StockDeducted(
                product_id=str(self.id),
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock_quantity,
            )
        )

    def restock(self, quantity):
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be greater than zero"]})

        self.stock_quantity += quantity
        self.version += 1

        self.raise_(
            ProductRestocked(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock_quantity,
            )
        )
