"""ProductAttribute aggregate: data-driven attribute definitions such as Color or Size."""

from protean.exceptions import ValidationError
from protean.fields import HasMany, String

from storefront.domain import storefront


@storefront.entity(part_of="ProductAttribute")
class AttributeValue:
    """One allowed value of an attribute, e.g. "Red" for Color."""

    value = String(required=True, max_length=100)


@storefront.aggregate
class ProductAttribute:
    name = String(required=True, max_length=100)
    values = HasMany(AttributeValue)

    def add_value(self, value):
        if any(v.value == value for v in self.values):
            raise ValidationError({"values": [f"Value '{value}' already exists for {self.name}"]})

        attribute_value = AttributeValue(value=value)
        self.add_values(attribute_value)
        return attribute_value

    def value_named(self, value_id):
        if not value_id:
            return None
        match = next((v for v in self.values if str(v.id) == str(value_id)), None)
        return match.value if match else None
