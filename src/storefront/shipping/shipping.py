"""Shipping zones and methods.

A zone covers a country, optionally narrowed to one city. Methods belong to a
zone; the method flagged ``is_default`` is picked when checkout has to infer
one from the delivery address.
"""

from enum import Enum

from protean.fields import Boolean, Float, Identifier, String

from storefront.domain import storefront


class ShippingCostType(Enum):
    FLAT = "Flat"
    BY_TOTAL = "ByTotal"
    BY_WEIGHT = "ByWeight"


@storefront.aggregate
class ShippingZone:
    name = String(max_length=100)
    country_id = Identifier(required=True)
    city_id = Identifier()  # Empty for a country-wide zone


@storefront.aggregate
class ShippingMethod:
    name = String(required=True, max_length=100)
    zone_id = Identifier(required=True)
    cost_type = String(choices=ShippingCostType, default=ShippingCostType.FLAT.value)
    cost = Float(default=0.0, min_value=0.0)
    free_shipping_threshold = Float(min_value=0.0)
    is_default = Boolean(default=False)
    estimated_time = String(max_length=100)
