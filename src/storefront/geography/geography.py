"""Country and city reference data used to validate delivery addresses."""

from protean.fields import Identifier, String

from storefront.domain import storefront


@storefront.aggregate
class Country:
    name = String(required=True, max_length=100)


@storefront.aggregate
class City:
    name = String(required=True, max_length=100)
    country_id = Identifier(required=True)
