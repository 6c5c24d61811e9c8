"""Domain events for the AddressBook aggregate."""

from protean.fields import Boolean, Identifier

from storefront.domain import storefront


@storefront.event(part_of="AddressBook")
class AddressAdded:
    """A delivery address was saved to a customer's address book."""

    __version__ = "v1"

    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    city_id = Identifier(required=True)
    is_default = Boolean(required=True)
