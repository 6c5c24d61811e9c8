"""AddressBook aggregate: a customer's saved delivery addresses.

Profile management belongs to the identity collaborator; the storefront keeps
only what checkout needs. At most one address is the default: saving a new
default clears the flag on every other address in the same change.
"""

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, HasMany, Identifier, String

from storefront.customer.events import AddressAdded
from storefront.domain import storefront


@storefront.entity(part_of="AddressBook")
class UserAddress:
    """A delivery address belonging to exactly one customer."""

    full_name = String(required=True, max_length=200)
    country_id = Identifier(required=True)
    city_id = Identifier(required=True)
    street = String(required=True, max_length=255)
    house_no = String(max_length=50)
    mobile_number = String(required=True, max_length=30)
    is_default = Boolean(default=False)


@storefront.aggregate
class AddressBook:
    customer_id = Identifier(required=True)
    addresses = HasMany(UserAddress)

    @invariant.post
    def at_most_one_default_address(self):
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) > 1:
            raise ValidationError({"addresses": ["Only one address can be marked as default"]})

    @classmethod
    def open(cls, customer_id):
        return cls(customer_id=customer_id)

    def find(self, address_id):
        return next((a for a in self.addresses if str(a.id) == str(address_id)), None)

    @property
    def default_address(self):
        return next((a for a in self.addresses if a.is_default), None)

    def add_address(self, full_name, country_id, city_id, street, mobile_number, house_no=None, is_default=False):
        with atomic_change(self):
            address = UserAddress(
                full_name=full_name,
                country_id=country_id,
                city_id=city_id,
                street=street,
                house_no=house_no,
                mobile_number=mobile_number,
                is_default=is_default,
            )
            self.add_addresses(address)

            # Adding resets the loaded children, so clear the old default on the fresh list
            if is_default:
                for other in self.addresses:
                    if other.is_default and str(other.id) != str(address.id):
                        other.is_default = False

        self.raise_(
            AddressAdded(
                customer_id=str(self.customer_id),
                address_id=str(address.id),
                city_id=str(city_id),
                is_default=is_default,
            )
        )
        return address
