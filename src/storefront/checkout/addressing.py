"""Resolve the delivery address: an existing one, or a new one for the address book."""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.checkout.errors import AddressNotFound, AddressRequired, InvalidAddress
from storefront.customer.address_book import AddressBook
from storefront.geography.geography import City

REQUIRED_FIELDS = {
    "country_id": "Country",
    "city_id": "City",
    "street": "Street",
    "full_name": "Full name",
    "mobile_number": "Mobile number",
}


@dataclass(frozen=True)
class ResolvedAddress:
    address_id: str
    country_id: str
    city_id: str
    # Set only when a new address was added; the commit step persists it.
    address_book: AddressBook | None = None


def resolve_address(context, request) -> ResolvedAddress:
    """An existing address id wins over a new-address payload when both are given."""
    if request.shipping_address_id:
        return _existing_address(context, request.shipping_address_id)
    if request.new_address is not None:
        return _new_address(context, request.new_address)
    raise AddressRequired()


def _existing_address(context, address_id):
    book = current_domain.repository_for(AddressBook).for_customer(context.customer_id)
    address = book.find(address_id) if book else None
    if address is None:
        raise AddressNotFound()
    return ResolvedAddress(
        address_id=str(address.id),
        country_id=str(address.country_id),
        city_id=str(address.city_id),
    )


def _new_address(context, payload):
    errors = {
        name: [f"{label} is required"]
        for name, label in REQUIRED_FIELDS.items()
        if not str(getattr(payload, name) or "").strip()
    }
    if errors:
        raise InvalidAddress(errors=errors)

    try:
        city = current_domain.repository_for(City).get(payload.city_id)
    except ObjectNotFoundError as exc:
        raise InvalidAddress(errors={"city_id": ["Unknown city"]}) from exc
    if str(city.country_id) != str(payload.country_id):
        raise InvalidAddress(errors={"city_id": ["City does not belong to the selected country"]})

    repo = current_domain.repository_for(AddressBook)
    book = repo.for_customer(context.customer_id) or AddressBook.open(context.customer_id)
    address = book.add_address(
        full_name=payload.full_name.strip(),
        country_id=payload.country_id,
        city_id=payload.city_id,
        street=payload.street.strip(),
        mobile_number=payload.mobile_number.strip(),
        house_no=payload.house_no,
        is_default=payload.is_default,
    )
    return ResolvedAddress(
        address_id=str(address.id),
        country_id=str(payload.country_id),
        city_id=str(payload.city_id),
        address_book=book,
    )
