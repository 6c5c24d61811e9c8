"""Repository for customer address books."""

from storefront.customer.address_book import AddressBook
from storefront.domain import storefront


@storefront.repository(part_of=AddressBook)
class AddressBookRepository:
    def for_customer(self, customer_id: str) -> AddressBook | None:
        results = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return results[0] if results else None
