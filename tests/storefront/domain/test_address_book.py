"""Domain tests for the AddressBook aggregate and its single-default rule."""

from protean import current_domain
from storefront.customer.address_book import AddressBook
from storefront.customer.events import AddressAdded


def _add(book, is_default, street="1 Main St"):
    return book.add_address(
        full_name="Sam Carter",
        country_id="country-1",
        city_id="city-1",
        street=street,
        mobile_number="+15550100",
        is_default=is_default,
    )


class TestAddressBook:
    def test_add_address(self):
        book = AddressBook.open("cust-001")
        address = _add(book, is_default=False)
        assert book.find(address.id) == address
        assert isinstance(book._events[-1], AddressAdded)

    def test_new_default_clears_previous_default(self):
        book = AddressBook.open("cust-001")
        first = _add(book, is_default=True, street="1 Main St")
        second = _add(book, is_default=True, street="2 Main St")
        assert book.default_address == second
        assert book.find(first.id).is_default is False
        assert len([a for a in book.addresses if a.is_default]) == 1

    def test_non_default_leaves_existing_default(self):
        book = AddressBook.open("cust-001")
        first = _add(book, is_default=True)
        _add(book, is_default=False, street="2 Main St")
        assert book.default_address == first

    def test_find_unknown_address(self):
        book = AddressBook.open("cust-001")
        assert book.find("missing") is None


class TestStoredAddressBook:
    def test_new_default_on_reloaded_book(self):
        repo = current_domain.repository_for(AddressBook)
        book = AddressBook.open("cust-001")
        first = _add(book, is_default=True)
        repo.add(book)

        book = repo.for_customer("cust-001")
        second = _add(book, is_default=True, street="2 Main St")

        assert len(book.addresses) == 2
        assert [str(a.id) for a in book.addresses if a.is_default] == [str(second.id)]

        repo.add(book)
        stored = repo.for_customer("cust-001")
        assert stored.find(first.id).is_default is False
        assert str(stored.default_address.id) == str(second.id)

    def test_non_default_on_reloaded_book_keeps_default(self):
        repo = current_domain.repository_for(AddressBook)
        book = AddressBook.open("cust-001")
        first = _add(book, is_default=True)
        repo.add(book)

        book = repo.for_customer("cust-001")
        _add(book, is_default=False, street="2 Main St")
        repo.add(book)

        stored = repo.for_customer("cust-001")
        assert len(stored.addresses) == 2
        assert str(stored.default_address.id) == str(first.id)
