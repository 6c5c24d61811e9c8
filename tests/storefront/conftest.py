"""Shared fixtures for storefront tests: reference data, products, coupons and carts."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from storefront.cart.cart import ShoppingCart
from storefront.catalogue.attribute import ProductAttribute
from storefront.catalogue.product import Product
from storefront.coupon.coupon import Coupon
from storefront.customer.address_book import AddressBook
from storefront.geography.geography import City, Country
from storefront.shipping.shipping import ShippingMethod, ShippingZone


@pytest.fixture()
def customer_id():
    return "cust-001"


@pytest.fixture()
def country():
    country = Country(name="Egypt")
    current_domain.repository_for(Country).add(country)
    return country


@pytest.fixture()
def city(country):
    city = City(name="Cairo", country_id=country.id)
    current_domain.repository_for(City).add(city)
    return city


@pytest.fixture()
def other_city():
    """A city in a different country."""
    elsewhere = Country(name="Jordan")
    current_domain.repository_for(Country).add(elsewhere)
    city = City(name="Amman", country_id=elsewhere.id)
    current_domain.repository_for(City).add(city)
    return city


@pytest.fixture()
def make_product():
    def _make(name="Desk Lamp", price=100.0, stock=10, allow_backorder=False, mappings=()):
        product = Product(
            name=name,
            sku=f"SKU-{name.upper().replace(' ', '-')}",
            price=price,
            stock_quantity=stock,
            allow_backorder=allow_backorder,
        )
        for attribute_id, value_id in mappings:
            product.map_attribute(attribute_id, value_id)
        current_domain.repository_for(Product).add(product)
        return product

    return _make


@pytest.fixture()
def color():
    """A Color attribute with Red and Blue values."""
    attribute = ProductAttribute(name="Color")
    red = attribute.add_value("Red")
    blue = attribute.add_value("Blue")
    current_domain.repository_for(ProductAttribute).add(attribute)
    return {"attribute": attribute, "red": red, "blue": blue}


@pytest.fixture()
def make_coupon():
    def _make(code="SAVE20", **kwargs):
        now = datetime.now(UTC)
        values = {
            "code": code,
            "start_date": now - timedelta(days=1),
            "end_date": now + timedelta(days=1),
        }
        values.update(kwargs)
        coupon = Coupon(**values)
        current_domain.repository_for(Coupon).add(coupon)
        return coupon

    return _make


@pytest.fixture()
def make_shipping(country):
    def _make(cost=15.0, cost_type="Flat", threshold=None, is_default=True, city_id=None, name="Standard"):
        zone = ShippingZone(name=f"{name} zone", country_id=country.id, city_id=city_id)
        current_domain.repository_for(ShippingZone).add(zone)
        method = ShippingMethod(
            name=name,
            zone_id=zone.id,
            cost_type=cost_type,
            cost=cost,
            free_shipping_threshold=threshold,
            is_default=is_default,
        )
        current_domain.repository_for(ShippingMethod).add(method)
        return method

    return _make


@pytest.fixture()
def fill_cart(customer_id):
    """Create the customer's cart holding ``(product, quantity[, selections])`` lines."""

    def _fill(*lines, owner=None):
        cart = ShoppingCart.create(customer_id=owner or customer_id)
        for line in lines:
            product, quantity, *rest = line
            cart.add_item(product.id, quantity, rest[0] if rest else None)
        current_domain.repository_for(ShoppingCart).add(cart)
        return current_domain.repository_for(ShoppingCart).get(cart.id)

    return _fill


@pytest.fixture()
def saved_address(customer_id, country, city):
    book = AddressBook.open(customer_id)
    address = book.add_address(
        full_name="Sam Carter",
        country_id=country.id,
        city_id=city.id,
        street="12 Harbour Road",
        mobile_number="+201000000000",
        is_default=True,
    )
    current_domain.repository_for(AddressBook).add(book)
    return address


@pytest.fixture()
def new_address(country, city):
    return {
        "country_id": country.id,
        "city_id": city.id,
        "street": "7 Nile Street",
        "full_name": "Sam Carter",
        "mobile_number": "+201000000001",
        "is_default": True,
    }
