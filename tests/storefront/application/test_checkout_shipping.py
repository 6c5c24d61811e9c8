"""Application tests for shipping method resolution."""

import pytest
from protean import current_domain
from storefront.checkout.addressing import ResolvedAddress
from storefront.checkout.errors import ShippingMethodNotFound
from storefront.checkout.shipping import quote_shipping, resolve_method
from storefront.shipping.shipping import ShippingMethod


@pytest.fixture()
def address(country, city):
    return ResolvedAddress(address_id="addr-001", country_id=str(country.id), city_id=str(city.id))


class TestExplicitMethod:
    def test_explicit_method(self, address, make_shipping):
        method = make_shipping(cost=5.0, is_default=False)
        assert resolve_method(address, method.id).id == method.id

    def test_explicit_method_must_exist(self, address):
        with pytest.raises(ShippingMethodNotFound):
            resolve_method(address, "missing")


class TestInferredMethod:
    def test_city_zone_preferred_over_country_zone(self, address, city, make_shipping):
        make_shipping(cost=20.0, name="Nationwide")
        local = make_shipping(cost=5.0, name="City courier", city_id=city.id)
        assert resolve_method(address).id == local.id

    def test_country_zone_when_no_city_zone(self, address, other_city, make_shipping):
        nationwide = make_shipping(cost=20.0, name="Nationwide")
        make_shipping(cost=5.0, name="Elsewhere", city_id=other_city.id)
        assert resolve_method(address).id == nationwide.id

    def test_default_method_wins_in_zone(self, address, make_shipping):
        first = make_shipping(cost=20.0, name="Express", is_default=False)
        default = ShippingMethod(name="Standard", zone_id=first.zone_id, cost=10.0, is_default=True)
        current_domain.repository_for(ShippingMethod).add(default)
        assert resolve_method(address).id == default.id

    def test_no_zone(self, address):
        assert resolve_method(address) is None

    def test_quote_without_method_is_free(self, address):
        quote = quote_shipping(address, None, 100)
        assert quote.method_id is None
        assert quote.cost == 0
