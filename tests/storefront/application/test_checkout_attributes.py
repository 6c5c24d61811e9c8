"""Application tests for attribute selections flowing into order snapshots."""

from protean import current_domain
from storefront.catalogue.attribute import ProductAttribute
from storefront.catalogue.product import Product
from storefront.checkout.context import CallerContext
from storefront.checkout.placement import place_order
from storefront.checkout.requests import PlaceOrderRequest
from storefront.order.order import Order


def _checkout(customer_id, **request):
    return place_order(CallerContext(customer_id=customer_id), PlaceOrderRequest.from_dict(request))


def _pick(color, value):
    return {"attribute_id": color["attribute"].id, "value_id": color[value].id}


class TestAttributeSnapshots:
    def test_cart_selection_is_snapshotted(self, customer_id, make_product, color, fill_cart, saved_address):
        product = make_product(mappings=[(color["attribute"].id, color["red"].id)])
        fill_cart((product, 1, [_pick(color, "red")]))

        outcome = _checkout(customer_id, shipping_address_id=saved_address.id)

        order = current_domain.repository_for(Order).get(outcome.order_id)
        [snapshot] = order.items[0].selected_attributes
        assert snapshot.attribute_id == color["attribute"].id
        assert snapshot.value_id == color["red"].id
        assert snapshot.attribute_name == "Color"
        assert snapshot.value == "Red"

    def test_override_selection_replaces_cart_selection(
        self, customer_id, make_product, color, fill_cart, saved_address
    ):
        product = make_product(
            mappings=[(color["attribute"].id, color["red"].id), (color["attribute"].id, color["blue"].id)]
        )
        cart = fill_cart((product, 1, [_pick(color, "red")]))

        outcome = _checkout(
            customer_id,
            shipping_address_id=saved_address.id,
            line_overrides=[{"line_id": str(cart.items[0].id), "attributes": [_pick(color, "blue")]}],
        )

        order = current_domain.repository_for(Order).get(outcome.order_id)
        assert [a.value for a in order.items[0].selected_attributes] == ["Blue"]

    def test_duplicate_attribute_keeps_first(self, customer_id, make_product, color, fill_cart, saved_address):
        product = make_product(
            mappings=[(color["attribute"].id, color["red"].id), (color["attribute"].id, color["blue"].id)]
        )
        cart = fill_cart((product, 1))

        outcome = _checkout(
            customer_id,
            shipping_address_id=saved_address.id,
            line_overrides=[
                {"line_id": str(cart.items[0].id), "attributes": [_pick(color, "blue"), _pick(color, "red")]}
            ],
        )

        order = current_domain.repository_for(Order).get(outcome.order_id)
        assert [a.value for a in order.items[0].selected_attributes] == ["Blue"]

    def test_renaming_attribute_keeps_snapshot(self, customer_id, make_product, color, fill_cart, saved_address):
        product = make_product(mappings=[(color["attribute"].id, color["red"].id)])
        fill_cart((product, 1, [_pick(color, "red")]))
        outcome = _checkout(customer_id, shipping_address_id=saved_address.id)

        repo = current_domain.repository_for(ProductAttribute)
        attribute = repo.get(color["attribute"].id)
        attribute.name = "Colour"
        repo.add(attribute)

        order = current_domain.repository_for(Order).get(outcome.order_id)
        assert order.items[0].selected_attributes[0].attribute_name == "Color"


class TestInvalidSelections:
    def test_unmapped_pair_aborts_everything(self, customer_id, make_product, color, fill_cart, saved_address):
        product = make_product(stock=5, mappings=[(color["attribute"].id, color["red"].id)])
        cart = fill_cart((product, 1))

        outcome = _checkout(
            customer_id,
            shipping_address_id=saved_address.id,
            line_overrides=[{"line_id": str(cart.items[0].id), "attributes": [_pick(color, "blue")]}],
        )

        assert outcome.code == "invalid_attribute_selection"
        assert outcome.category == "conflict"
        assert "Desk Lamp" in outcome.message
        assert current_domain.repository_for(Order)._dao.query.all().items == []
        assert current_domain.repository_for(Product).get(product.id).stock_quantity == 5

    def test_product_without_attributes(self, customer_id, make_product, color, fill_cart, saved_address):
        product = make_product()
        cart = fill_cart((product, 1))

        outcome = _checkout(
            customer_id,
            shipping_address_id=saved_address.id,
            line_overrides=[{"line_id": str(cart.items[0].id), "attributes": [_pick(color, "red")]}],
        )

        assert outcome.code == "no_attributes_defined"
