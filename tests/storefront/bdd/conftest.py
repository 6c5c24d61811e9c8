"""Shared BDD fixtures and Given steps for checkout scenarios."""

import pytest
from pytest_bdd import given, parsers


@pytest.fixture()
def products():
    return {}


@pytest.fixture()
def result():
    """Container for the outcome of the When step."""
    return {"outcome": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:f} with {stock:d} in stock'))
def product_in_stock(products, make_product, name, price, stock):
    products[name] = make_product(name=name, price=price, stock=stock)


@given(parsers.cfparse("flat shipping costing {cost:f} free above {threshold:f}"))
def flat_shipping(make_shipping, cost, threshold):
    make_shipping(cost=cost, threshold=threshold)


@given("the customer has a saved default address")
def default_address(saved_address):
    return saved_address


@given(parsers.cfparse('the cart holds {quantity:d} of "{name}"'))
def cart_with_product(fill_cart, products, quantity, name):
    fill_cart((products[name], quantity))


@given(parsers.cfparse('a coupon "{code}" worth {amount:f} off'))
def fixed_coupon(make_coupon, code, amount):
    make_coupon(code=code, fixed_amount=amount)


@given(parsers.cfparse('a free shipping coupon "{code}" worth {amount:f} off'))
def free_shipping_coupon(make_coupon, code, amount):
    make_coupon(code=code, fixed_amount=amount, free_shipping=True)


@given(parsers.cfparse('a coupon "{code}" worth {amount:f} off and {percentage:d} percent'))
def combined_coupon(make_coupon, code, amount, percentage):
    make_coupon(code=code, fixed_amount=amount, percentage=float(percentage))


@given(parsers.cfparse('a coupon "{code}" worth {amount:f} off used {used:d} of {limit:d} times'))
def exhausted_coupon(make_coupon, code, amount, used, limit):
    make_coupon(code=code, fixed_amount=amount, times_used=used, usage_limit=limit)
