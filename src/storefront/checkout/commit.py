"""Apply a validated checkout: deduct stock, redeem the coupon, persist the order, clear the cart.

Everything runs in one ``UnitOfWork``. Each record checkout relies on is read
again and its ``version`` compared with the one seen during validation; any
difference means another request changed it in the meantime, and the whole
commit is abandoned with ``ConcurrencyConflict``. All checks happen before the
first write.
"""

import structlog
from protean import UnitOfWork
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.checkout.errors import ConcurrencyConflict, UsageLimitReached
from storefront.coupon.coupon import Coupon, CouponUsage
from storefront.customer.address_book import AddressBook
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


def commit_checkout(context, snapshot, address, coupon, priced, order) -> Order:
    try:
        with UnitOfWork():
            context.cancellation.raise_if_cancelled()

            products = _current_products(snapshot)
            current_coupon = _current_coupon(coupon)
            cart = _current_cart(snapshot)

            context.cancellation.raise_if_cancelled()

            product_repo = current_domain.repository_for(Product)
            for line in priced.lines:
                product = products[line.product_id]
                if not product.allow_backorder:
                    product.deduct_stock(line.quantity)
            for product in products.values():
                product_repo.add(product)

            if current_coupon is not None:
                usage = current_coupon.redeem(context.customer_id, order.id)
                current_domain.repository_for(Coupon).add(current_coupon)
                current_domain.repository_for(CouponUsage).add(usage)

            if address.address_book is not None:
                current_domain.repository_for(AddressBook).add(address.address_book)

            current_domain.repository_for(Order).add(order)

            cart.clear(order_id=order.id)
            current_domain.repository_for(ShoppingCart).add(cart)
    except ExpectedVersionError as exc:
        raise ConcurrencyConflict() from exc

    logger.info(
        "Checkout committed",
        order_id=str(order.id),
        order_number=order.order_number,
        customer_id=str(context.customer_id),
        total=order.total,
    )
    return order


def _current_products(snapshot):
    repo = current_domain.repository_for(Product)
    products = {}
    for line in snapshot.lines:
        product_id = str(line.product.id)
        if product_id in products:
            continue
        product = repo.get(product_id)
        if product.version != line.product.version:
            logger.warning(
                "Product changed during checkout",
                product_id=product_id,
                expected_version=line.product.version,
                actual_version=product.version,
            )
            raise ConcurrencyConflict()
        products[product_id] = product
    return products


def _current_coupon(coupon):
    if coupon is None:
        return None

    current = current_domain.repository_for(Coupon).get(coupon.id)
    if current.version != coupon.version:
        logger.warning(
            "Coupon changed during checkout",
            coupon_id=str(coupon.id),
            expected_version=coupon.version,
            actual_version=current.version,
        )
        raise ConcurrencyConflict()
    if current.is_exhausted:
        raise UsageLimitReached()
    return current


def _current_cart(snapshot):
    cart = current_domain.repository_for(ShoppingCart).get(snapshot.cart.id)
    expected = {(str(i.id), i.quantity) for i in snapshot.cart.items}
    if {(str(i.id), i.quantity) for i in cart.items} != expected:
        logger.warning("Cart changed during checkout", cart_id=str(cart.id))
        raise ConcurrencyConflict()
    return cart
