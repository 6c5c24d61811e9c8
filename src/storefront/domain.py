"""Storefront bounded context: carts, catalogue snapshot, coupons, shipping and orders.

The checkout workflow that converts a customer's cart into a priced,
stock-consistent order lives in ``storefront.checkout``. Everything else in
this package is the reference data and aggregates that workflow reads from
and writes to.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
