"""Placing an order: the PlaceOrder command and the ``place_order`` entry point.

Both surfaces run the same ``CheckoutWorkflow``. A commit that loses a race
(``ConcurrencyConflict``) is retried from scratch, re-reading and re-validating
everything; ``STOREFRONT_COMMIT_ATTEMPTS`` bounds the total number of runs.
No other failure is retried.

``place_order`` never raises: expected failures become a ``CheckoutOutcome``
carrying the error code and category, anything else is logged and reported
as a generic failure. The command handler raises the typed errors instead.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.checkout import settings
from storefront.checkout.context import CallerContext
from storefront.checkout.errors import CheckoutError, ConcurrencyConflict
from storefront.checkout.outcome import CheckoutOutcome
from storefront.checkout.requests import PlaceOrderRequest
from storefront.checkout.workflow import CheckoutWorkflow
from storefront.domain import storefront
from storefront.order.order import Order
from storefront.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    shipping_address_id = Identifier()
    new_address = Text()  # JSON: address dict
    coupon_code = String(max_length=100)
    shipping_method_id = Identifier()
    line_overrides = Text()  # JSON: list of {line_id, quantity, attributes}


def _loads(payload):
    if not payload:
        return None
    return json.loads(payload) if isinstance(payload, str) else payload


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        request = PlaceOrderRequest.from_dict(
            {
                "shipping_address_id": command.shipping_address_id,
                "new_address": _loads(command.new_address),
                "coupon_code": command.coupon_code,
                "shipping_method_id": command.shipping_method_id,
                "line_overrides": _loads(command.line_overrides),
            }
        )
        order = run_checkout(CallerContext(customer_id=str(command.customer_id)), request)
        return str(order.id)


def run_checkout(context, request) -> Order:
    attempts = settings.commit_attempts()
    for attempt in range(1, attempts + 1):
        try:
            return CheckoutWorkflow(context).run(request)
        except ConcurrencyConflict:
            if attempt == attempts:
                raise
            logger.warning("Checkout conflicted with a concurrent change, retrying", attempt=attempt)


def place_order(context, request) -> CheckoutOutcome:
    add_context(customer_id=str(context.customer_id))
    try:
        order = run_checkout(context, request)
    except CheckoutError as exc:
        logger.info("Checkout rejected", code=exc.code, category=exc.category, reason=exc.message)
        return CheckoutOutcome.from_error(exc)
    except Exception:
        logger.exception("Checkout failed unexpectedly")
        return CheckoutOutcome.failure()
    else:
        logger.info("Order placed", order_id=str(order.id), order_number=order.order_number)
        return CheckoutOutcome.success(order)
    finally:
        clear_context()
