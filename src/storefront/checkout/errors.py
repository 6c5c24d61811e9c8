"""Checkout failures.

Every failure the workflow can report is a ``ValidationError`` subclass with a
stable ``code`` and a ``category``. Categories drive how callers react: the
HTTP layer maps them to status codes and ``place_order`` copies them into the
outcome.
"""

from protean.exceptions import ValidationError

VALIDATION = "validation"
CONFLICT = "conflict"
NOT_FOUND = "not_found"
CANCELLED = "cancelled"
FAILURE = "failure"


class CheckoutError(ValidationError):
    code = "checkout_failed"
    category = FAILURE
    field = "checkout"
    default_message = "Checkout failed"

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        super().__init__(errors or {self.field: [self.message]})


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
class InvalidAddress(CheckoutError):
    code = "invalid_address"
    category = VALIDATION
    field = "new_address"
    default_message = "The delivery address is invalid"


class AddressRequired(CheckoutError):
    code = "address_required"
    category = VALIDATION
    field = "shipping_address_id"
    default_message = "A shipping address id or a new address is required"


class InvalidQuantity(CheckoutError):
    code = "invalid_quantity"
    category = VALIDATION
    field = "quantity"
    default_message = "Quantity must be greater than zero"


# ---------------------------------------------------------------------------
# Conflicts with current state
# ---------------------------------------------------------------------------
class CartEmpty(CheckoutError):
    code = "cart_empty"
    category = CONFLICT
    field = "cart"
    default_message = "Cart is empty"


class InsufficientStock(CheckoutError):
    code = "insufficient_stock"
    category = CONFLICT
    field = "items"

    def __init__(self, product_name, requested, available):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product '{product_name}'. Requested {requested}, available {available}."
        )


class InvalidOrExpiredCoupon(CheckoutError):
    code = "invalid_coupon"
    category = CONFLICT
    field = "coupon_code"
    default_message = "Invalid or expired coupon"


class UsageLimitReached(CheckoutError):
    code = "coupon_usage_limit_reached"
    category = CONFLICT
    field = "coupon_code"
    default_message = "Coupon usage limit reached"


class InvalidAttributeSelection(CheckoutError):
    code = "invalid_attribute_selection"
    category = CONFLICT
    field = "attributes"

    def __init__(self, product_name, attribute_id, value_id):
        super().__init__(
            f"Invalid attribute selection for product '{product_name}'. "
            f"AttributeId={attribute_id}, ValueId={value_id or 'null'} is not allowed."
        )


class NoAttributesDefined(CheckoutError):
    code = "no_attributes_defined"
    category = CONFLICT
    field = "attributes"

    def __init__(self, product_name):
        super().__init__(f"No attributes are defined for product '{product_name}' but selections were supplied.")


class ConcurrencyConflict(CheckoutError):
    code = "concurrency_conflict"
    category = CONFLICT
    default_message = "Stock or coupon changed while placing the order, please retry"


# ---------------------------------------------------------------------------
# Missing references
# ---------------------------------------------------------------------------
class AddressNotFound(CheckoutError):
    code = "address_not_found"
    category = NOT_FOUND
    field = "shipping_address_id"
    default_message = "Address not found"


class ShippingMethodNotFound(CheckoutError):
    code = "shipping_method_not_found"
    category = NOT_FOUND
    field = "shipping_method_id"
    default_message = "Shipping method not found"


class CartLineNotFound(CheckoutError):
    code = "cart_line_not_found"
    category = NOT_FOUND
    field = "line_overrides"
    default_message = "Cart line not found"


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------
class CheckoutCancelled(CheckoutError):
    code = "checkout_cancelled"
    category = CANCELLED
    default_message = "Checkout was cancelled"
