"""Result of a checkout attempt, for callers that prefer values over exceptions."""

from dataclasses import dataclass, field

from storefront.checkout.errors import FAILURE


@dataclass(frozen=True)
class CheckoutOutcome:
    succeeded: bool
    order_id: str | None = None
    order_number: str | None = None
    code: str | None = None
    category: str | None = None
    message: str | None = None
    errors: dict = field(default_factory=dict)

    @classmethod
    def success(cls, order):
        return cls(succeeded=True, order_id=str(order.id), order_number=order.order_number)

    @classmethod
    def from_error(cls, error):
        return cls(
            succeeded=False,
            code=error.code,
            category=error.category,
            message=error.message,
            errors=dict(error.messages),
        )

    @classmethod
    def failure(cls):
        return cls(
            succeeded=False,
            code="checkout_failed",
            category=FAILURE,
            message="Checkout failed. Please try again later.",
        )
