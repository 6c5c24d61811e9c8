"""Who is checking out, and whether they still want to."""

import threading
from dataclasses import dataclass, field

from storefront.checkout.errors import CheckoutCancelled


class CancellationToken:
    """Cooperative cancellation flag shared between the caller and the workflow.

    The workflow polls it between stages and right before committing; it is
    never interrupted mid-write.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self):
        if self.is_cancelled:
            raise CheckoutCancelled()


@dataclass(frozen=True)
class CallerContext:
    """The authenticated customer on whose behalf checkout runs."""

    customer_id: str
    cancellation: CancellationToken = field(default_factory=CancellationToken)
