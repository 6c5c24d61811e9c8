"""Stock check, subtotal and discount."""

from dataclasses import dataclass
from decimal import Decimal

from storefront.checkout.errors import InsufficientStock, InvalidQuantity
from storefront.shared.money import ZERO, percent_of, round_money


@dataclass(frozen=True)
class PricedLine:
    line_id: str
    product_id: str
    product_name: str
    unit_price: Decimal
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return round_money(self.unit_price * self.quantity)


@dataclass(frozen=True)
class PricedCart:
    lines: tuple[PricedLine, ...]
    subtotal: Decimal

    def line(self, line_id):
        return next((p for p in self.lines if p.line_id == line_id), None)


def effective_quantity(line, override) -> int:
    """The override when present and positive, otherwise the cart line quantity."""
    if override is not None and override.quantity is not None and override.quantity > 0:
        return override.quantity
    quantity = line.item.quantity
    if quantity is None or quantity <= 0:
        raise InvalidQuantity(errors={"quantity": [f"Quantity for cart line {line.line_id} must be greater than zero"]})
    return quantity


def price_lines(snapshot, overrides) -> PricedCart:
    """Check availability at the effective quantity and price every line at the current product price."""
    priced = []
    for line in snapshot.lines:
        quantity = effective_quantity(line, overrides.get(line.line_id))
        product = line.product
        if not product.can_fulfil(quantity):
            raise InsufficientStock(product.name, quantity, product.stock_quantity)

        priced.append(
            PricedLine(
                line_id=line.line_id,
                product_id=str(product.id),
                product_name=product.name,
                unit_price=round_money(product.price),
                quantity=quantity,
            )
        )

    subtotal = sum((p.line_total for p in priced), ZERO)
    return PricedCart(lines=tuple(priced), subtotal=round_money(subtotal))


def compute_discount(coupon, subtotal) -> Decimal:
    """Fixed amount plus percentage of the subtotal, clamped to ``[0, subtotal]``."""
    if coupon is None:
        return ZERO

    subtotal = round_money(subtotal)
    discount = round_money(coupon.fixed_amount)
    if coupon.percentage:
        discount += percent_of(subtotal, coupon.percentage)
    return min(max(discount, ZERO), subtotal)
