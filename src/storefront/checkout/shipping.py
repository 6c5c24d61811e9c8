"""Shipping method resolution and cost."""

from dataclasses import dataclass
from decimal import Decimal

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.checkout.errors import ShippingMethodNotFound
from storefront.shared.money import ZERO, percent_of, round_money
from storefront.shipping.shipping import ShippingCostType, ShippingMethod, ShippingZone

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ShippingQuote:
    method: ShippingMethod | None
    cost: Decimal

    @property
    def method_id(self):
        return str(self.method.id) if self.method else None


def resolve_method(address, method_id=None) -> ShippingMethod | None:
    """The explicitly chosen method, or one inferred from the delivery address.

    Zones restricted to the address's city are tried before country-wide
    zones. Within a zone the default method wins, else the first one.
    """
    method_repo = current_domain.repository_for(ShippingMethod)

    if method_id:
        try:
            return method_repo.get(method_id)
        except ObjectNotFoundError as exc:
            raise ShippingMethodNotFound() from exc

    zones = current_domain.repository_for(ShippingZone).zones_for(address.country_id)
    city_zones = [z for z in zones if z.city_id and str(z.city_id) == str(address.city_id)]
    country_zones = [z for z in zones if not z.city_id]

    for zone in city_zones + country_zones:
        methods = method_repo.methods_in(zone.id)
        if methods:
            return next((m for m in methods if m.is_default), methods[0])

    logger.info(
        "No shipping method could be inferred for address",
        country_id=address.country_id,
        city_id=address.city_id,
    )
    return None


def shipping_cost(method, subtotal, coupon=None) -> Decimal:
    if coupon is not None and coupon.free_shipping:
        return ZERO
    if method is None:
        return ZERO

    subtotal = round_money(subtotal)
    if method.free_shipping_threshold is not None and subtotal >= round_money(method.free_shipping_threshold):
        return ZERO

    if ShippingCostType(method.cost_type) == ShippingCostType.BY_TOTAL:
        return percent_of(subtotal, method.cost)
    # Flat, and ByWeight too: item weights are not tracked.
    return round_money(method.cost)


def quote_shipping(address, method_id, subtotal, coupon=None) -> ShippingQuote:
    method = resolve_method(address, method_id)
    return ShippingQuote(method=method, cost=shipping_cost(method, subtotal, coupon))
