"""Repositories for shipping reference data."""

from storefront.domain import storefront
from storefront.shipping.shipping import ShippingMethod, ShippingZone


@storefront.repository(part_of=ShippingZone)
class ShippingZoneRepository:
    def zones_for(self, country_id: str) -> list[ShippingZone]:
        return self._dao.query.filter(country_id=str(country_id)).all().items


@storefront.repository(part_of=ShippingMethod)
class ShippingMethodRepository:
    def methods_in(self, zone_id: str) -> list[ShippingMethod]:
        return self._dao.query.filter(zone_id=str(zone_id)).all().items
