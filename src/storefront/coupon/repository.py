"""Repositories for coupons and their usage history."""

from storefront.coupon.coupon import Coupon, CouponUsage
from storefront.domain import storefront


@storefront.repository(part_of=Coupon)
class CouponRepository:
    def find_by_code(self, code: str) -> Coupon | None:
        """Exact, case-sensitive lookup by coupon code."""
        results = self._dao.query.filter(code=code).all().items
        return next((c for c in results if c.code == code), None)


@storefront.repository(part_of=CouponUsage)
class CouponUsageRepository:
    def count_for(self, coupon_id: str, customer_id: str) -> int:
        usages = self._dao.query.filter(coupon_id=str(coupon_id), customer_id=str(customer_id)).all().items
        return len(usages)
