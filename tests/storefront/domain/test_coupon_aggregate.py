"""Domain tests for the Coupon aggregate."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.coupon.coupon import Coupon, CouponUsage
from storefront.coupon.events import CouponRedeemed

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _coupon(**overrides):
    values = {
        "code": "SAVE20",
        "fixed_amount": 20.0,
        "start_date": NOW - timedelta(days=1),
        "end_date": NOW + timedelta(days=1),
    }
    values.update(overrides)
    return Coupon(**values)


class TestWindow:
    def test_live_inside_window(self):
        assert _coupon().is_live_at(NOW)

    def test_start_is_inclusive(self):
        assert _coupon(start_date=NOW).is_live_at(NOW)

    def test_end_is_exclusive(self):
        assert not _coupon(end_date=NOW).is_live_at(NOW)

    def test_inactive_coupon_is_not_live(self):
        assert not _coupon(is_active=False).is_live_at(NOW)

    def test_end_must_follow_start(self):
        with pytest.raises(ValidationError) as exc:
            _coupon(start_date=NOW, end_date=NOW - timedelta(hours=1))
        assert "end_date" in exc.value.messages


class TestUsage:
    def test_unlimited_coupon_is_never_exhausted(self):
        assert not _coupon(times_used=1000).is_exhausted

    def test_exhausted_at_limit(self):
        assert _coupon(usage_limit=3, times_used=3).is_exhausted
        assert not _coupon(usage_limit=3, times_used=2).is_exhausted

    def test_redeem_increments_by_one(self):
        coupon = _coupon(usage_limit=3, times_used=2)
        usage = coupon.redeem("cust-001", "ord-001")
        assert coupon.times_used == 3
        assert coupon.version == 2
        assert isinstance(usage, CouponUsage)
        assert usage.customer_id == "cust-001"
        assert usage.order_id == "ord-001"
        assert isinstance(coupon._events[-1], CouponRedeemed)

    def test_redeem_at_limit_is_rejected(self):
        coupon = _coupon(usage_limit=1, times_used=1)
        with pytest.raises(ValidationError):
            coupon.redeem("cust-001", "ord-001")
        assert coupon.times_used == 1
