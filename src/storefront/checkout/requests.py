"""Input to a checkout: where to ship, which coupon, and per-line overrides."""

from dataclasses import dataclass, field

from storefront.catalogue.selection import AttributeSelection, normalize_selections


@dataclass(frozen=True)
class NewAddress:
    country_id: str | None = None
    city_id: str | None = None
    street: str | None = None
    full_name: str | None = None
    mobile_number: str | None = None
    house_no: str | None = None
    is_default: bool = False

    @classmethod
    def from_dict(cls, data):
        return cls(
            country_id=data.get("country_id"),
            city_id=data.get("city_id"),
            street=data.get("street"),
            full_name=data.get("full_name"),
            mobile_number=data.get("mobile_number"),
            house_no=data.get("house_no"),
            is_default=bool(data.get("is_default", False)),
        )


@dataclass(frozen=True)
class LineOverride:
    """Checkout-time choices for one cart line. The cart itself is not changed.

    An empty ``attributes`` tuple means "use what is stored on the cart line".
    """

    line_id: str
    quantity: int | None = None
    attributes: tuple[AttributeSelection, ...] = ()

    @classmethod
    def from_dict(cls, data):
        return cls(
            line_id=str(data["line_id"]),
            quantity=data.get("quantity"),
            attributes=tuple(normalize_selections(data.get("attributes"))),
        )


@dataclass(frozen=True)
class PlaceOrderRequest:
    shipping_address_id: str | None = None
    new_address: NewAddress | None = None
    coupon_code: str | None = None
    shipping_method_id: str | None = None
    line_overrides: tuple[LineOverride, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data):
        new_address = data.get("new_address")
        return cls(
            shipping_address_id=data.get("shipping_address_id"),
            new_address=NewAddress.from_dict(new_address) if new_address else None,
            coupon_code=data.get("coupon_code"),
            shipping_method_id=data.get("shipping_method_id"),
            line_overrides=tuple(LineOverride.from_dict(o) for o in data.get("line_overrides") or []),
        )
