"""Pydantic request/response schemas for the Storefront API.

These are external contracts, kept separate from the checkout request
objects and the Protean commands they are translated into.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AttributeSelectionSchema(BaseModel):
    attribute_id: str
    value_id: str | None = None


class NewAddressSchema(BaseModel):
    country_id: str | None = None
    city_id: str | None = None
    street: str | None = None
    full_name: str | None = None
    mobile_number: str | None = None
    house_no: str | None = None
    is_default: bool = False


class LineOverrideSchema(BaseModel):
    line_id: str
    quantity: int | None = None
    attributes: list[AttributeSelectionSchema] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    customer_id: str | None = None
    session_id: str | None = None


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)
    attributes: list[AttributeSelectionSchema] = Field(default_factory=list)


class UpdateCartQuantityRequest(BaseModel):
    new_quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Checkout Schemas
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    shipping_address_id: str | None = None
    new_address: NewAddressSchema | None = None
    coupon_code: str | None = None
    shipping_method_id: str | None = None
    line_overrides: list[LineOverrideSchema] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address_id": None,
                    "new_address": {
                        "country_id": "country-001",
                        "city_id": "city-001",
                        "street": "12 Harbour Road",
                        "full_name": "Sam Carter",
                        "mobile_number": "+15550100",
                        "is_default": True,
                    },
                    "coupon_code": "WELCOME20",
                    "line_overrides": [],
                }
            ]
        }
    }


class CheckoutResponse(BaseModel):
    order_id: str
    order_number: str


class ErrorResponse(BaseModel):
    code: str
    category: str
    message: str
    errors: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Order Schemas
# ---------------------------------------------------------------------------
class UpdateOrderStatusRequest(BaseModel):
    status: str
    tracking_number: str | None = None


class OrderItemAttributeResponse(BaseModel):
    attribute_id: str
    value_id: str | None = None
    attribute_name: str
    value: str | None = None


class OrderItemResponse(BaseModel):
    item_id: str
    product_id: str
    product_name: str | None = None
    unit_price: float
    quantity: int
    attributes: list[OrderItemAttributeResponse] = Field(default_factory=list)


class OrderResponse(BaseModel):
    order_id: str
    order_number: str
    status: str
    payment_status: str
    sub_total: float
    discount_total: float
    shipping_total: float
    tax_total: float
    total: float
    coupon_code: str | None = None
    shipping_address_id: str | None = None
    shipping_method_id: str | None = None
    tracking_number: str | None = None
    placed_at: str | None = None
    items: list[OrderItemResponse] = Field(default_factory=list)


class IdResponse(BaseModel):
    id: str


class StatusResponse(BaseModel):
    status: str = "ok"
