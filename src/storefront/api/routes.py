"""FastAPI routes for the Storefront: carts, checkout and orders.

The caller's identity arrives in the ``X-Customer-Id`` header, set by the
authentication gateway in front of this service.
"""

import asyncio
import json

import structlog
from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddToCartRequest,
    CheckoutRequest,
    CheckoutResponse,
    CreateCartRequest,
    ErrorResponse,
    IdResponse,
    OrderItemAttributeResponse,
    OrderItemResponse,
    OrderResponse,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
)
from storefront.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.management import ClearCart, CreateCart
from storefront.checkout.context import CallerContext
from storefront.checkout.errors import CANCELLED, CONFLICT, FAILURE, NOT_FOUND, VALIDATION
from storefront.checkout.placement import place_order
from storefront.checkout.requests import PlaceOrderRequest
from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.status import UpdateOrderStatus

STATUS_BY_CATEGORY = {
    VALIDATION: 400,
    NOT_FOUND: 404,
    CONFLICT: 409,
    CANCELLED: 499,  # Client closed request
    FAILURE: 500,
}

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.post("", status_code=201, response_model=IdResponse)
async def create_cart(body: CreateCartRequest) -> IdResponse:
    command = CreateCart(
        customer_id=body.customer_id,
        session_id=body.session_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@cart_router.post("/{cart_id}/items", status_code=201, response_model=IdResponse)
async def add_cart_item(cart_id: str, body: AddToCartRequest) -> IdResponse:
    command = AddToCart(
        cart_id=cart_id,
        product_id=body.product_id,
        quantity=body.quantity,
        attributes=json.dumps([a.model_dump() for a in body.attributes]),
    )
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@cart_router.put("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def update_cart_item_quantity(cart_id: str, item_id: str, body: UpdateCartQuantityRequest) -> StatusResponse:
    command = UpdateCartQuantity(
        cart_id=cart_id,
        item_id=item_id,
        new_quantity=body.new_quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, item_id: str) -> StatusResponse:
    current_domain.process(RemoveFromCart(cart_id=cart_id, item_id=item_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items", response_model=StatusResponse)
async def clear_cart(cart_id: str) -> StatusResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


DISCONNECT_POLL_SECONDS = 0.05


async def _cancel_on_disconnect(request: Request, cancellation):
    """Flip the checkout's cancellation token as soon as the client goes away."""
    while not cancellation.is_cancelled:
        if await request.is_disconnected():
            logger.info("Client disconnected during checkout")
            cancellation.cancel()
            return
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


def _place_order_in_domain(context, place_request):
    # Worker threads start without the request's domain context
    with storefront.domain_context():
        return place_order(context, place_request)


@checkout_router.post(
    "",
    status_code=201,
    response_model=CheckoutResponse,
    responses={status: {"model": ErrorResponse} for status in STATUS_BY_CATEGORY.values()},
)
async def checkout(
    body: CheckoutRequest,
    request: Request,
    x_customer_id: str = Header(...),
):
    """Turn the caller's cart into a pending order.

    The workflow runs in a worker thread so the event loop can keep watching
    the connection; a disconnect before the commit rolls the checkout back.
    """
    context = CallerContext(customer_id=x_customer_id)
    place_request = PlaceOrderRequest.from_dict(body.model_dump())

    watcher = asyncio.create_task(_cancel_on_disconnect(request, context.cancellation))
    try:
        outcome = await run_in_threadpool(_place_order_in_domain, context, place_request)
    finally:
        watcher.cancel()

    if not outcome.succeeded:
        error = ErrorResponse(
            code=outcome.code,
            category=outcome.category,
            message=outcome.message,
            errors=outcome.errors,
        )
        return JSONResponse(status_code=STATUS_BY_CATEGORY.get(outcome.category, 500), content=error.model_dump())

    return CheckoutResponse(order_id=outcome.order_id, order_number=outcome.order_number)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        status=order.status,
        payment_status=order.payment_status,
        sub_total=order.sub_total,
        discount_total=order.discount_total,
        shipping_total=order.shipping_total,
        tax_total=order.tax_total or 0.0,
        total=order.total,
        coupon_code=order.coupon_code,
        shipping_address_id=str(order.shipping_address_id) if order.shipping_address_id else None,
        shipping_method_id=str(order.shipping_method_id) if order.shipping_method_id else None,
        tracking_number=order.tracking_number,
        placed_at=order.placed_at.isoformat() if order.placed_at else None,
        items=[
            OrderItemResponse(
                item_id=str(item.id),
                product_id=str(item.product_id),
                product_name=item.product_name,
                unit_price=item.unit_price,
                quantity=item.quantity,
                attributes=[OrderItemAttributeResponse(**a.to_dict()) for a in item.selected_attributes],
            )
            for item in order.items
        ],
    )


@order_router.get("/me", response_model=list[OrderResponse])
async def my_orders(x_customer_id: str = Header(...)) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).for_customer(x_customer_id)
    return [_order_response(order) for order in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, x_customer_id: str = Header(...)) -> OrderResponse:
    try:
        order = current_domain.repository_for(Order).owned_by(order_id, x_customer_id)
    except ObjectNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Order not found") from exc
    return _order_response(order)


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        tracking_number=body.tracking_number,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
