"""Storefront API package."""

from storefront.api.routes import cart_router, checkout_router, order_router

__all__ = ["cart_router", "checkout_router", "order_router"]
