"""Checkout knobs read from the environment."""

import os

TRUTHY = {"1", "true", "yes", "on"}


def order_number_prefix() -> str:
    return os.getenv("STOREFRONT_ORDER_NUMBER_PREFIX", "ORD")


def commit_attempts() -> int:
    """How many times ``place_order`` runs the workflow when commits conflict."""
    return max(int(os.getenv("STOREFRONT_COMMIT_ATTEMPTS", "2")), 1)


def enforce_per_user_coupon_limit() -> bool:
    # Off by default: historically only the global usage limit was enforced.
    return os.getenv("STOREFRONT_ENFORCE_PER_USER_COUPON_LIMIT", "false").strip().lower() in TRUTHY
