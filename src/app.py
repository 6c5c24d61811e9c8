"""Storefront FastAPI application.

Serves cart maintenance, checkout and order lookups. Commands run
synchronously inside the storefront domain context, so a response is only
returned once the order (or the failure) is final.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload

``PROTEAN_ENV`` picks the config overlay from ``storefront/domain.toml``:
in-memory providers by default, PostgreSQL via ``DATABASE_URL`` in
production.
"""

import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.api import cart_router, checkout_router, order_router
from storefront.api.routes import STATUS_BY_CATEGORY
from storefront.checkout.errors import CheckoutError
from storefront.domain import storefront
from storefront.utils.logging import add_context, clear_context

storefront.init()

logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Storefront API",
    description="Shopping carts, checkout and order history",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Run each request inside the storefront domain with a request id bound to its logs."""
    request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
    add_context(request_id=request_id, path=request.url.path)
    try:
        with storefront.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-Id"] = request_id
    return response


@app.exception_handler(CheckoutError)
async def checkout_error_handler(request: Request, exc: CheckoutError):
    return JSONResponse(
        status_code=STATUS_BY_CATEGORY.get(exc.category, 500),
        content={"code": exc.code, "message": exc.message, "errors": exc.messages},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"errors": exc.messages})


@app.exception_handler(ObjectNotFoundError)
async def not_found_handler(request: Request, exc: ObjectNotFoundError):
    logger.info("Requested record does not exist", path=request.url.path)
    return JSONResponse(status_code=404, content={"detail": "Not found"})


app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(order_router)


@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
