"""Milkrun storefront FastAPI application.

Serves the ordering domain over HTTP; commands are processed synchronously
within each request.

Usage:
    uvicorn app:app --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ordering.domain import ordering

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
ordering.init()

from ordering.api import admin_router, coupon_router, order_router, payment_router  # noqa: E402
from ordering.api.errors import register_exception_handlers  # noqa: E402
from ordering.config import get_settings  # noqa: E402
from ordering.coupon.seed import seed_coupons  # noqa: E402
from ordering.utils.db import setup_db  # noqa: E402
from ordering.utils.logging import add_context, clear_context, get_logger  # noqa: E402

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_db(ordering)
    with ordering.domain_context():
        seed_coupons()
    logger.info("Milkrun API started", gateway_configured=get_settings().gateway_configured)
    yield


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Milkrun API",
    description="Milk delivery storefront: orders, payments and coupons",
    lifespan=lifespan,
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
    """Push the ordering domain context and bind request details to the log context."""
    add_context(request_id=request.headers.get("x-request-id") or uuid4().hex, path=request.url.path)
    try:
        with ordering.domain_context():
            response = await call_next(request)
    finally:
        clear_context()
    return response


register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(order_router)
app.include_router(payment_router)
app.include_router(coupon_router)
app.include_router(admin_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": ordering.name,
            "gateway_configured": get_settings().gateway_configured,
        }
    )
