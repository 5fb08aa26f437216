"""
Nepify Storefront - Application Entry Point
=============================================
FastAPI app initialization, middleware, and router registration.
"""

import logging
import time as _time

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PayloadError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from common.api_client import ApiClient
from common.exceptions import NepifyError
from common.flash import FLASH_COOKIE, flash_middleware, read_flash_cookie
from modules.auth.deps import get_api

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("nepify.app")
request_logger = logging.getLogger("nepify.request")


# ==========================================
# Import routers
# ==========================================
from modules.catalog.routes import router as catalog_router  # noqa: E402
from modules.cart.routes import router as cart_router  # noqa: E402
from modules.customer.routes import router as customer_router  # noqa: E402
from modules.payment.routes import router as payment_router  # noqa: E402
from modules.order.routes import router as order_router  # noqa: E402
from modules.order.vendor_routes import router as order_vendor_router  # noqa: E402
from modules.review.routes import router as review_router  # noqa: E402
from modules.vendor.routes import router as vendor_router  # noqa: E402
from modules.shop.routes import router as shop_router  # noqa: E402


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="Nepify Storefront",
    description="Multi-vendor storefront over the Nepify REST API",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
)


# ==========================================
# Exception handlers: everything answers with the JSON envelope
# ==========================================
@app.exception_handler(NepifyError)
async def nepify_exception_handler(request: Request, exc: NepifyError):
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse({"success": False, "message": exc.message}, status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"success": False, "message": str(exc.detail)}, status_code=exc.status_code)


@app.exception_handler(PayloadError)
async def payload_exception_handler(request: Request, exc: PayloadError):
    # Upstream answered 2xx with a body that does not fit the expected shape
    logger.warning(f"{request.method} {request.url.path}: unexpected API payload ({exc.error_count()} invalid field(s))")
    return JSONResponse({"success": False, "message": "Unexpected response from server"}, status_code=502)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        {"success": False, "message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        status_code=422,
    )


# ==========================================
# Middleware: Flash Messages
# ==========================================
app.middleware("http")(flash_middleware)


# ==========================================
# Middleware: Request Log
# ==========================================
_SKIP_PATHS = ("/health", "/favicon.ico")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    path = request.url.path
    if any(path.startswith(p) for p in _SKIP_PATHS):
        return await call_next(request)

    start = _time.time()
    response = await call_next(request)
    elapsed_ms = int((_time.time() - start) * 1000)
    request_logger.info(f"{request.method} {path} → {response.status_code} ({elapsed_ms}ms)")
    return response


# ==========================================
# Register Routers
# ==========================================
app.include_router(catalog_router)
app.include_router(cart_router)
app.include_router(customer_router)
app.include_router(payment_router)
app.include_router(order_router)
app.include_router(order_vendor_router)
app.include_router(review_router)
app.include_router(vendor_router)
app.include_router(shop_router)


# ==========================================
# Health check
# ==========================================
@app.get("/health")
async def health(api: ApiClient = Depends(get_api)):
    """Storefront is up; also reports whether the remote API answers."""
    try:
        api.health()
        upstream = "ok"
    except NepifyError as e:
        logger.warning(f"Remote API health check failed: {e.message}")
        upstream = "unreachable"
    return {"status": "ok", "version": "1.0.0", "api": upstream}


# ==========================================
# Notifications (flash cookie, read once)
# ==========================================
@app.get("/notifications")
async def notifications(request: Request):
    messages = read_flash_cookie(request)
    response = JSONResponse({"success": True, "message": "", "data": messages})
    if request.cookies.get(FLASH_COOKIE):
        response.delete_cookie(FLASH_COOKIE)
    return response
