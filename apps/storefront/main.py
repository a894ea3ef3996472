# apps/storefront/main.py
import logging
import time

from fastapi import FastAPI, Request

from apps.storefront.config import settings
from apps.storefront.db import StoreError
from apps.storefront.routes.loyalty import router as loyalty_router
from apps.storefront.services.errors import LoyaltyError
from apps.storefront.utils.envelope import error
from apps.storefront.utils.request_log import log_request_response

logging.basicConfig(level=settings.LOG_LEVEL)
log = logging.getLogger("storefront.main")

app = FastAPI(
    title="Storefront Loyalty",
    version=settings.STOREFRONT_VERSION,
    description="Customer loyalty points, tiers, and redemption",
)


# -------------------------------------------------------------------
# Error handling (stable envelopes, no stack leaks)
# -------------------------------------------------------------------
@app.exception_handler(LoyaltyError)
async def loyalty_error_handler(request: Request, exc: LoyaltyError):
    return error(exc.message, "loyalty_error", exc.status_code)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    log.warning("store failure on %s %s: %s", request.method, request.url.path, exc.message)
    return error(f"Data store request failed ({exc.table})", "store_error", 502)


# -------------------------------------------------------------------
# Request logging
# -------------------------------------------------------------------
@app.middleware("http")
async def request_logging(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    log_request_response(request, response, start)
    return response


# -------------------------------------------------------------------
# Routers
# -------------------------------------------------------------------
app.include_router(loyalty_router)


@app.get("/health")
def health_root():
    return {"ok": True, "loyalty_enabled": settings.SETTINGS["loyalty_enabled"]}


@app.get("/")
async def root():
    return {
        "status": "Storefront Loyalty Online",
        "version": settings.STOREFRONT_VERSION,
        "routes": ["/health", "/loyalty"],
    }


@app.on_event("startup")
async def startup_event():
    log.info("Storefront loyalty starting")
